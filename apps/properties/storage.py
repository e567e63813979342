"""Image stores for property photos.

Two backends share one small interface: ``save`` an uploaded file and get
back the reference stored on the property, ``delete`` a reference. The
backend is chosen once at start-up by :func:`build_image_store` and handed
to the property services explicitly.
"""

from __future__ import annotations

import logging
import re
import secrets
import time
import uuid
from io import BytesIO
from typing import Iterable

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from django.core.exceptions import ImproperlyConfigured
from django.core.files.storage import FileSystemStorage
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

FORMAT_EXTENSIONS = {
    "JPEG": "jpg",
    "PNG": "png",
    "WEBP": "webp",
    "GIF": "gif",
}

CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
}

# Values shipped in sample .env files; treat them as "not configured".
PLACEHOLDER_VALUES = {
    "",
    "your_bucket_name",
    "your_access_key",
    "your_secret_key",
    "your_cloud_name",
    "your_api_key",
    "your_api_secret",
}


def validate_image(upload, *, max_size: int, formats: Iterable[str]) -> str:
    """Check size and real image format of an upload, return its file extension.

    Raises ``ValueError`` with a user-facing message.
    """
    size = getattr(upload, "size", None)
    if size is not None and size > max_size:
        raise ValueError(f"Image is too large. Maximum size is {max_size / 1024 / 1024:.0f} MB")

    upload.seek(0)
    try:
        with Image.open(upload) as img:
            image_format = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ValueError(f"Invalid image: {getattr(upload, 'name', 'upload')}") from e
    finally:
        upload.seek(0)

    if image_format not in formats:
        raise ValueError(f"Unsupported image format: {image_format}")
    return FORMAT_EXTENSIONS[image_format]


class ImageStore:
    """Base interface for property image backends."""

    backend_name = "base"

    def __init__(self, *, max_size: int, formats: Iterable[str]):
        self.max_size = max_size
        self.formats = tuple(formats)

    def validate(self, upload) -> str:
        return validate_image(upload, max_size=self.max_size, formats=self.formats)

    def save(self, upload) -> str:
        raise NotImplementedError

    def delete(self, reference: str) -> None:
        raise NotImplementedError

    def delete_many(self, references: Iterable[str]) -> int:
        """Best-effort removal; failures are logged and skipped."""
        deleted = 0
        for reference in references:
            try:
                self.delete(reference)
                deleted += 1
            except Exception as e:
                logger.error("Error deleting image %s from %s store: %s", reference, self.backend_name, e)
        return deleted

    @staticmethod
    def _unique_basename() -> str:
        return f"property-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"


class LocalImageStore(ImageStore):
    """Stores images on local disk under ``<MEDIA_ROOT>/properties``."""

    backend_name = "local"
    directory = "properties"

    def __init__(self, location, base_url: str, **kwargs):
        super().__init__(**kwargs)
        self.storage = FileSystemStorage(location=location, base_url=base_url)
        self.base_url = self.storage.base_url

    def save(self, upload) -> str:
        ext = self.validate(upload)
        name = self.storage.save(f"{self.directory}/{self._unique_basename()}.{ext}", upload)
        logger.info("Saved image locally: %s", name)
        return self.storage.url(name)

    def _name_from_reference(self, reference: str) -> str:
        if reference.startswith(self.base_url):
            return reference[len(self.base_url):]
        return reference.lstrip("/")

    def exists(self, reference: str) -> bool:
        return self.storage.exists(self._name_from_reference(reference))

    def delete(self, reference: str) -> None:
        name = self._name_from_reference(reference)
        if self.storage.exists(name):
            self.storage.delete(name)
            logger.info("Deleted local image: %s", name)


class S3ImageStore(ImageStore):
    """Stores images in an S3-compatible bucket (AWS, MinIO)."""

    backend_name = "s3"

    def __init__(
        self,
        *,
        bucket_name: str,
        access_key: str,
        secret_key: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        public_base: str = "",
        key_prefix: str = "property-rental/properties",
        max_dimension: int = 1000,
        client=None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.s3_client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url or None,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=BotoConfig(signature_version="s3v4"),
        )
        self.bucket_name = bucket_name
        self.endpoint_url = (endpoint_url or "").rstrip("/")
        self.region = region
        self.public_base = (public_base or "").rstrip("/")
        self.key_prefix = key_prefix.strip("/")
        self.max_dimension = max_dimension
        self._key_pattern = re.compile(rf"({re.escape(self.key_prefix)}/[^/?#]+)")

    @classmethod
    def from_settings(cls, config) -> "S3ImageStore":
        return cls(
            bucket_name=config.S3_BUCKET_NAME,
            access_key=config.S3_ACCESS_KEY,
            secret_key=config.S3_SECRET_KEY,
            region=config.S3_REGION,
            endpoint_url=config.S3_ENDPOINT_URL,
            public_base=config.S3_PUBLIC_BASE,
            key_prefix=config.S3_KEY_PREFIX,
            max_dimension=config.PROPERTY_IMAGE_MAX_DIMENSION,
            max_size=config.PROPERTY_IMAGE_MAX_SIZE,
            formats=config.PROPERTY_IMAGE_FORMATS,
        )

    def _limit_dimensions(self, upload, ext: str) -> bytes:
        """Downscale to fit ``max_dimension`` keeping the aspect ratio; GIFs are kept as-is."""
        upload.seek(0)
        raw = upload.read()
        if ext == "gif":
            return raw
        with Image.open(BytesIO(raw)) as img:
            if img.width <= self.max_dimension and img.height <= self.max_dimension:
                return raw
            img.thumbnail((self.max_dimension, self.max_dimension), Image.Resampling.LANCZOS)
            out = BytesIO()
            if ext == "jpg":
                img.convert("RGB").save(out, format="JPEG", quality=85, optimize=True)
            else:
                img.save(out, format=img.format or ext.upper())
            return out.getvalue()

    def url(self, key: str) -> str:
        if self.public_base:
            return f"{self.public_base}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket_name}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"

    def key_from_reference(self, reference: str) -> str | None:
        match = self._key_pattern.search(reference)
        return match.group(1) if match else None

    def save(self, upload) -> str:
        ext = self.validate(upload)
        key = f"{self.key_prefix}/{uuid.uuid4().hex}.{ext}"
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=self._limit_dimensions(upload, ext),
                ContentType=CONTENT_TYPES[ext],
                CacheControl="max-age=31536000",
                Metadata={"original_name": getattr(upload, "name", "") or ""},
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 client error: %s", e)
            raise
        logger.info("Uploaded image to S3: %s", key)
        return self.url(key)

    def delete(self, reference: str) -> None:
        key = self.key_from_reference(reference)
        if key is None:
            logger.warning("Not an S3 image reference, skipping: %s", reference)
            return
        self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        logger.info("Deleted S3 image: %s", key)


def s3_configured(config) -> bool:
    values = (
        getattr(config, "S3_BUCKET_NAME", ""),
        getattr(config, "S3_ACCESS_KEY", ""),
        getattr(config, "S3_SECRET_KEY", ""),
    )
    return all(value and value not in PLACEHOLDER_VALUES for value in values)


def build_image_store(config) -> ImageStore:
    """Resolve ``IMAGE_STORAGE_BACKEND`` (local, s3 or auto) into a store instance."""
    backend = str(getattr(config, "IMAGE_STORAGE_BACKEND", "auto")).lower()
    if backend == "auto":
        backend = "s3" if s3_configured(config) else "local"

    if backend == "s3":
        if not s3_configured(config):
            raise ImproperlyConfigured("IMAGE_STORAGE_BACKEND=s3 requires S3_BUCKET_NAME, S3_ACCESS_KEY and S3_SECRET_KEY")
        store = S3ImageStore.from_settings(config)
    elif backend == "local":
        store = LocalImageStore(
            config.MEDIA_ROOT,
            config.MEDIA_URL,
            max_size=config.PROPERTY_IMAGE_MAX_SIZE,
            formats=config.PROPERTY_IMAGE_FORMATS,
        )
    else:
        raise ImproperlyConfigured(f"Unknown IMAGE_STORAGE_BACKEND: {backend}")

    logger.info("Image storage backend: %s", store.backend_name)
    if store.backend_name == "local":
        logger.warning("Using local image storage; configure S3 for production")
    return store
