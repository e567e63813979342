"""Tests for the property image stores and backend selection."""

from __future__ import annotations

import tempfile
from io import BytesIO
from types import SimpleNamespace
from unittest import mock

from django.core.exceptions import ImproperlyConfigured
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase
from PIL import Image

from apps.properties.storage import LocalImageStore, S3ImageStore, build_image_store

FORMATS = ("JPEG", "PNG", "WEBP", "GIF")


def make_image(name: str = "photo.png", fmt: str = "PNG", size=(16, 16)) -> SimpleUploadedFile:
    buffer = BytesIO()
    Image.new("RGB", size, color=(200, 40, 40)).save(buffer, format=fmt)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=f"image/{fmt.lower()}")


def store_settings(**overrides) -> SimpleNamespace:
    values = {
        "IMAGE_STORAGE_BACKEND": "auto",
        "MEDIA_ROOT": tempfile.mkdtemp(),
        "MEDIA_URL": "/uploads/",
        "PROPERTY_IMAGE_MAX_SIZE": 1024 * 1024,
        "PROPERTY_IMAGE_FORMATS": FORMATS,
        "PROPERTY_IMAGE_MAX_DIMENSION": 1000,
        "S3_BUCKET_NAME": "",
        "S3_ACCESS_KEY": "",
        "S3_SECRET_KEY": "",
        "S3_REGION": "us-east-1",
        "S3_ENDPOINT_URL": None,
        "S3_PUBLIC_BASE": "",
        "S3_KEY_PREFIX": "property-rental/properties",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class LocalImageStoreTests(SimpleTestCase):
    def setUp(self) -> None:
        self.store = LocalImageStore(tempfile.mkdtemp(), "/uploads/", max_size=1024 * 1024, formats=FORMATS)

    def test_save_returns_public_reference(self) -> None:
        reference = self.store.save(make_image("holiday.jpg", "JPEG"))

        self.assertRegex(reference, r"^/uploads/properties/property-\d+-\d+\.jpg$")
        self.assertTrue(self.store.exists(reference))

    def test_extension_follows_real_format(self) -> None:
        reference = self.store.save(make_image("actually-png.jpg", "PNG"))

        self.assertTrue(reference.endswith(".png"))

    def test_rejects_non_images(self) -> None:
        upload = SimpleUploadedFile("evil.png", b"<?php echo 1; ?>", content_type="image/png")

        with self.assertRaises(ValueError):
            self.store.save(upload)

    def test_rejects_oversized_files(self) -> None:
        store = LocalImageStore(tempfile.mkdtemp(), "/uploads/", max_size=10, formats=FORMATS)

        with self.assertRaisesMessage(ValueError, "too large"):
            store.save(make_image())

    def test_rejects_disallowed_format(self) -> None:
        store = LocalImageStore(tempfile.mkdtemp(), "/uploads/", max_size=1024 * 1024, formats=("JPEG",))

        with self.assertRaisesMessage(ValueError, "Unsupported image format"):
            store.save(make_image(fmt="PNG"))

    def test_delete_is_idempotent(self) -> None:
        reference = self.store.save(make_image())

        self.store.delete(reference)
        self.store.delete(reference)

        self.assertFalse(self.store.exists(reference))

    def test_delete_many_keeps_going_after_failures(self) -> None:
        first = self.store.save(make_image("one.png"))
        second = self.store.save(make_image("two.png"))
        original_delete = self.store.delete

        def flaky_delete(reference):
            if reference == first:
                raise OSError("disk busy")
            original_delete(reference)

        with mock.patch.object(self.store, "delete", side_effect=flaky_delete):
            deleted = self.store.delete_many([first, second])

        self.assertEqual(deleted, 1)
        self.assertTrue(self.store.exists(first))
        self.assertFalse(self.store.exists(second))


class S3ImageStoreTests(SimpleTestCase):
    def setUp(self) -> None:
        self.client = mock.Mock()
        self.store = S3ImageStore(
            bucket_name="rentals",
            access_key="key",
            secret_key="secret",
            region="eu-west-1",
            client=self.client,
            max_dimension=100,
            max_size=5 * 1024 * 1024,
            formats=FORMATS,
        )

    def test_save_uploads_under_key_prefix(self) -> None:
        reference = self.store.save(make_image("room.png"))

        kwargs = self.client.put_object.call_args.kwargs
        self.assertEqual(kwargs["Bucket"], "rentals")
        self.assertTrue(kwargs["Key"].startswith("property-rental/properties/"))
        self.assertEqual(kwargs["ContentType"], "image/png")
        self.assertEqual(reference, f"https://rentals.s3.eu-west-1.amazonaws.com/{kwargs['Key']}")

    def test_large_images_are_downscaled(self) -> None:
        self.store.save(make_image("wide.jpg", "JPEG", size=(400, 200)))

        body = self.client.put_object.call_args.kwargs["Body"]
        with Image.open(BytesIO(body)) as img:
            self.assertEqual(img.size, (100, 50))

    def test_delete_extracts_key_from_url(self) -> None:
        url = "https://cdn.example.com/property-rental/properties/abc123.jpg"

        self.store.delete(url)

        self.client.delete_object.assert_called_once_with(
            Bucket="rentals", Key="property-rental/properties/abc123.jpg"
        )

    def test_delete_skips_foreign_references(self) -> None:
        self.store.delete("/uploads/properties/property-1-2.png")

        self.client.delete_object.assert_not_called()


class BuildImageStoreTests(SimpleTestCase):
    def test_auto_without_credentials_uses_local_disk(self) -> None:
        store = build_image_store(store_settings())

        self.assertIsInstance(store, LocalImageStore)

    def test_auto_ignores_placeholder_credentials(self) -> None:
        config = store_settings(
            S3_BUCKET_NAME="your_bucket_name", S3_ACCESS_KEY="your_access_key", S3_SECRET_KEY="your_secret_key"
        )

        self.assertIsInstance(build_image_store(config), LocalImageStore)

    def test_auto_with_credentials_uses_s3(self) -> None:
        config = store_settings(S3_BUCKET_NAME="rentals", S3_ACCESS_KEY="AKIA123", S3_SECRET_KEY="s3cr3t")

        with mock.patch("apps.properties.storage.boto3.client") as client_factory:
            store = build_image_store(config)

        self.assertIsInstance(store, S3ImageStore)
        client_factory.assert_called_once()

    def test_explicit_s3_without_credentials_fails(self) -> None:
        with self.assertRaises(ImproperlyConfigured):
            build_image_store(store_settings(IMAGE_STORAGE_BACKEND="s3"))

    def test_unknown_backend_fails(self) -> None:
        with self.assertRaises(ImproperlyConfigured):
            build_image_store(store_settings(IMAGE_STORAGE_BACKEND="ftp"))
