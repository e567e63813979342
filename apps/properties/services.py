"""Domain services for property listings and their images."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence, TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore

from apps.core.exceptions import ServiceError

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .models import Property
    from .storage import ImageStore

logger = logging.getLogger(__name__)


class ImageUploadError(ServiceError):
    """Raised when an uploaded file cannot be stored as a property image."""

    default_message = "Image upload failed"


def store_uploads(uploads: Sequence, *, image_store: "ImageStore") -> list[str]:
    """Save every upload and return the references in upload order.

    All-or-nothing: when one file fails, the ones already saved are removed.
    """

    max_files = getattr(settings, "PROPERTY_IMAGE_MAX_FILES", 5)
    if len(uploads) > max_files:
        raise ImageUploadError(f"You can upload up to {max_files} images")

    stored: list[str] = []
    try:
        for upload in uploads:
            stored.append(image_store.save(upload))
    except ValueError as e:
        discard_images(stored, image_store=image_store)
        raise ImageUploadError(str(e)) from e
    except Exception:
        discard_images(stored, image_store=image_store)
        raise
    return stored


def discard_images(references: Iterable[str], *, image_store: "ImageStore") -> None:
    references = list(references)
    if not references:
        return
    deleted = image_store.delete_many(references)
    logger.info("Discarded %s of %s property images", deleted, len(references))


def create_property(*, owner, serializer, uploads: Sequence, image_store: "ImageStore") -> "Property":
    """Persist a validated property for ``owner`` with its uploaded images."""

    images = store_uploads(uploads, image_store=image_store)
    try:
        with transaction.atomic():
            property_obj = serializer.save(owner=owner, images=images)
    except Exception:
        logger.warning("Property creation failed for user %s, rolling back %s images", owner.pk, len(images))
        discard_images(images, image_store=image_store)
        raise

    logger.info("Property %s created by user %s with %s images", property_obj.pk, owner.pk, len(images))
    return property_obj


def update_property(property_obj: "Property", *, serializer, uploads: Sequence, image_store: "ImageStore") -> "Property":
    """Apply a validated update; new uploads are appended to the existing images."""

    new_images = store_uploads(uploads, image_store=image_store)
    extra = {}
    if new_images:
        extra["images"] = list(property_obj.images or []) + new_images
    try:
        with transaction.atomic():
            property_obj = serializer.save(**extra)
    except Exception:
        discard_images(new_images, image_store=image_store)
        raise

    logger.info("Property %s updated, %s images added", property_obj.pk, len(new_images))
    return property_obj


def delete_property(property_obj: "Property", *, image_store: "ImageStore") -> None:
    """Delete the listing; its images are removed once the delete is committed."""

    images = list(property_obj.images or [])
    property_id = property_obj.pk
    with transaction.atomic():
        property_obj.delete()
        transaction.on_commit(lambda: discard_images(images, image_store=image_store))
    logger.info("Property %s deleted", property_id)
