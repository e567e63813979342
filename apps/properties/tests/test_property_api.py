"""Tests for property listing, details and owner-only writes."""

from __future__ import annotations

import json
from decimal import Decimal
from io import BytesIO
from pathlib import Path
from unittest import mock

from django.apps import apps as django_apps
from django.conf import settings
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image
from rest_framework import status
from rest_framework.test import APITestCase

from apps.properties.models import Property
from apps.properties.serializers import PropertyWriteSerializer
from apps.users.models import User

LIST_URL = "/api/properties"


def detail_url(property_id) -> str:
    return f"/api/properties/{property_id}"


def make_image(name: str = "photo.png", fmt: str = "PNG") -> SimpleUploadedFile:
    buffer = BytesIO()
    Image.new("RGB", (16, 16), color=(30, 120, 200)).save(buffer, format=fmt)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=f"image/{fmt.lower()}")


def stored_files() -> set[str]:
    directory = Path(settings.MEDIA_ROOT) / "properties"
    if not directory.exists():
        return set()
    return {path.name for path in directory.iterdir()}


def property_payload(**overrides) -> dict:
    payload = {
        "title": "Loft near the river",
        "description": "Bright loft with a view",
        "price": 150,
        "location": {
            "address": "1 River Rd",
            "city": "Lisbon",
            "country": "Portugal",
            "coordinates": {"latitude": 38.7223, "longitude": -9.1393},
        },
        "propertyType": "apartment",
        "bedrooms": 2,
        "amenities": ["WiFi", " WiFi ", "Pool", ""],
    }
    payload.update(overrides)
    return payload


class PropertyAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(email="owner@example.com", password="StrongPass123", name="Owner")
        self.other = User.objects.create_user(email="other@example.com", password="StrongPass123", name="Other")
        self.admin = User.objects.create_user(
            email="admin@example.com", password="StrongPass123", name="Admin", role=User.Role.ADMIN
        )
        self.image_store = django_apps.get_app_config("properties").image_store

    def create_property(self, owner=None, **fields) -> Property:
        defaults = {
            "title": "Cosy flat",
            "description": "Quiet street",
            "price": Decimal("100"),
            "address": "5 Main St",
            "city": "Porto",
            "country": "Portugal",
        }
        defaults.update(fields)
        return Property.objects.create(owner=owner or self.owner, **defaults)

    # Listing

    def test_list_is_paginated(self) -> None:
        for index in range(3):
            self.create_property(title=f"Flat {index}")

        response = self.client.get(LIST_URL, {"limit": 2})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        data = response.data["data"]
        self.assertTrue(response.data["success"])
        self.assertEqual(len(data["properties"]), 2)
        self.assertEqual(data["totalPages"], 2)
        self.assertEqual(data["currentPage"], 1)
        self.assertEqual(data["total"], 3)

    def test_page_past_the_end_is_empty(self) -> None:
        self.create_property()

        response = self.client.get(LIST_URL, {"page": 5})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["data"]["properties"], [])
        self.assertEqual(response.data["data"]["total"], 1)

    def test_filters_and_sorting(self) -> None:
        self.create_property(title="Cheap", price=Decimal("50"), city="Lisbon")
        self.create_property(title="Middle", price=Decimal("120"), city="LISBON")
        self.create_property(title="Pricey", price=Decimal("400"), city="Lisbon")
        self.create_property(title="Elsewhere", price=Decimal("120"), city="Madrid")

        response = self.client.get(
            LIST_URL, {"city": "lisbon", "minPrice": 60, "sortBy": "price", "order": "asc"}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        titles = [item["title"] for item in response.data["data"]["properties"]]
        self.assertEqual(titles, ["Middle", "Pricey"])

    def test_search_and_availability_filters(self) -> None:
        self.create_property(title="Beach house", is_available=True)
        self.create_property(title="Beach hut", is_available=False)
        self.create_property(title="Mountain cabin")

        response = self.client.get(LIST_URL, {"search": "beach", "isAvailable": "true"})

        titles = [item["title"] for item in response.data["data"]["properties"]]
        self.assertEqual(titles, ["Beach house"])

    def test_invalid_numeric_filter_is_rejected(self) -> None:
        response = self.client.get(LIST_URL, {"minPrice": "cheap"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["errors"][0]["field"], "minPrice")

    def test_unknown_sort_field_is_rejected(self) -> None:
        response = self.client.get(LIST_URL, {"sortBy": "owner"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    # Details

    def test_retrieve_increments_views_once_per_request(self) -> None:
        property_obj = self.create_property()

        first = self.client.get(detail_url(property_obj.id))
        second = self.client.get(detail_url(property_obj.id))

        self.assertEqual(first.status_code, status.HTTP_200_OK, first.data)
        self.assertEqual(first.data["data"]["property"]["views"], 1)
        self.assertEqual(second.data["data"]["property"]["views"], 2)
        property_obj.refresh_from_db()
        self.assertEqual(property_obj.views, 2)

    def test_retrieve_embeds_owner_and_location(self) -> None:
        property_obj = self.create_property()

        response = self.client.get(detail_url(property_obj.id))

        body = response.data["data"]["property"]
        self.assertEqual(body["owner"]["email"], "owner@example.com")
        self.assertEqual(body["location"]["city"], "Porto")
        self.assertEqual(body["fullAddress"], "5 Main St, Porto, Portugal")
        self.assertEqual(body["rating"]["count"], 0)

    def test_retrieve_missing_property(self) -> None:
        response = self.client.get(detail_url(9999))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Property not found")

    # Create

    def test_create_requires_authentication(self) -> None:
        response = self.client.post(LIST_URL, property_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_with_images(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.post(
            LIST_URL,
            {"data": json.dumps(property_payload()), "images": [make_image("a.png"), make_image("b.jpg", "JPEG")]},
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["message"], "Property created successfully")
        body = response.data["data"]["property"]
        self.assertEqual(body["owner"]["id"], self.owner.id)
        self.assertEqual(body["amenities"], ["WiFi", "Pool"])
        self.assertEqual(len(body["images"]), 2)
        for reference in body["images"]:
            self.assertTrue(reference.startswith("/uploads/properties/property-"))
            self.assertTrue(self.image_store.exists(reference))

    def test_create_from_json_body(self) -> None:
        self.client.force_authenticate(self.other)

        response = self.client.post(LIST_URL, property_payload(owner=self.owner.id), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        property_obj = Property.objects.get()
        self.assertEqual(property_obj.owner, self.other)
        self.assertEqual(property_obj.images, [])
        self.assertEqual(property_obj.price, Decimal("150"))

    def test_create_validation_errors_store_nothing(self) -> None:
        self.client.force_authenticate(self.owner)
        before = stored_files()
        payload = property_payload(title="   ", location={"address": "1 River Rd", "country": "Portugal"})

        response = self.client.post(
            LIST_URL,
            {"data": json.dumps(payload), "images": [make_image()]},
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["message"], "Validation failed")
        errors = {error["field"]: error["message"] for error in response.data["errors"]}
        self.assertEqual(errors["title"], "Title is required")
        self.assertEqual(errors["location.city"], "City is required")
        self.assertEqual(stored_files(), before)
        self.assertFalse(Property.objects.exists())

    def test_create_rejects_too_many_images(self) -> None:
        self.client.force_authenticate(self.owner)
        before = stored_files()

        response = self.client.post(
            LIST_URL,
            {"data": json.dumps(property_payload()), "images": [make_image(f"{i}.png") for i in range(6)]},
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(stored_files(), before)

    def test_create_rejects_non_image_upload(self) -> None:
        self.client.force_authenticate(self.owner)
        before = stored_files()
        fake = SimpleUploadedFile("notes.png", b"not really an image", content_type="image/png")

        response = self.client.post(
            LIST_URL,
            {"data": json.dumps(property_payload()), "images": [make_image(), fake]},
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(stored_files(), before)
        self.assertFalse(Property.objects.exists())

    def test_create_removes_images_when_save_fails(self) -> None:
        self.client.force_authenticate(self.owner)
        before = stored_files()

        with mock.patch.object(PropertyWriteSerializer, "create", side_effect=RuntimeError("database unavailable")):
            response = self.client.post(
                LIST_URL,
                {"data": json.dumps(property_payload()), "images": [make_image()]},
                format="multipart",
            )

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["message"], "Something went wrong!")
        self.assertEqual(stored_files(), before)

    # Update

    def test_owner_update_appends_images(self) -> None:
        existing = self.image_store.save(make_image("existing.png"))
        property_obj = self.create_property(images=[existing])
        self.client.force_authenticate(self.owner)

        response = self.client.put(
            detail_url(property_obj.id),
            {"data": json.dumps({"title": "Renovated flat"}), "images": [make_image("new.png")]},
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["message"], "Property updated successfully")
        property_obj.refresh_from_db()
        self.assertEqual(property_obj.title, "Renovated flat")
        self.assertEqual(len(property_obj.images), 2)
        self.assertEqual(property_obj.images[0], existing)

    def test_non_owner_update_is_forbidden_and_stores_nothing(self) -> None:
        property_obj = self.create_property()
        self.client.force_authenticate(self.other)
        before = stored_files()

        response = self.client.put(
            detail_url(property_obj.id),
            {"data": json.dumps({"title": "Mine now"}), "images": [make_image()]},
            format="multipart",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["message"], "Not authorized to update this property")
        self.assertEqual(stored_files(), before)
        property_obj.refresh_from_db()
        self.assertEqual(property_obj.title, "Cosy flat")

    def test_update_missing_property(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.patch(detail_url(9999), {"title": "Ghost"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_can_update_any_property(self) -> None:
        property_obj = self.create_property()
        self.client.force_authenticate(self.admin)

        response = self.client.patch(detail_url(property_obj.id), {"isAvailable": False}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        property_obj.refresh_from_db()
        self.assertFalse(property_obj.is_available)

    # Delete

    def test_non_owner_delete_is_forbidden_and_keeps_images(self) -> None:
        reference = self.image_store.save(make_image())
        property_obj = self.create_property(images=[reference])
        self.client.force_authenticate(self.other)

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.delete(detail_url(property_obj.id))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["message"], "Not authorized to delete this property")
        self.assertTrue(Property.objects.filter(pk=property_obj.pk).exists())
        self.assertTrue(self.image_store.exists(reference))

    def test_owner_delete_removes_images(self) -> None:
        reference = self.image_store.save(make_image())
        property_obj = self.create_property(images=[reference])
        self.client.force_authenticate(self.owner)

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.delete(detail_url(property_obj.id))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["message"], "Property deleted successfully")
        self.assertFalse(Property.objects.filter(pk=property_obj.pk).exists())
        self.assertFalse(self.image_store.exists(reference))

    # My properties

    def test_my_properties_lists_only_own(self) -> None:
        self.create_property(title="First")
        self.create_property(title="Second")
        self.create_property(owner=self.other, title="Foreign")
        self.client.force_authenticate(self.owner)

        response = self.client.get("/api/properties/user/my-properties")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        titles = [item["title"] for item in response.data["data"]["properties"]]
        self.assertEqual(titles, ["Second", "First"])

    def test_my_properties_requires_authentication(self) -> None:
        response = self.client.get("/api/properties/user/my-properties")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
