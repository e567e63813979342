"""Tests for health probe, unknown routes and the error envelope."""

from __future__ import annotations

from rest_framework import status
from rest_framework.test import APITestCase

from apps.core.exceptions import flatten_errors


class CoreAPITests(APITestCase):
    def test_health(self) -> None:
        response = self.client.get("/api/health")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body["status"], "OK")
        self.assertIn("timestamp", body)

    def test_unknown_route_uses_error_envelope(self) -> None:
        response = self.client.get("/api/does-not-exist")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json(), {"success": False, "message": "Route not found"})

    def test_invalid_page_is_rejected(self) -> None:
        response = self.client.get("/api/properties", {"page": 0})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["errors"][0]["field"], "page")

    def test_oversized_limit_is_accepted(self) -> None:
        response = self.client.get("/api/properties", {"limit": 1000})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["data"]["totalPages"], 0)


def test_flatten_errors_uses_dotted_paths():
    detail = {"location": {"city": ["City is required"]}, "non_field_errors": ["Bad"]}

    assert flatten_errors(detail) == [
        {"field": "location.city", "message": "City is required"},
        {"field": "non_field_errors", "message": "Bad"},
    ]
