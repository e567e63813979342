"""Tests for Booking model helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.test import TestCase

from apps.bookings.models import Booking
from apps.properties.models import Property
from apps.users.models import User


class BookingModelTests(TestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123", name="Owner")
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123", name="Guest")
        self.property = Property.objects.create(
            owner=self.owner,
            title="Loft",
            description="Top floor",
            price=Decimal("120"),
            address="3 River St",
            city="Porto",
            country="Portugal",
        )
        check_in = datetime(2024, 5, 1, tzinfo=dt_timezone.utc)
        self.booking = Booking.objects.create(
            property=self.property,
            user=self.guest,
            check_in=check_in,
            check_out=check_in + timedelta(days=2, hours=1),
            guests=2,
            total_price=Decimal("360"),
        )

    def test_stay_helpers(self) -> None:
        self.assertEqual(self.booking.stay.check_in, self.booking.check_in)
        self.assertEqual(self.booking.duration, 3)
        self.assertTrue(self.booking.is_active)

        self.booking.status = Booking.Status.COMPLETED
        self.assertFalse(self.booking.is_active)

    def test_ownership_links_guest_and_owner(self) -> None:
        ownership = self.booking.ownership()

        self.assertEqual(ownership.owner_id, self.guest.pk)
        self.assertEqual(ownership.property_owner_id, self.owner.pk)

    def test_mark_cancelled_keeps_original_timestamp(self) -> None:
        self.booking.mark_cancelled("Flight cancelled")
        first = self.booking.cancelled_at

        self.booking.mark_cancelled()

        self.assertEqual(self.booking.status, Booking.Status.CANCELLED)
        self.assertEqual(self.booking.cancelled_at, first)
        self.assertEqual(self.booking.cancellation_reason, "Flight cancelled")
