"""Booking domain models."""

from __future__ import annotations

import builtins
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.policy import Ownership
from shared.domain.value_objects import StayWindow


class Booking(models.Model):
    """Бронирование объекта недвижимости."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        REFUNDED = "refunded", _("Refunded")

    # Statuses that hold the property's dates.
    ACTIVE_STATUSES = (Status.PENDING, Status.CONFIRMED)

    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    check_in = models.DateTimeField()
    check_out = models.DateTimeField()
    guests = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    special_requests = models.TextField(max_length=500, blank=True)
    cancellation_reason = models.TextField(max_length=500, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(condition=models.Q(guests__gte=1), name="booking_guests_positive"),
            models.CheckConstraint(condition=models.Q(total_price__gte=0), name="booking_total_non_negative"),
        ]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="booking_user_created_idx"),
            models.Index(fields=["property", "check_in"], name="booking_property_checkin_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} for {self.property_id}"

    def clean(self) -> None:
        if self.check_in and self.check_out and self.check_out <= self.check_in:
            raise ValidationError({"check_out": _("Check-out date must be after check-in date")})

    @builtins.property
    def stay(self) -> StayWindow:
        return StayWindow(self.check_in, self.check_out)

    @builtins.property
    def duration(self) -> int:
        """Whole days between check-in and check-out, any started day counts."""
        return self.stay.days

    @builtins.property
    def is_active(self) -> bool:
        return self.status in self.ACTIVE_STATUSES

    def ownership(self) -> Ownership:
        return Ownership(owner_id=self.user_id, property_owner_id=self.property.owner_id)

    def mark_cancelled(self, reason: str = "") -> None:
        if self.status != self.Status.CANCELLED or self.cancelled_at is None:
            self.cancelled_at = timezone.now()
        self.status = self.Status.CANCELLED
        if reason:
            self.cancellation_reason = reason
