"""Domain services for booking workflows."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from django.db import IntegrityError, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.core.exceptions import ServiceError
from apps.core.permissions import check_access
from apps.properties.models import Property
from shared.domain.policy import Action
from shared.domain.value_objects import StayWindow

from .models import Booking

logger = logging.getLogger(__name__)

# Name of the PostgreSQL exclusion constraint added in migration 0002.
OVERLAP_CONSTRAINT = "booking_no_overlapping_active_stays"


class BookingConflictError(ServiceError):
    """Raised when a property is busy for requested dates."""

    default_message = "Property is already booked for selected dates"


class PropertyUnavailableError(ServiceError):
    default_message = "Property is not available for booking"


class PropertyNotFoundError(ServiceError):
    status_code = 404
    default_message = "Property not found"


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def find_conflicting_booking(property_id, stay: StayWindow, *, exclude_booking_id=None) -> Booking | None:
    """First active booking whose window touches or overlaps ``stay``.

    Mirrors ``StayWindow.conflicts_with``: closed intervals, so a check-out
    equal to the requested check-in still conflicts.
    """

    qs = Booking.objects.filter(
        property_id=property_id,
        status__in=Booking.ACTIVE_STATUSES,
        check_in__lte=stay.check_out,
        check_out__gte=stay.check_in,
    )
    if exclude_booking_id is not None:
        qs = qs.exclude(pk=exclude_booking_id)
    return qs.order_by("check_in").first()


def _raise_if_overlap(exc: IntegrityError) -> None:
    if OVERLAP_CONSTRAINT in str(exc):
        raise BookingConflictError() from exc


def create_booking(*, user, property_id, stay: StayWindow, guests: int, special_requests: str = "") -> Booking:
    """Book ``stay`` at the property for ``user``.

    The property row is locked for the duration of the check and insert so
    two requests for the same property cannot both pass the conflict check.
    """

    with transaction.atomic():
        try:
            property_obj = _lock_queryset_if_possible(Property.objects.filter(pk=property_id)).get()
        except Property.DoesNotExist:
            raise PropertyNotFoundError()

        if not property_obj.is_available:
            raise PropertyUnavailableError()

        conflict = find_conflicting_booking(property_obj.pk, stay)
        if conflict is not None:
            logger.info(
                "Booking conflict for property %s: %s overlaps booking %s", property_obj.pk, stay, conflict.pk
            )
            raise BookingConflictError()

        try:
            booking = Booking.objects.create(
                property=property_obj,
                user=user,
                check_in=stay.check_in,
                check_out=stay.check_out,
                guests=guests,
                total_price=stay.price_for(property_obj.price),
                special_requests=special_requests or "",
            )
        except IntegrityError as e:
            _raise_if_overlap(e)
            raise

    logger.info(
        "Booking %s created for property %s by user %s (%s days, total %s)",
        booking.pk,
        property_obj.pk,
        user.pk,
        stay.days,
        booking.total_price,
    )
    return booking


def update_booking(booking: Booking, *, user, changes: Mapping[str, Any]) -> tuple[Booking, list[str]]:
    """Apply a status / payment update and return the booking with the list of ignored fields.

    ``paymentStatus`` from a caller without the payment right is dropped and
    the rest of the update still applies.
    """

    ignored: list[str] = []
    update_fields: list[str] = []

    payment_status = changes.get("payment_status")
    if payment_status:
        if check_access(user, booking.ownership(), Action.CHANGE_PAYMENT_STATUS):
            booking.payment_status = payment_status
            update_fields.append("payment_status")
        else:
            ignored.append("paymentStatus")
            logger.info(
                "Ignored paymentStatus=%s on booking %s from user %s", payment_status, booking.pk, user.pk
            )

    with transaction.atomic():
        new_status = changes.get("status")
        if new_status:
            was_active = booking.is_active
            if new_status == Booking.Status.CANCELLED:
                booking.mark_cancelled(changes.get("cancellation_reason", ""))
                update_fields += ["status", "cancelled_at", "cancellation_reason"]
            else:
                booking.status = new_status
                update_fields.append("status")

            # Re-activating a stay must not overlap another active one.
            if booking.is_active and not was_active:
                _lock_queryset_if_possible(Property.objects.filter(pk=booking.property_id)).get()
                if find_conflicting_booking(booking.property_id, booking.stay, exclude_booking_id=booking.pk):
                    raise BookingConflictError()

        if update_fields:
            update_fields.append("updated_at")
            try:
                with transaction.atomic():
                    booking.save(update_fields=list(dict.fromkeys(update_fields)))
            except IntegrityError as e:
                _raise_if_overlap(e)
                raise

    if update_fields:
        logger.info("Booking %s updated: %s", booking.pk, ", ".join(update_fields[:-1]))

    return booking, ignored
