"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from .models import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (scheduled by Celery Beat, see config/celery.py)
# ============================================================================

@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> dict[str, int]:
    """
    Mark confirmed bookings whose check-out has passed as completed.

    Pending and cancelled bookings are left alone.

    Returns:
        dict: {"completed": number of bookings updated}
    """
    now = timezone.now()
    completed = Booking.objects.filter(
        status=Booking.Status.CONFIRMED,
        check_out__lt=now,
    ).update(status=Booking.Status.COMPLETED, updated_at=now)

    if completed:
        logger.info("Completed %s finished bookings", completed)
    return {"completed": completed}
