"""Filters for booking listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(field_name="status", choices=Booking.Status.choices)

    class Meta:
        model = Booking
        fields = ["status"]
