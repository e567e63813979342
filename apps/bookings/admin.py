"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "property",
        "user",
        "status",
        "payment_status",
        "check_in",
        "check_out",
        "guests",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "payment_status", "check_in")
    search_fields = ("property__title", "user__email", "user__name")
    raw_id_fields = ("property", "user")
    readonly_fields = ("total_price", "cancelled_at", "created_at", "updated_at")
