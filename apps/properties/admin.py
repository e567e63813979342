"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "city",
        "country",
        "property_type",
        "price",
        "is_available",
        "featured",
        "views",
        "owner",
    )
    list_filter = ("property_type", "is_available", "featured", "city")
    search_fields = ("title", "description", "city", "owner__email")
    raw_id_fields = ("owner",)
    readonly_fields = ("views", "rating_average", "rating_count", "created_at", "updated_at")
