"""Serializers for the properties domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.auth_serializers import UserSummarySerializer

from .models import Property


def _required(message: str) -> dict[str, str]:
    return {"required": message, "blank": message, "null": message}


class CoordinatesSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)


class LocationSerializer(serializers.Serializer):
    address = serializers.CharField(max_length=255, error_messages=_required("Address is required"))
    city = serializers.CharField(max_length=100, error_messages=_required("City is required"))
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, error_messages=_required("Country is required"))
    zipCode = serializers.CharField(source="zip_code", max_length=20, required=False, allow_blank=True)
    coordinates = CoordinatesSerializer(source="*", required=False)


class AreaSerializer(serializers.Serializer):
    value = serializers.DecimalField(
        source="area_value", max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    unit = serializers.ChoiceField(source="area_unit", choices=Property.AreaUnit.choices, required=False)


class RatingSerializer(serializers.Serializer):
    average = serializers.DecimalField(source="rating_average", max_digits=3, decimal_places=2, read_only=True)
    count = serializers.IntegerField(source="rating_count", read_only=True)


class PropertySummarySerializer(serializers.ModelSerializer):
    """Краткая карточка объекта, встраиваемая в брони."""

    location = LocationSerializer(source="*", read_only=True)

    class Meta:
        model = Property
        fields = ["id", "title", "price", "images", "location"]
        read_only_fields = fields


class PropertySerializer(serializers.ModelSerializer):
    location = LocationSerializer(source="*", read_only=True)
    area = AreaSerializer(source="*", read_only=True)
    rating = RatingSerializer(source="*", read_only=True)
    owner = UserSummarySerializer(read_only=True)
    propertyType = serializers.CharField(source="property_type", read_only=True)
    isAvailable = serializers.BooleanField(source="is_available", read_only=True)
    fullAddress = serializers.CharField(source="full_address", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Property
        fields = [
            "id",
            "title",
            "description",
            "price",
            "location",
            "fullAddress",
            "images",
            "propertyType",
            "bedrooms",
            "bathrooms",
            "area",
            "amenities",
            "owner",
            "isAvailable",
            "featured",
            "rating",
            "views",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class PropertyWriteSerializer(serializers.ModelSerializer):
    """Input for create and update. Owner and images are supplied by the service layer."""

    title = serializers.CharField(
        max_length=100,
        error_messages={**_required("Title is required"), "max_length": "Title cannot be more than 100 characters"},
    )
    description = serializers.CharField(
        max_length=1000,
        error_messages={
            **_required("Description is required"),
            "max_length": "Description cannot be more than 1000 characters",
        },
    )
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0,
        error_messages={
            **_required("Price must be a valid number"),
            "invalid": "Price must be a valid number",
            "min_value": "Price cannot be negative",
        },
    )
    location = LocationSerializer(source="*", error_messages={"required": "Location is required"})
    propertyType = serializers.ChoiceField(
        source="property_type", choices=Property.PropertyType.choices, required=False
    )
    bedrooms = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    bathrooms = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    area = AreaSerializer(source="*", required=False)
    amenities = serializers.ListField(
        child=serializers.CharField(max_length=100, allow_blank=True),
        required=False,
    )
    isAvailable = serializers.BooleanField(source="is_available", required=False)
    featured = serializers.BooleanField(required=False)

    class Meta:
        model = Property
        fields = [
            "title",
            "description",
            "price",
            "location",
            "propertyType",
            "bedrooms",
            "bathrooms",
            "area",
            "amenities",
            "isAvailable",
            "featured",
        ]

    def validate_amenities(self, value: list[str]) -> list[str]:
        seen: dict[str, None] = {}
        for amenity in value:
            amenity = amenity.strip()
            if amenity:
                seen.setdefault(amenity, None)
        return list(seen)
