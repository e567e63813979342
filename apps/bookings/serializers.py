"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.properties.serializers import PropertySummarySerializer
from apps.users.auth_serializers import UserSummarySerializer

from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Создание брони гостем."""

    property = serializers.IntegerField(
        min_value=1,
        error_messages={
            "required": "Property ID is required",
            "null": "Property ID is required",
            "invalid": "Property ID is required",
            "min_value": "Property ID is required",
        },
    )
    checkIn = serializers.DateTimeField(
        source="check_in",
        error_messages={"required": "Valid check-in date is required", "invalid": "Valid check-in date is required"},
    )
    checkOut = serializers.DateTimeField(
        source="check_out",
        error_messages={
            "required": "Valid check-out date is required",
            "invalid": "Valid check-out date is required",
        },
    )
    guests = serializers.IntegerField(
        min_value=1,
        error_messages={
            "required": "Number of guests must be at least 1",
            "invalid": "Number of guests must be at least 1",
            "min_value": "Number of guests must be at least 1",
        },
    )
    specialRequests = serializers.CharField(
        source="special_requests",
        max_length=500,
        required=False,
        allow_blank=True,
        error_messages={"max_length": "Special requests cannot be more than 500 characters"},
    )

    def validate(self, attrs):  # type: ignore
        if attrs["check_out"] <= attrs["check_in"]:
            raise serializers.ValidationError({"checkOut": "Check-out date must be after check-in date"})
        return attrs


class BookingUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.Status.choices, required=False)
    paymentStatus = serializers.ChoiceField(
        source="payment_status", choices=Booking.PaymentStatus.choices, required=False
    )
    cancellationReason = serializers.CharField(
        source="cancellation_reason",
        max_length=500,
        required=False,
        allow_blank=True,
        error_messages={"max_length": "Cancellation reason cannot be more than 500 characters"},
    )


class BookingSerializer(serializers.ModelSerializer):
    """Детальный сериализатор бронирования."""

    property = PropertySummarySerializer(read_only=True)
    user = UserSummarySerializer(read_only=True)
    checkIn = serializers.DateTimeField(source="check_in", read_only=True)
    checkOut = serializers.DateTimeField(source="check_out", read_only=True)
    totalPrice = serializers.DecimalField(source="total_price", max_digits=12, decimal_places=2, read_only=True)
    paymentStatus = serializers.CharField(source="payment_status", read_only=True)
    specialRequests = serializers.CharField(source="special_requests", read_only=True)
    cancellationReason = serializers.CharField(source="cancellation_reason", read_only=True)
    cancelledAt = serializers.DateTimeField(source="cancelled_at", read_only=True)
    duration = serializers.IntegerField(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "property",
            "user",
            "checkIn",
            "checkOut",
            "guests",
            "totalPrice",
            "status",
            "paymentStatus",
            "specialRequests",
            "cancellationReason",
            "cancelledAt",
            "duration",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields
