"""API views for the booking domain."""

from __future__ import annotations

import logging

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import NotFound  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.core.pagination import EnvelopePagination
from apps.core.permissions import PolicyPermission, actor_for, enforce
from apps.properties.models import Property
from shared.domain.policy import Action, Ownership
from shared.domain.value_objects import StayWindow

from . import services
from .filters import BookingFilterSet
from .models import Booking
from .serializers import BookingCreateSerializer, BookingSerializer, BookingUpdateSerializer

logger = logging.getLogger(__name__)


class BookingViewSet(viewsets.ModelViewSet):
    """Viewset для создания и управления бронированиями."""

    queryset = Booking.objects.select_related("property", "property__owner", "user")
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated, PolicyPermission]
    filter_backends = [DjangoFilterBackend]
    filterset_class = BookingFilterSet
    pagination_class = EnvelopePagination
    results_key = "bookings"
    lookup_value_regex = r"\d+"
    policy_actions = {
        "retrieve": Action.VIEW_BOOKING,
        "update": Action.UPDATE_BOOKING,
        "partial_update": Action.UPDATE_BOOKING,
        "destroy": Action.DELETE_BOOKING,
    }

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset().order_by("-created_at", "-id")
        if self.action == "list":
            actor = actor_for(self.request.user)
            if actor is None or not actor.is_admin:
                qs = qs.filter(user=self.request.user)
        return qs

    def get_object(self) -> Booking:  # type: ignore
        try:
            booking = self.get_queryset().get(pk=self.kwargs[self.lookup_field])
        except Booking.DoesNotExist:
            raise NotFound("Booking not found")
        self.check_object_permissions(self.request, booking)
        return booking

    def _booking_data(self, booking: Booking) -> dict:
        return BookingSerializer(booking, context=self.get_serializer_context()).data

    def retrieve(self, request, *args, **kwargs):  # type: ignore
        booking = self.get_object()
        return Response({"success": True, "data": {"booking": self._booking_data(booking)}})

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = services.create_booking(
            user=request.user,
            property_id=data["property"],
            stay=StayWindow(data["check_in"], data["check_out"]),
            guests=data["guests"],
            special_requests=data.get("special_requests", ""),
        )
        booking = self.get_queryset().get(pk=booking.pk)
        return Response(
            {
                "success": True,
                "message": "Booking created successfully",
                "data": {"booking": self._booking_data(booking)},
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):  # type: ignore
        booking = self.get_object()
        serializer = BookingUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking, ignored = services.update_booking(booking, user=request.user, changes=serializer.validated_data)

        data = {"booking": self._booking_data(booking)}
        if ignored:
            data["ignoredFields"] = ignored
        return Response({"success": True, "message": "Booking updated successfully", "data": data})

    def destroy(self, request, *args, **kwargs):  # type: ignore
        # Admin-only regardless of whether the booking exists.
        enforce(request.user, Ownership(), Action.DELETE_BOOKING)
        booking = self.get_object()
        booking_id = booking.pk
        booking.delete()
        logger.info("Booking %s deleted by user %s", booking_id, request.user.pk)
        return Response({"success": True, "message": "Booking deleted successfully"})

    @action(detail=False, methods=["get"], url_path=r"property/(?P<property_id>\d+)")
    def for_property(self, request, property_id=None):  # type: ignore
        try:
            property_obj = Property.objects.get(pk=property_id)
        except Property.DoesNotExist:
            raise NotFound("Property not found")
        enforce(request.user, property_obj.ownership(), Action.LIST_PROPERTY_BOOKINGS)

        qs = (
            Booking.objects.filter(property=property_obj)
            .select_related("property", "user")
            .order_by("-created_at", "-id")
        )
        data = BookingSerializer(qs, many=True, context=self.get_serializer_context()).data
        return Response({"success": True, "data": {"bookings": data}})
