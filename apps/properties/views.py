"""Property API views."""

from __future__ import annotations

import json
from typing import Any

from django.apps import apps as django_apps  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import NotFound, ValidationError  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.core.pagination import EnvelopePagination
from apps.core.permissions import PolicyPermission, enforce
from shared.domain.policy import Action, Ownership

from . import services
from .filters import ListingOrderingFilter, PropertyFilterSet
from .models import Property
from .serializers import PropertySerializer, PropertyWriteSerializer

FILE_FIELDS = ("images", "data")


def nest_form_fields(data) -> dict[str, Any]:
    """Turn flat form keys such as ``location.city`` into nested dicts."""

    payload: dict[str, Any] = {}
    for key in data.keys():
        if key in FILE_FIELDS:
            continue
        values = data.getlist(key)
        value = values if key == "amenities" else values[-1]
        target = payload
        *parents, leaf = key.split(".")
        for part in parents:
            target = target.setdefault(part, {})
        target[leaf] = value
    return payload


def property_payload(request) -> dict[str, Any]:
    """Property fields from a JSON body, a multipart ``data`` JSON string, or plain form fields."""

    data = request.data
    if not hasattr(data, "getlist"):
        return data

    raw = data.get("data")
    if raw in (None, ""):
        return nest_form_fields(data)
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        raise ValidationError({"data": "Property data must be valid JSON"})
    if not isinstance(payload, dict):
        raise ValidationError({"data": "Property data must be a JSON object"})
    return payload


def image_store():
    return django_apps.get_app_config("properties").image_store


class PropertyViewSet(viewsets.ModelViewSet):
    """Listings: public reads, owner or admin writes."""

    queryset = Property.objects.select_related("owner")
    serializer_class = PropertySerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, PolicyPermission]
    filter_backends = [DjangoFilterBackend, ListingOrderingFilter]
    filterset_class = PropertyFilterSet
    pagination_class = EnvelopePagination
    results_key = "properties"
    lookup_value_regex = r"\d+"
    policy_actions = {
        "update": Action.UPDATE_PROPERTY,
        "partial_update": Action.UPDATE_PROPERTY,
        "destroy": Action.DELETE_PROPERTY,
    }

    def get_object(self) -> Property:  # type: ignore
        try:
            property_obj = self.get_queryset().get(pk=self.kwargs[self.lookup_field])
        except Property.DoesNotExist:
            raise NotFound("Property not found")
        self.check_object_permissions(self.request, property_obj)
        return property_obj

    def _response(self, property_obj: Property, message: str | None = None, status_code=status.HTTP_200_OK):
        body: dict[str, Any] = {"success": True}
        if message:
            body["message"] = message
        body["data"] = {"property": PropertySerializer(property_obj, context=self.get_serializer_context()).data}
        return Response(body, status=status_code)

    def retrieve(self, request, *args, **kwargs):  # type: ignore
        property_obj = self.get_object()
        property_obj.register_view()
        return self._response(property_obj)

    def create(self, request, *args, **kwargs):  # type: ignore
        enforce(request.user, Ownership(), Action.CREATE_PROPERTY)
        serializer = PropertyWriteSerializer(data=property_payload(request))
        serializer.is_valid(raise_exception=True)
        property_obj = services.create_property(
            owner=request.user,
            serializer=serializer,
            uploads=request.FILES.getlist("images"),
            image_store=image_store(),
        )
        return self._response(property_obj, "Property created successfully", status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):  # type: ignore
        # Not-found and ownership are checked before any upload is stored.
        property_obj = self.get_object()
        serializer = PropertyWriteSerializer(property_obj, data=property_payload(request), partial=True)
        serializer.is_valid(raise_exception=True)
        property_obj = services.update_property(
            property_obj,
            serializer=serializer,
            uploads=request.FILES.getlist("images"),
            image_store=image_store(),
        )
        return self._response(property_obj, "Property updated successfully")

    def destroy(self, request, *args, **kwargs):  # type: ignore
        property_obj = self.get_object()
        services.delete_property(property_obj, image_store=image_store())
        return Response({"success": True, "message": "Property deleted successfully"})

    @action(
        detail=False,
        methods=["get"],
        url_path="user/my-properties",
        permission_classes=[permissions.IsAuthenticated],
    )
    def my_properties(self, request):  # type: ignore
        qs = Property.objects.filter(owner=request.user).select_related("owner").order_by("-created_at", "-id")
        data = PropertySerializer(qs, many=True, context=self.get_serializer_context()).data
        return Response({"success": True, "data": {"properties": data}})
