"""FilterSet and ordering for the property listing."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore
from rest_framework.exceptions import ValidationError  # type: ignore
from rest_framework.filters import BaseFilterBackend  # type: ignore

from .models import Property


class PropertyFilterSet(django_filters.FilterSet):
    """Query parameters accepted by ``GET /properties``; names follow the wire format."""

    search = django_filters.CharFilter(method="filter_search")
    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    minPrice = django_filters.NumberFilter(field_name="price", lookup_expr="gte")  # noqa: N815
    maxPrice = django_filters.NumberFilter(field_name="price", lookup_expr="lte")  # noqa: N815
    propertyType = django_filters.ChoiceFilter(  # noqa: N815
        field_name="property_type",
        choices=Property.PropertyType.choices,
    )
    bedrooms = django_filters.NumberFilter(field_name="bedrooms", lookup_expr="exact")
    isAvailable = django_filters.BooleanFilter(field_name="is_available")  # noqa: N815

    class Meta:
        model = Property
        fields: list[str] = []

    def filter_search(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(title__icontains=value) | Q(description__icontains=value) | Q(city__icontains=value)
        )


class ListingOrderingFilter(BaseFilterBackend):
    """``sortBy`` / ``order`` ordering with a stable id tiebreak."""

    sort_param = "sortBy"
    order_param = "order"
    default_sort = "createdAt"
    default_order = "desc"
    sort_fields = {
        "createdAt": "created_at",
        "price": "price",
        "views": "views",
        "bedrooms": "bedrooms",
        "rating": "rating_average",
        "title": "title",
    }

    def filter_queryset(self, request, queryset, view):  # type: ignore
        sort_by = request.query_params.get(self.sort_param) or self.default_sort
        order = (request.query_params.get(self.order_param) or self.default_order).lower()

        if sort_by not in self.sort_fields:
            raise ValidationError(
                {self.sort_param: f"{self.sort_param} must be one of: {', '.join(self.sort_fields)}"}
            )
        if order not in ("asc", "desc"):
            raise ValidationError({self.order_param: f"{self.order_param} must be asc or desc"})

        prefix = "-" if order == "desc" else ""
        return queryset.order_by(f"{prefix}{self.sort_fields[sort_by]}", f"{prefix}id")
