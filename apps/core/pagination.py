"""Page/limit pagination wrapped in the success envelope."""

from __future__ import annotations

import math

from django.conf import settings  # type: ignore
from rest_framework.exceptions import ValidationError  # type: ignore
from rest_framework.pagination import BasePagination  # type: ignore
from rest_framework.response import Response  # type: ignore


def _positive_int(raw, name: str, default: int) -> int:
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: f"{name} must be a positive integer"})
    if value < 1:
        raise ValidationError({name: f"{name} must be a positive integer"})
    return value


class EnvelopePagination(BasePagination):
    """1-based ``page`` and ``limit`` query parameters.

    Responds with ``{success, data: {<results_key>, totalPages, currentPage, total}}``.
    A page past the end is an empty list, not an error.
    """

    page_query_param = "page"
    limit_query_param = "limit"
    results_key = "results"

    def paginate_queryset(self, queryset, request, view=None):  # type: ignore
        default_limit = getattr(settings, "API_DEFAULT_PAGE_SIZE", 10)
        max_limit = getattr(settings, "API_MAX_PAGE_SIZE", 100)

        self.page = _positive_int(request.query_params.get(self.page_query_param), self.page_query_param, 1)
        self.limit = min(
            _positive_int(request.query_params.get(self.limit_query_param), self.limit_query_param, default_limit),
            max_limit,
        )
        if view is not None:
            self.results_key = getattr(view, "results_key", self.results_key)

        self.total = queryset.count()
        offset = (self.page - 1) * self.limit
        return list(queryset[offset:offset + self.limit])

    def get_paginated_response(self, data):  # type: ignore
        return Response(
            {
                "success": True,
                "data": {
                    self.results_key: data,
                    "totalPages": math.ceil(self.total / self.limit),
                    "currentPage": self.page,
                    "total": self.total,
                },
            }
        )
