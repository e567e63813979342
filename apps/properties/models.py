"""Property listing model."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.db.models import F  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.policy import Ownership


class Property(models.Model):
    """Объект недвижимости, выставленный на аренду."""

    class PropertyType(models.TextChoices):
        APARTMENT = "apartment", _("Apartment")
        HOUSE = "house", _("House")
        VILLA = "villa", _("Villa")
        CONDO = "condo", _("Condo")
        STUDIO = "studio", _("Studio")
        OTHER = "other", _("Other")

    class AreaUnit(models.TextChoices):
        SQFT = "sqft", _("Square feet")
        SQM = "sqm", _("Square meters")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    title = models.CharField(max_length=100)
    description = models.TextField(max_length=1000)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )

    address = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100)
    zip_code = models.CharField(max_length=20, blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    images = models.JSONField(default=list, blank=True, help_text=_("Ordered image references (URL or media path)."))
    property_type = models.CharField(
        max_length=20,
        choices=PropertyType.choices,
        default=PropertyType.APARTMENT,
    )
    bedrooms = models.PositiveSmallIntegerField(null=True, blank=True)
    bathrooms = models.PositiveSmallIntegerField(null=True, blank=True)
    area_value = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    area_unit = models.CharField(max_length=4, choices=AreaUnit.choices, default=AreaUnit.SQFT)
    amenities = models.JSONField(default=list, blank=True)

    is_available = models.BooleanField(default=True)
    featured = models.BooleanField(default=False)
    rating_average = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("5"))],
    )
    rating_count = models.PositiveIntegerField(default=0)
    views = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(condition=models.Q(price__gte=0), name="property_price_non_negative"),
            models.CheckConstraint(
                condition=models.Q(rating_average__gte=0) & models.Q(rating_average__lte=5),
                name="property_rating_in_range",
            ),
        ]
        indexes = [
            models.Index(fields=["price"], name="property_price_idx"),
            models.Index(fields=["city"], name="property_city_idx"),
            models.Index(fields=["is_available"], name="property_available_idx"),
            models.Index(fields=["owner", "-created_at"], name="property_owner_created_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def full_address(self) -> str:
        return f"{self.address}, {self.city}, {self.country}"

    def ownership(self) -> Ownership:
        return Ownership(owner_id=self.owner_id, property_owner_id=self.owner_id)

    def register_view(self) -> None:
        """Increment the view counter in the database and reload it."""
        type(self).objects.filter(pk=self.pk).update(views=F("views") + 1)
        self.refresh_from_db(fields=["views"])
