from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=100)),
                ("description", models.TextField(max_length=1000)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                ("address", models.CharField(max_length=255)),
                ("city", models.CharField(max_length=100)),
                ("state", models.CharField(blank=True, max_length=100)),
                ("country", models.CharField(max_length=100)),
                ("zip_code", models.CharField(blank=True, max_length=20)),
                ("latitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("longitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                (
                    "images",
                    models.JSONField(blank=True, default=list, help_text="Ordered image references (URL or media path)."),
                ),
                (
                    "property_type",
                    models.CharField(
                        choices=[
                            ("apartment", "Apartment"),
                            ("house", "House"),
                            ("villa", "Villa"),
                            ("condo", "Condo"),
                            ("studio", "Studio"),
                            ("other", "Other"),
                        ],
                        default="apartment",
                        max_length=20,
                    ),
                ),
                ("bedrooms", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("bathrooms", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("area_value", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                (
                    "area_unit",
                    models.CharField(
                        choices=[("sqft", "Square feet"), ("sqm", "Square meters")],
                        default="sqft",
                        max_length=4,
                    ),
                ),
                ("amenities", models.JSONField(blank=True, default=list)),
                ("is_available", models.BooleanField(default=True)),
                ("featured", models.BooleanField(default=False)),
                (
                    "rating_average",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0"),
                        max_digits=3,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0")),
                            django.core.validators.MaxValueValidator(Decimal("5")),
                        ],
                    ),
                ),
                ("rating_count", models.PositiveIntegerField(default=0)),
                ("views", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="properties",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Property",
                "verbose_name_plural": "Properties",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["price"], name="property_price_idx"),
                    models.Index(fields=["city"], name="property_city_idx"),
                    models.Index(fields=["is_available"], name="property_available_idx"),
                    models.Index(fields=["owner", "-created_at"], name="property_owner_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(price__gte=0), name="property_price_non_negative"),
                    models.CheckConstraint(
                        condition=models.Q(("rating_average__gte", 0), ("rating_average__lte", 5)),
                        name="property_rating_in_range",
                    ),
                ],
            },
        ),
    ]
