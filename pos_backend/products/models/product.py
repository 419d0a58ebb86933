# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Product(models.Model):
    """
    Represents a sellable menu product.

    PRICING MODEL:
    - base_price is the default selling price.
    - hot_price / cold_price are optional temperature variants.
      When a variant price is missing, base_price applies.

    STOCK MODEL (IMPORTANT):
    - stock is a denormalized integer counter of ready-to-sell units.
    - It is mutated ONLY via products.services.stock and the checkout
      orchestrator (conditional UPDATE ... WHERE stock >= qty).
    - It is independent of the ingredient ledger (no bill-of-materials).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    category = models.CharField(max_length=100, blank=True, default="", db_index=True)

    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    hot_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, default=None
    )
    cold_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, default=None
    )

    stock = models.PositiveIntegerField(
        default=0,
        help_text="Units on hand (service-managed only)",
    )
    low_stock_threshold = models.PositiveIntegerField(default=10)

    image = models.CharField(max_length=500, blank=True, default="")

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["category", "name"]
        indexes = [
            models.Index(fields=["is_active", "category"]),
            models.Index(fields=["is_active", "stock"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(stock__gte=0),
                name="chk_product_stock_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(base_price__gte=0),
                name="chk_product_base_price_gte_zero",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.category})" if self.category else self.name

    def clean(self):
        if self.base_price is None or Decimal(self.base_price) < Decimal("0.00"):
            raise ValidationError({"base_price": "base_price must be non-negative"})

        for field in ("hot_price", "cold_price"):
            value = getattr(self, field)
            if value is not None and Decimal(value) < Decimal("0.00"):
                raise ValidationError({field: f"{field} must be non-negative"})

        if self.stock is not None and int(self.stock) < 0:
            raise ValidationError({"stock": "stock cannot be negative"})

    @property
    def is_low_stock(self) -> bool:
        return int(self.stock or 0) <= int(self.low_stock_threshold or 0)
