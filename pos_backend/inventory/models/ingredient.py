# inventory/models/ingredient.py

"""
INGREDIENT (LEDGER PROJECTION OWNER)

Represents one raw material tracked by quantity (kg, g, L, pcs...).

CANONICAL MODEL:
- quantity is a PROJECTION of the StockMovement ledger:
    quantity == sum(signed movement deltas) at all times
- quantity is mutated ONLY by inventory.services.ledger, inside the same
  transaction as the movement insert
- unit_cost / last_purchase_* are mutated ONLY by inventory.services.costing
- is_active=False is a soft delete (ledger history must survive)
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

PIECE_UNITS = {"pcs", "pc", "piece", "pieces"}


class Ingredient(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=100, db_index=True)

    quantity = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        default=Decimal("0.000"),
        help_text="Current quantity (ledger projection, service-managed only)",
    )

    unit = models.CharField(max_length=20, help_text="kg, g, L, mL, pcs ...")

    supplier = models.CharField(max_length=100, null=True, blank=True, default=None)

    expiration_date = models.DateField(null=True, blank=True)

    low_stock_threshold = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        default=Decimal("0.000"),
    )

    unit_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        default=None,
        help_text="Current cost per unit (replaced on every purchase).",
    )
    last_purchase_cost = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True, default=None
    )
    last_purchase_date = models.DateTimeField(null=True, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["is_active", "name"]),
            models.Index(fields=["is_active", "quantity"]),
            models.Index(fields=["supplier"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(low_stock_threshold__gte=0),
                name="chk_ingredient_threshold_gte_zero",
            ),
        ]

    @property
    def is_piece_unit(self) -> bool:
        return (self.unit or "").strip().lower() in PIECE_UNITS

    @property
    def total_cost(self) -> Decimal:
        unit_cost = self.unit_cost if self.unit_cost is not None else Decimal("0.00")
        return Decimal(self.quantity or 0) * Decimal(unit_cost)

    @property
    def is_low_stock(self) -> bool:
        return Decimal(self.quantity or 0) <= Decimal(self.low_stock_threshold or 0)

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})

        if not (self.unit or "").strip():
            raise ValidationError({"unit": "unit is required"})

        if self.low_stock_threshold is None or Decimal(self.low_stock_threshold) < 0:
            raise ValidationError(
                {"low_stock_threshold": "Low stock threshold cannot be negative"}
            )

        if self.is_piece_unit and Decimal(self.low_stock_threshold) % 1 != 0:
            raise ValidationError(
                {"low_stock_threshold": "Low stock threshold must be a whole number for pieces"}
            )

        if self.unit_cost is not None and Decimal(self.unit_cost) < 0:
            raise ValidationError({"unit_cost": "unit_cost cannot be negative"})

    def __str__(self):
        return f"{self.name} ({self.quantity} {self.unit})"
