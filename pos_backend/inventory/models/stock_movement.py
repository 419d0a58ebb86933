# inventory/models/stock_movement.py

"""
CANONICAL INGREDIENT LEDGER

Immutable inventory ledger entry.

GUARANTEES:
- Append-only (no updates, no deletes)
- Created ONCE, never edited; corrections are new compensating entries
- quantity is a positive magnitude; direction carries the sign
- Direction validated against movement_type
  (ADJUSTMENT is the only type whose direction is chosen by the caller)
- unit_cost_at_time is frozen at insert (later cost changes never
  re-value past movements)
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from .ingredient import Ingredient


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        PURCHASE = "PURCHASE", "Purchase"
        SALE = "SALE", "Sale"
        ADJUSTMENT = "ADJUSTMENT", "Adjustment"
        WASTE = "WASTE", "Waste"
        RETURN = "RETURN", "Return"

    class Direction(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"

    TYPE_TO_DIRECTION = {
        MovementType.PURCHASE: Direction.IN,
        MovementType.RETURN: Direction.IN,
        MovementType.SALE: Direction.OUT,
        MovementType.WASTE: Direction.OUT,
        MovementType.ADJUSTMENT: None,
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    ingredient = models.ForeignKey(
        Ingredient, on_delete=models.PROTECT, related_name="stock_movements"
    )

    movement_type = models.CharField(max_length=16, choices=MovementType.choices)
    direction = models.CharField(max_length=3, choices=Direction.choices)

    quantity = models.DecimalField(max_digits=14, decimal_places=3)

    unit_cost_at_time = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        default=None,
        help_text="Unit cost snapshot at movement time (immutable).",
    )

    # Set when a manual ADJUSTMENT/OUT was allowed to drive quantity below zero.
    negative_override = models.BooleanField(default=False)

    reason = models.CharField(max_length=200, blank=True, default="")
    notes = models.CharField(max_length=500, blank=True, default="")
    created_by = models.CharField(max_length=100, blank=True, default="")

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["ingredient", "created_at"]),
            models.Index(fields=["movement_type", "created_at"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="chk_stockmovement_quantity_gt_zero",
            ),
        ]

    def clean(self):
        if self.quantity is None or Decimal(self.quantity) <= 0:
            raise ValidationError("quantity must be greater than zero")

        expected = self.TYPE_TO_DIRECTION.get(self.movement_type)
        if expected and self.direction != expected:
            raise ValidationError(
                f"{self.movement_type} requires direction={expected}"
            )

        if self.direction not in self.Direction.values:
            raise ValidationError("direction must be IN or OUT")

        if self.negative_override and not (
            self.movement_type == self.MovementType.ADJUSTMENT
            and self.direction == self.Direction.OUT
        ):
            raise ValidationError(
                "negative_override is only allowed on ADJUSTMENT/OUT movements"
            )

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockMovement records are immutable and cannot be deleted"
        )

    @property
    def signed_quantity(self) -> Decimal:
        qty = Decimal(self.quantity or 0)
        return qty if self.direction == self.Direction.IN else -qty

    @property
    def total_cost(self) -> Decimal:
        unit_cost = (
            self.unit_cost_at_time
            if self.unit_cost_at_time is not None
            else Decimal("0.00")
        )
        return Decimal(unit_cost) * Decimal(self.quantity or 0)

    def __str__(self):
        ingredient_name = getattr(self.ingredient, "name", "Ingredient")
        return f"{ingredient_name} | {self.movement_type} | {self.direction} {self.quantity}"
