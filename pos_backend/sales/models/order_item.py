# sales/models/order_item.py

"""
ORDER ITEM (IMMUTABLE SNAPSHOT)

Frozen copy of what was sold: name, category and prices are captured at
checkout so later product edits never rewrite history. The product FK is
kept for reference only.

Add-ons and discounts are owned by exactly one item and are immutable too.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from products.models import Product

from .order import Order


class ImmutableRowMixin:
    """Insert once; no updates, no deletes."""

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(f"{type(self).__name__} records are immutable")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(f"{type(self).__name__} records cannot be deleted")


class OrderItem(ImmutableRowMixin, models.Model):
    class Temperature(models.TextChoices):
        NONE = "NONE", "None"
        HOT = "HOT", "Hot"
        COLD = "COLD", "Cold"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")

    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    product_id_snapshot = models.CharField(max_length=64, db_index=True)

    name = models.CharField(max_length=255)
    category = models.CharField(max_length=100, blank=True, default="")

    # effective charged unit price (temperature variant applied)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    temperature = models.CharField(
        max_length=4, choices=Temperature.choices, default=Temperature.NONE
    )

    quantity = models.PositiveIntegerField()

    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    line_total = models.DecimalField(max_digits=12, decimal_places=2)

    client_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, default=None
    )
    price_mismatch = models.BooleanField(default=False)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["order", "created_at"]),
            models.Index(fields=["product_id_snapshot", "created_at"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=1),
                name="chk_orderitem_quantity_gte_one",
            ),
            models.CheckConstraint(
                condition=Q(line_total__gte=0),
                name="chk_orderitem_line_total_gte_zero",
            ),
        ]

    def __str__(self):
        return f"{self.name} x{self.quantity}"


class OrderItemAddOn(ImmutableRowMixin, models.Model):
    item = models.ForeignKey(OrderItem, on_delete=models.CASCADE, related_name="add_ons")
    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} (+{self.price} x{self.quantity})"


class OrderItemDiscount(ImmutableRowMixin, models.Model):
    """
    amount is authoritative; percentage is informational and never
    used to recompute the amount.
    """

    item = models.OneToOneField(OrderItem, on_delete=models.CASCADE, related_name="discount")
    discount_type = models.CharField(max_length=50)
    percentage = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True, default=None
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)

    def __str__(self):
        return f"{self.discount_type} -{self.amount}"
