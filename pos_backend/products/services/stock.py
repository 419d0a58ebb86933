# products/services/stock.py

"""
PRODUCT STOCK SERVICE

Purpose:
- Read helpers for ready-to-sell product units (Product.stock).
- Manual restock / correction of product units.

Rules:
- Product.stock is an integer counter and never goes below zero
  (DB check constraint + conditional UPDATE ... WHERE stock >= qty).
- Checkout decrements stock inside its own transaction
  (sales.services.checkout_orchestrator); this module is for manual changes.
- Inactive products are treated as not found.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from inventory.services.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    PersistenceFailure,
    ProductNotFoundError,
)
from products.models import Product

logger = logging.getLogger(__name__)


def _to_int_qty(value, *, field: str = "quantity", allow_negative: bool = False) -> int:
    if value is None or value == "":
        raise InvalidQuantityError(f"{field} is required", field=field)

    if isinstance(value, bool):
        # bool is an int subclass
        raise InvalidQuantityError(f"{field} must be an integer", field=field)

    try:
        qty = int(str(value))
    except (TypeError, ValueError) as exc:
        raise InvalidQuantityError(f"{field} must be an integer", field=field) from exc

    if qty == 0 or (qty < 0 and not allow_negative):
        raise InvalidQuantityError(
            f"{field} must be a positive integer", field=field, value=value
        )
    return qty


def _active_product_qs(product_id):
    try:
        return Product.objects.filter(pk=product_id, is_active=True)
    except (ValidationError, ValueError) as exc:
        raise ProductNotFoundError("Product not found", product_id=product_id) from exc


def current_stock(product_id) -> int:
    """Units on hand; 0 for unknown or inactive products."""
    try:
        stock = _active_product_qs(product_id).values_list("stock", flat=True).first()
    except ProductNotFoundError:
        return 0
    return int(stock or 0)


def check_availability(product_id, quantity) -> bool:
    qty = _to_int_qty(quantity)
    return current_stock(product_id) >= qty


def low_stock_products(threshold: int | None = None):
    """
    Active products at or below their own low_stock_threshold
    (or below an explicit threshold override), lowest stock first.
    """
    qs = Product.objects.filter(is_active=True)
    if threshold is None:
        qs = qs.filter(stock__lte=F("low_stock_threshold"))
    else:
        qs = qs.filter(stock__lte=int(threshold))
    return qs.order_by("stock", "name", "id")


def restock_product(*, product_id, quantity_delta, user=None) -> Product:
    """
    Add (+N) or remove (-N) ready-to-sell units.

    Removal is conditional: it fails with InsufficientStockError instead of
    driving stock below zero.
    """
    delta = _to_int_qty(quantity_delta, field="quantity_delta", allow_negative=True)

    try:
        product = _restock_atomic(product_id=product_id, delta=delta)
    except DatabaseError as exc:
        logger.exception("Product restock rolled back", extra={"product_id": str(product_id)})
        raise PersistenceFailure("Could not update product stock", product_id=product_id) from exc

    logger.info(
        "Product stock changed",
        extra={
            "product_id": str(product.pk),
            "quantity_delta": delta,
            "stock": product.stock,
            "user": getattr(user, "pk", None),
        },
    )
    return product


@transaction.atomic
def _restock_atomic(*, product_id, delta: int) -> Product:
    try:
        product = _active_product_qs(product_id).select_for_update().get()
    except Product.DoesNotExist as exc:
        raise ProductNotFoundError("Product not found", product_id=product_id) from exc

    qs = Product.objects.filter(pk=product.pk)
    if delta < 0:
        qs = qs.filter(stock__gte=-delta)

    if qs.update(stock=F("stock") + delta, updated_at=timezone.now()) != 1:
        raise InsufficientStockError(
            f"Insufficient stock for {product.name}",
            product_id=product.pk,
            available=product.stock,
            requested=-delta,
        )

    product.refresh_from_db(fields=["stock", "updated_at"])
    return product
