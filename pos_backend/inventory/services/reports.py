# inventory/services/reports.py

"""
INVENTORY REPORTS

Read-only aggregates over the ingredient projection and product stock.

Contract:
- No locks, no writes (may be slightly stale under concurrent writes)
- Deterministic ordering: two calls without intervening writes return
  identical results
- Inactive (soft-deleted) rows are excluded

Definitions:
- Low stock: quantity <= low_stock_threshold (inclusive)
- Item value: quantity x unit_cost; unknown cost contributes 0 but the
  item is still counted
- Ingredients without a supplier are grouped under supplier=None
  ("unspecified")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import F

from inventory.models import Ingredient
from products.services.stock import low_stock_products

TWOPLACES = Decimal("0.01")
UNSPECIFIED_SUPPLIER = "unspecified"


def _money(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LowStockReport:
    ingredients: list = field(default_factory=list)
    products: list = field(default_factory=list)


@dataclass(frozen=True)
class SupplierValue:
    supplier: str | None
    total_value: Decimal
    item_count: int

    @property
    def label(self) -> str:
        return self.supplier if self.supplier is not None else UNSPECIFIED_SUPPLIER


@dataclass(frozen=True)
class InventoryValuation:
    total_value: Decimal
    total_items: int
    value_by_supplier: list = field(default_factory=list)


@dataclass(frozen=True)
class ReorderSuggestion:
    ingredient: Ingredient
    depletion_ratio: Decimal | None
    shortfall: Decimal


def low_stock() -> LowStockReport:
    ingredients = list(
        Ingredient.objects.filter(
            is_active=True, quantity__lte=F("low_stock_threshold")
        ).order_by("quantity", "name", "id")
    )
    products = list(low_stock_products())
    return LowStockReport(ingredients=ingredients, products=products)


def valuation() -> InventoryValuation:
    buckets: dict[str | None, dict] = {}
    total = Decimal("0")
    count = 0

    for ingredient in Ingredient.objects.filter(is_active=True).order_by("name", "id"):
        supplier = (ingredient.supplier or "").strip() or None
        value = Decimal(ingredient.quantity or 0) * Decimal(ingredient.unit_cost or 0)

        bucket = buckets.setdefault(supplier, {"value": Decimal("0"), "count": 0})
        bucket["value"] += value
        bucket["count"] += 1

        total += value
        count += 1

    by_supplier = [
        SupplierValue(supplier=supplier, total_value=_money(b["value"]), item_count=b["count"])
        for supplier, b in buckets.items()
    ]
    # value desc, then supplier name; the unspecified bucket sorts after named ties
    by_supplier.sort(
        key=lambda s: (-s.total_value, s.supplier is None, s.supplier or "")
    )

    return InventoryValuation(
        total_value=_money(total),
        total_items=count,
        value_by_supplier=by_supplier,
    )


def reorder_suggestions() -> list[ReorderSuggestion]:
    """
    Low-stock active ingredients, most depleted first.

    depletion_ratio = quantity / threshold. A zero threshold has no ratio
    and sorts ahead of everything else.
    """
    suggestions = []
    for ingredient in low_stock().ingredients:
        quantity = Decimal(ingredient.quantity or 0)
        threshold = Decimal(ingredient.low_stock_threshold or 0)
        ratio = (quantity / threshold).quantize(Decimal("0.0001")) if threshold > 0 else None
        suggestions.append(
            ReorderSuggestion(
                ingredient=ingredient,
                depletion_ratio=ratio,
                shortfall=max(threshold - quantity, Decimal("0.000")),
            )
        )

    suggestions.sort(
        key=lambda s: (
            s.depletion_ratio is not None,
            s.depletion_ratio if s.depletion_ratio is not None else Decimal("0"),
            s.ingredient.name,
            str(s.ingredient.pk),
        )
    )
    return suggestions
