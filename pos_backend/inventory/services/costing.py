# inventory/services/costing.py

"""
COSTING POLICY

Decides the unit cost stamped on every StockMovement and keeps the
Ingredient cost fields current.

Rules:
- PURCHASE: replace-cost (NOT weighted average).
    ingredient.unit_cost          <- purchase unit cost
    ingredient.last_purchase_cost <- purchase unit cost
    ingredient.last_purchase_date <- movement time
    movement.unit_cost_at_time    <- purchase unit cost
- SALE / WASTE / ADJUSTMENT / RETURN:
    movement.unit_cost_at_time <- ingredient.unit_cost at that moment (may be None)
    ingredient cost fields untouched

Callers MUST hold the ingredient row lock (ledger does this) so the
snapshot and the replacement happen against a stable row.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from inventory.models import Ingredient, StockMovement
from inventory.services.exceptions import StockValidationError

TWOPLACES = Decimal("0.01")
# DecimalField(max_digits=12, decimal_places=2)
COST_MAX = Decimal("9999999999.99")


@dataclass(frozen=True)
class CostDecision:
    unit_cost_at_time: Decimal | None
    ingredient_fields: dict


def _to_cost(value) -> Decimal:
    if value is None or value == "" or value == "null":
        raise StockValidationError("unit_cost is required for purchases", field="unit_cost")
    if isinstance(value, bool):
        raise StockValidationError("unit_cost must be a valid decimal", field="unit_cost")
    try:
        cost = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise StockValidationError("unit_cost must be a valid decimal", field="unit_cost") from exc
    if not cost.is_finite():
        raise StockValidationError("unit_cost must be a valid decimal", field="unit_cost")
    if abs(cost) > COST_MAX:
        raise StockValidationError(f"unit_cost cannot exceed {COST_MAX}", field="unit_cost")
    return cost.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def decide_cost(
    *,
    ingredient: Ingredient,
    movement_type: str,
    unit_cost=None,
    at: datetime,
) -> CostDecision:
    """
    Pure decision: what to stamp on the movement and which ingredient
    fields change. No writes.
    """
    if movement_type == StockMovement.MovementType.PURCHASE:
        cost = _to_cost(unit_cost)
        if cost <= Decimal("0.00"):
            raise StockValidationError(
                "unit_cost must be greater than zero", field="unit_cost"
            )
        return CostDecision(
            unit_cost_at_time=cost,
            ingredient_fields={
                "unit_cost": cost,
                "last_purchase_cost": cost,
                "last_purchase_date": at,
            },
        )

    current = ingredient.unit_cost
    return CostDecision(
        unit_cost_at_time=Decimal(current) if current is not None else None,
        ingredient_fields={},
    )


def movement_value(movement: StockMovement) -> Decimal:
    """quantity x frozen unit cost (0 when cost was unknown)."""
    return movement.total_cost.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
