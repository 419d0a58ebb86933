# inventory/services/__init__.py

from .ledger import (
    adjust_quantity,
    append_movement,
    create_ingredient,
    deactivate_ingredient,
    get_all,
    get_history,
    get_movement,
    ledger_balance,
    receive_purchase,
    reconcile_projection,
    record_return,
    record_waste,
    signed_delta,
    update_ingredient_details,
)
from .reports import low_stock, reorder_suggestions, valuation

__all__ = [
    "append_movement",
    "receive_purchase",
    "record_waste",
    "record_return",
    "adjust_quantity",
    "create_ingredient",
    "update_ingredient_details",
    "deactivate_ingredient",
    "get_history",
    "get_all",
    "get_movement",
    "signed_delta",
    "ledger_balance",
    "reconcile_projection",
    "low_stock",
    "valuation",
    "reorder_suggestions",
]
