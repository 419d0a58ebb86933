# sales/services/__init__.py

from .checkout_orchestrator import CartLine, CustomerInfo, commit_order, update_order_status
from .pricing import (
    AddOn,
    Discount,
    OrderTotals,
    PricedLine,
    compute_change,
    effective_unit_price,
    price_line,
    price_order,
)

__all__ = [
    "AddOn",
    "CartLine",
    "CustomerInfo",
    "Discount",
    "OrderTotals",
    "PricedLine",
    "commit_order",
    "compute_change",
    "effective_unit_price",
    "price_line",
    "price_order",
    "update_order_status",
]
