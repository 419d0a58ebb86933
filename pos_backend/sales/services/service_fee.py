# sales/services/service_fee.py

"""
Service-fee policy by service type.

DINE_IN: POS_DINE_IN_SERVICE_RATE x (subtotal - discounts)
TAKE_OUT: no fee
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings

from inventory.services.exceptions import StockValidationError
from sales.models import Order

TWOPLACES = Decimal("0.01")

SERVICE_TYPES = tuple(Order.ServiceType.values)


def normalize_service_type(value) -> str:
    st = str(value or Order.ServiceType.TAKE_OUT).strip().upper().replace("-", "_")
    if st not in SERVICE_TYPES:
        raise StockValidationError(
            "service_type must be DINE_IN or TAKE_OUT", field="service_type", value=value
        )
    return st


def dine_in_rate() -> Decimal:
    return Decimal(str(settings.POS_DINE_IN_SERVICE_RATE or "0"))


def service_fee_for(service_type, *, subtotal, discount_total=Decimal("0.00")) -> Decimal:
    if normalize_service_type(service_type) != Order.ServiceType.DINE_IN:
        return Decimal("0.00")

    base = max(Decimal("0.00"), Decimal(subtotal) - Decimal(discount_total))
    return (base * dine_in_rate()).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
