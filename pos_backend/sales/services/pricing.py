# sales/services/pricing.py

"""
PRICING ENGINE

Pure money math for order lines and orders. No database writes, no
stock checks.

Rules:
- Unit price by temperature: HOT -> hot_price, COLD -> cold_price,
  falling back to base_price when the variant is not set.
- Line subtotal = (unit price + sum(add_on.price x add_on.quantity)) x quantity
- Discount.amount is authoritative. Discount.percentage is carried for
  display/audit only and is NEVER used to recompute the amount.
- Line total = max(0, subtotal - discount.amount)
- Order total = sum(line totals) + service fee
- Rounding (2dp, ROUND_HALF_UP) happens once on final figures,
  never on per-unit intermediates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings

from inventory.services.exceptions import (
    InvalidQuantityError,
    NegativeChangeError,
    StockValidationError,
)

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

# column limits: unit prices are DecimalField(10, 2), order and line money
# DecimalField(12, 2), quantities PositiveIntegerField
UNIT_PRICE_MAX = Decimal("99999999.99")
MONEY_MAX = Decimal("9999999999.99")
QUANTITY_MAX = 2147483647

TEMPERATURE_NONE = "NONE"
TEMPERATURE_HOT = "HOT"
TEMPERATURE_COLD = "COLD"
TEMPERATURES = (TEMPERATURE_NONE, TEMPERATURE_HOT, TEMPERATURE_COLD)


def _money(v) -> Decimal:
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_decimal(value, *, field: str, limit: Decimal = MONEY_MAX) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise StockValidationError(f"{field} must be a valid decimal", field=field)
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise StockValidationError(f"{field} must be a valid decimal", field=field) from exc
    if not d.is_finite():
        raise StockValidationError(f"{field} must be a valid decimal", field=field)
    if abs(d) > limit:
        raise StockValidationError(f"{field} cannot exceed {limit}", field=field, value=value)
    return d


def parse_quantity(value, *, field: str = "quantity") -> int:
    if isinstance(value, bool) or value is None or value == "":
        raise InvalidQuantityError(f"{field} must be a positive integer", field=field)
    try:
        qty = int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise InvalidQuantityError(f"{field} must be a positive integer", field=field) from exc
    if qty < 1:
        raise InvalidQuantityError(
            f"{field} must be a positive integer", field=field, value=value
        )
    if qty > QUANTITY_MAX:
        raise InvalidQuantityError(
            f"{field} cannot exceed {QUANTITY_MAX}", field=field, value=value
        )
    return qty


def normalize_temperature(value) -> str:
    t = (str(value or TEMPERATURE_NONE)).strip().upper()
    if t not in TEMPERATURES:
        raise StockValidationError(
            "temperature must be one of NONE, HOT, COLD", field="temperature", value=value
        )
    return t


def normalize_payment_method(method: str | None) -> str:
    m = (method or "cash").strip().lower()
    return m or "cash"


def is_cash_method(method: str | None) -> bool:
    return normalize_payment_method(method) in set(settings.POS_CASH_METHODS)


@dataclass(frozen=True)
class AddOn:
    name: str
    price: Decimal
    quantity: int = 1

    def __post_init__(self):
        name = str(self.name or "").strip()
        if not name:
            raise StockValidationError("add-on name is required", field="add_ons")
        price = _to_decimal(self.price, field="add_on.price", limit=UNIT_PRICE_MAX)
        if price < ZERO:
            raise StockValidationError("add-on price cannot be negative", field="add_ons")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "price", price)
        object.__setattr__(self, "quantity", parse_quantity(self.quantity, field="add_on.quantity"))

    @property
    def total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class Discount:
    discount_type: str
    amount: Decimal
    percentage: Decimal | None = None

    def __post_init__(self):
        dtype = str(self.discount_type or "").strip()
        if not dtype:
            raise StockValidationError("discount type is required", field="discount")
        amount = _to_decimal(self.amount, field="discount.amount")
        if amount < ZERO:
            raise StockValidationError("discount amount cannot be negative", field="discount")
        pct = self.percentage
        if pct is not None:
            pct = _to_decimal(pct, field="discount.percentage")
            if pct < 0 or pct > 100:
                raise StockValidationError(
                    "discount percentage must be between 0 and 100", field="discount"
                )
        object.__setattr__(self, "discount_type", dtype)
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "percentage", pct)


@dataclass(frozen=True)
class PricedLine:
    unit_price: Decimal
    base_price: Decimal
    temperature: str
    quantity: int
    add_ons: tuple = ()
    discount: Discount | None = None
    subtotal: Decimal = ZERO
    discount_amount: Decimal = ZERO
    line_total: Decimal = ZERO


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    discount_total: Decimal
    service_fee: Decimal
    total: Decimal
    lines: list = field(default_factory=list)


def effective_unit_price(product, temperature=TEMPERATURE_NONE) -> Decimal:
    t = normalize_temperature(temperature)
    if t == TEMPERATURE_HOT and product.hot_price is not None:
        return Decimal(product.hot_price)
    if t == TEMPERATURE_COLD and product.cold_price is not None:
        return Decimal(product.cold_price)
    return Decimal(product.base_price)


def price_line(product, *, temperature=TEMPERATURE_NONE, quantity=1, add_ons=(), discount=None) -> PricedLine:
    """
    Price one cart line against trusted product data.

    The applied discount is capped at the line subtotal (a discount can
    zero a line, never make it negative).
    """
    t = normalize_temperature(temperature)
    qty = parse_quantity(quantity, field="quantity")
    add_ons = tuple(add_ons or ())

    unit_price = effective_unit_price(product, t)
    per_unit = unit_price + sum((a.total for a in add_ons), ZERO)
    subtotal = per_unit * qty
    if subtotal > MONEY_MAX:
        raise StockValidationError(
            f"Line for {product.name} exceeds the largest amount an order can hold",
            field="quantity",
            product_id=product.pk,
            quantity=qty,
        )

    applied = min(discount.amount, subtotal) if discount is not None else ZERO
    line_total = max(ZERO, subtotal - applied)

    return PricedLine(
        unit_price=_money(unit_price),
        base_price=_money(product.base_price),
        temperature=t,
        quantity=qty,
        add_ons=add_ons,
        discount=discount,
        subtotal=_money(subtotal),
        discount_amount=_money(applied),
        line_total=_money(line_total),
    )


def price_order(lines, *, service_fee=ZERO) -> OrderTotals:
    lines = list(lines)
    fee = _to_decimal(service_fee if service_fee is not None else ZERO, field="service_fee")
    if fee < ZERO:
        raise StockValidationError("service_fee cannot be negative", field="service_fee")

    subtotal = sum((line.subtotal for line in lines), ZERO)
    discount_total = sum((line.discount_amount for line in lines), ZERO)
    lines_total = sum((line.line_total for line in lines), ZERO)
    if subtotal > MONEY_MAX or lines_total + fee > MONEY_MAX:
        raise StockValidationError(
            f"Order total cannot exceed {MONEY_MAX}", field="total", total=lines_total + fee
        )

    return OrderTotals(
        subtotal=_money(subtotal),
        discount_total=_money(discount_total),
        service_fee=_money(fee),
        total=_money(lines_total + fee),
        lines=lines,
    )


def compute_change(total, amount_received, payment_method) -> Decimal:
    """
    Cash: change = received - total; fails with NegativeChangeError when
    the tender is short.
    Non-cash: no tender check; change is 0.00 when nothing was tendered.
    """
    total = _money(_to_decimal(total, field="total"))

    if is_cash_method(payment_method):
        received = ZERO if amount_received is None else _money(
            _to_decimal(amount_received, field="amount_received")
        )
        if received < total:
            raise NegativeChangeError(
                "Amount received is less than the order total",
                total=total,
                amount_received=received,
            )
        return _money(received - total)

    if amount_received is None or amount_received == "":
        return ZERO
    received = _money(_to_decimal(amount_received, field="amount_received"))
    return _money(max(ZERO, received - total))
