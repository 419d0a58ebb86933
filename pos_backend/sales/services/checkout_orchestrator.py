# sales/services/checkout_orchestrator.py

"""
CHECKOUT ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- Turn a priced cart into one committed Order (atomic, auditable).
- Validate + decrement product stock for every touched product.

Hard rules:
- Quantities are integer units (Product.stock is integer).
- Money values are computed server-side; client prices are only a
  consistency check. On disagreement the server price wins and the
  line/order is flagged (price_mismatch / has_price_mismatch).
- Product stock is independent of the ingredient ledger (no
  bill-of-materials expansion).

Notes:
- We keep the whole checkout inside one DB transaction:
  stock decrements + order rows succeed together or rollback together.
- Products are locked in primary-key order so concurrent checkouts over
  overlapping carts cannot deadlock.
- Validation and money checks (NegativeChangeError) happen before the
  first write.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from inventory.services.exceptions import (
    InsufficientStockError,
    PersistenceFailure,
    ProductNotFoundError,
    StockValidationError,
)
from products.models import Product
from sales.models import Order, OrderItem, OrderItemAddOn, OrderItemDiscount
from sales.services.business_time import business_now
from sales.services.exceptions import EmptyOrderError, OrderNotFoundError
from sales.services.order_lifecycle import validate_transition
from sales.services.pricing import (
    MONEY_MAX,
    UNIT_PRICE_MAX,
    Discount,
    compute_change,
    is_cash_method,
    normalize_payment_method,
    normalize_temperature,
    parse_quantity,
    price_line,
    price_order,
)
from sales.services.service_fee import normalize_service_type, service_fee_for

logger = logging.getLogger(__name__)

ORDER_STATUSES = {Order.STATUS_PENDING, Order.STATUS_COMPLETED}


@dataclass(frozen=True)
class CartLine:
    product_id: Any
    quantity: int = 1
    temperature: str = "NONE"
    add_ons: tuple = ()
    discount: Discount | None = None
    client_price: Decimal | None = None


@dataclass(frozen=True)
class CustomerInfo:
    name: str = ""
    email: str = ""
    phone: str = ""
    discount_type: str = ""
    discount_id: str = ""


@dataclass
class _Line:
    cart: CartLine
    product_id: uuid.UUID
    temperature: str
    quantity: int
    client_price: Decimal | None = None
    product: Product | None = None
    priced: Any = None
    price_mismatch: bool = False


def _parse_product_id(value) -> uuid.UUID:
    try:
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError) as exc:
        raise ProductNotFoundError("Product not found", product_id=value) from exc


def _to_optional_money(value, *, field: str, limit: Decimal = MONEY_MAX) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise StockValidationError(f"{field} must be a valid decimal", field=field)
    try:
        d = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise StockValidationError(f"{field} must be a valid decimal", field=field) from exc
    if not d.is_finite() or d < 0:
        raise StockValidationError(f"{field} must be a non-negative decimal", field=field)
    if d > limit:
        raise StockValidationError(f"{field} cannot exceed {limit}", field=field, value=value)
    return d


def _price_tolerance() -> Decimal:
    return Decimal(str(getattr(settings, "POS_PRICE_TOLERANCE", "0.00") or "0.00"))


def _actor(user) -> str:
    if user is None:
        return ""
    if isinstance(user, str):
        return user.strip()
    return str(getattr(user, "get_username", lambda: "")() or getattr(user, "pk", "") or "")


def commit_order(
    *,
    items,
    payment_method: str | None = "cash",
    service_type: str | None = Order.ServiceType.TAKE_OUT,
    amount_received=None,
    customer_info: CustomerInfo | None = None,
    service_fee=None,
    status: str = Order.STATUS_COMPLETED,
    notes: str = "",
    user=None,
) -> Order:
    """
    Commit a cart as one Order.

    Raises (no side effects on any of these):
    - EmptyOrderError: no lines
    - StockValidationError / InvalidQuantityError: malformed input
    - ProductNotFoundError: unknown or inactive product
    - InsufficientStockError: a product would oversell
    - NegativeChangeError: cash tendered below total
    - PersistenceFailure: storage error, full rollback (retryable)
    """
    items = list(items or [])
    if not items:
        raise EmptyOrderError("Order has no items")

    lines = []
    for cart_line in items:
        if not isinstance(cart_line, CartLine):
            raise StockValidationError("items must be CartLine values", field="items")
        lines.append(
            _Line(
                cart=cart_line,
                product_id=_parse_product_id(cart_line.product_id),
                temperature=normalize_temperature(cart_line.temperature),
                quantity=parse_quantity(cart_line.quantity),
                client_price=_to_optional_money(
                    cart_line.client_price, field="client_price", limit=UNIT_PRICE_MAX
                ),
            )
        )

    st = normalize_service_type(service_type)
    pm = normalize_payment_method(payment_method)
    received = _to_optional_money(amount_received, field="amount_received")
    fee = _to_optional_money(service_fee, field="service_fee")

    status = (status or Order.STATUS_COMPLETED).strip().lower()
    if status not in ORDER_STATUSES:
        raise StockValidationError("status must be pending or completed", field="status")

    try:
        order = _commit_atomic(
            lines=lines,
            service_type=st,
            payment_method=pm,
            amount_received=received,
            service_fee=fee,
            customer=customer_info or CustomerInfo(),
            status=status,
            notes=(notes or "").strip(),
            created_by=_actor(user),
        )
    except DatabaseError as exc:
        logger.exception("Checkout rolled back", extra={"line_count": len(lines)})
        raise PersistenceFailure("Could not commit order") from exc

    logger.info(
        "Order committed",
        extra={
            "order_id": str(order.pk),
            "order_number": order.order_number,
            "total": str(order.total),
            "payment_method": order.payment_method,
            "service_type": order.service_type,
            "price_mismatch": order.has_price_mismatch,
        },
    )
    return order


@transaction.atomic
def _commit_atomic(
    *,
    lines,
    service_type,
    payment_method,
    amount_received,
    service_fee,
    customer: CustomerInfo,
    status,
    notes,
    created_by,
) -> Order:
    # --------------------------------------------------
    # LOCK PRODUCTS (sorted) + STOCK CHECK
    # --------------------------------------------------
    requested: dict[uuid.UUID, int] = {}
    for line in lines:
        requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity

    products = {
        p.pk: p
        for p in Product.objects.select_for_update()
        .filter(pk__in=sorted(requested), is_active=True)
        .order_by("pk")
    }

    for product_id in sorted(requested):
        product = products.get(product_id)
        if product is None:
            raise ProductNotFoundError("Product not found", product_id=product_id)
        if product.stock < requested[product_id]:
            logger.warning(
                "Checkout rejected: insufficient stock",
                extra={
                    "product_id": str(product_id),
                    "available": product.stock,
                    "requested": requested[product_id],
                },
            )
            raise InsufficientStockError(
                f"Insufficient stock for {product.name}",
                product_id=product_id,
                available=product.stock,
                requested=requested[product_id],
            )

    # --------------------------------------------------
    # PRICE (server side) + MISMATCH CHECK
    # --------------------------------------------------
    tolerance = _price_tolerance()
    for line in lines:
        line.product = products[line.product_id]
        line.priced = price_line(
            line.product,
            temperature=line.temperature,
            quantity=line.quantity,
            add_ons=line.cart.add_ons,
            discount=line.cart.discount,
        )
        client_price = line.client_price
        if client_price is not None and abs(client_price - line.priced.unit_price) > tolerance:
            line.price_mismatch = True
            logger.warning(
                "Client price disagrees with server price",
                extra={
                    "product_id": str(line.product_id),
                    "client_price": str(client_price),
                    "server_price": str(line.priced.unit_price),
                },
            )

    pre_fee = price_order([line.priced for line in lines])
    if service_fee is None:
        service_fee = service_fee_for(
            service_type,
            subtotal=pre_fee.subtotal,
            discount_total=pre_fee.discount_total,
        )
    totals = price_order([line.priced for line in lines], service_fee=service_fee)

    change = compute_change(totals.total, amount_received, payment_method)
    if amount_received is None:
        amount_received = Decimal("0.00") if is_cash_method(payment_method) else totals.total

    # --------------------------------------------------
    # WRITES
    # --------------------------------------------------
    now = business_now()

    for product_id in sorted(requested):
        qty = requested[product_id]
        updated = Product.objects.filter(
            pk=product_id, is_active=True, stock__gte=qty
        ).update(stock=F("stock") - qty, updated_at=timezone.now())
        if updated != 1:
            raise InsufficientStockError(
                "Insufficient stock",
                product_id=product_id,
                requested=qty,
            )

    order = Order.objects.create(
        timestamp=now,
        business_date=now.date(),
        subtotal=totals.subtotal,
        discount_total=totals.discount_total,
        service_fee=totals.service_fee,
        total=totals.total,
        payment_method=payment_method,
        amount_received=amount_received,
        change=change,
        service_type=service_type,
        customer_name=(customer.name or "").strip(),
        customer_email=(customer.email or "").strip(),
        customer_phone=(customer.phone or "").strip(),
        customer_discount_type=(customer.discount_type or "").strip(),
        customer_discount_id=(customer.discount_id or "").strip(),
        status=status,
        notes=notes,
        has_price_mismatch=any(line.price_mismatch for line in lines),
        created_by=created_by,
    )

    for line in lines:
        priced = line.priced
        item = OrderItem.objects.create(
            order=order,
            product=line.product,
            product_id_snapshot=str(line.product.pk),
            name=line.product.name,
            category=line.product.category or "",
            price=priced.unit_price,
            base_price=priced.base_price,
            temperature=priced.temperature,
            quantity=priced.quantity,
            subtotal=priced.subtotal,
            discount_amount=priced.discount_amount,
            line_total=priced.line_total,
            client_price=line.client_price,
            price_mismatch=line.price_mismatch,
            created_at=now,
        )

        for add_on in priced.add_ons:
            OrderItemAddOn.objects.create(
                item=item,
                name=add_on.name,
                price=add_on.price,
                quantity=add_on.quantity,
            )

        if priced.discount is not None:
            OrderItemDiscount.objects.create(
                item=item,
                discount_type=priced.discount.discount_type,
                percentage=priced.discount.percentage,
                amount=priced.discount.amount,
            )

    return order


def update_order_status(*, order_id, status: str, user=None) -> Order:
    """
    The only permitted mutation of a committed Order.
    Transitions are validated by sales.services.order_lifecycle.
    """
    target = (status or "").strip().lower()

    try:
        order = _update_status_atomic(order_id=order_id, target=target)
    except DatabaseError as exc:
        logger.exception("Order status update rolled back", extra={"order_id": str(order_id)})
        raise PersistenceFailure("Could not update order status", order_id=order_id) from exc

    logger.info(
        "Order status changed",
        extra={"order_id": str(order.pk), "status": order.status, "user": _actor(user)},
    )
    return order


@transaction.atomic
def _update_status_atomic(*, order_id, target: str) -> Order:
    try:
        order = Order.objects.select_for_update().get(pk=order_id)
    except (Order.DoesNotExist, ValidationError, ValueError) as exc:
        raise OrderNotFoundError("Order not found", order_id=order_id) from exc

    validate_transition(order=order, target_status=target)

    order.status = target
    if target == Order.STATUS_COMPLETED:
        order.completed_at = timezone.now()
    order.save(update_fields=["status", "completed_at"])
    return order
