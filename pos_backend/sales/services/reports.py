# sales/services/reports.py

"""
SALES REPORTS (READ-ONLY)

Rules:
- Only COMPLETED orders count.
- Days are business days (Order.business_date, POS_BUSINESS_TIME_ZONE),
  never UTC dates.
- Product revenue comes from OrderItem snapshots (line_total after
  discount), so later product edits never rewrite history.
- Order-level sales (total_sales) include the service fee.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Count, Sum

from inventory.services.exceptions import StockValidationError
from products.models import Product
from sales.models import Order, OrderItem

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

DAILY_TOP_PRODUCTS = 5
DEFAULT_TOP_LIMIT = 10
MAX_RANGE_DAYS = 366


def _money(v) -> Decimal:
    return Decimal(str(v or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _completed_orders():
    return Order.objects.filter(status=Order.STATUS_COMPLETED)


def _completed_items():
    return OrderItem.objects.filter(order__status=Order.STATUS_COMPLETED)


def _product_rows(items_qs, *, limit: int | None = None) -> list[dict]:
    rows = (
        items_qs.values("product_id_snapshot", "name")
        .annotate(quantity=Sum("quantity"), revenue=Sum("line_total"))
        .order_by("-quantity", "-revenue", "name", "product_id_snapshot")
    )
    if limit is not None:
        rows = rows[:limit]
    return [
        {
            "product_id": r["product_id_snapshot"],
            "name": r["name"],
            "quantity": int(r["quantity"] or 0),
            "revenue": _money(r["revenue"]),
        }
        for r in rows
    ]


def daily_report(day: date) -> dict:
    orders = _completed_orders().filter(business_date=day)
    agg = orders.aggregate(total=Sum("total"), count=Count("id"))

    total = _money(agg["total"])
    count = int(agg["count"] or 0)
    average = _money(total / count) if count else ZERO

    return {
        "date": day,
        "total_sales": total,
        "transaction_count": count,
        "average_value": average,
        "top_products": _product_rows(
            _completed_items().filter(order__business_date=day),
            limit=DAILY_TOP_PRODUCTS,
        ),
    }


def sales_range_report(date_from: date, date_to: date) -> dict:
    """Per-day totals for every day in [date_from, date_to], zero days included."""
    if date_to < date_from:
        date_from, date_to = date_to, date_from

    if (date_to - date_from).days + 1 > MAX_RANGE_DAYS:
        raise StockValidationError(
            f"Date range cannot exceed {MAX_RANGE_DAYS} days",
            field="date_to",
            date_from=date_from,
            date_to=date_to,
        )

    rows = (
        _completed_orders()
        .filter(business_date__gte=date_from, business_date__lte=date_to)
        .values("business_date")
        .annotate(total=Sum("total"), count=Count("id"))
    )
    by_day = {r["business_date"]: r for r in rows}

    days = []
    grand_total = ZERO
    grand_count = 0
    for offset in range((date_to - date_from).days + 1):
        d = date_from + timedelta(days=offset)
        r = by_day.get(d) or {}
        total = _money(r.get("total"))
        count = int(r.get("count") or 0)
        days.append({"date": d, "total_sales": total, "transaction_count": count})
        grand_total += total
        grand_count += count

    return {
        "date_from": date_from,
        "date_to": date_to,
        "total_sales": _money(grand_total),
        "transaction_count": grand_count,
        "days": days,
    }


def top_selling_products(*, limit: int = DEFAULT_TOP_LIMIT, date_from=None, date_to=None) -> list[dict]:
    qs = _completed_items()
    if date_from is not None:
        qs = qs.filter(order__business_date__gte=date_from)
    if date_to is not None:
        qs = qs.filter(order__business_date__lte=date_to)
    return _product_rows(qs, limit=max(1, int(limit)))


def category_report(*, date_from=None, date_to=None) -> list[dict]:
    qs = _completed_items()
    if date_from is not None:
        qs = qs.filter(order__business_date__gte=date_from)
    if date_to is not None:
        qs = qs.filter(order__business_date__lte=date_to)

    rows = (
        qs.values("category")
        .annotate(quantity=Sum("quantity"), revenue=Sum("line_total"))
        .order_by("-revenue", "category")
    )
    return [
        {
            "category": r["category"] or "Uncategorized",
            "quantity": int(r["quantity"] or 0),
            "revenue": _money(r["revenue"]),
        }
        for r in rows
    ]


def product_sales_report() -> list[dict]:
    """
    All-time sales per active product, including products that never sold.
    Matched by the product id snapshot, so renamed products keep their history.
    """
    sold = {
        r["product_id_snapshot"]: r
        for r in _completed_items()
        .values("product_id_snapshot")
        .annotate(quantity=Sum("quantity"), revenue=Sum("line_total"))
    }

    out = []
    for product in Product.objects.filter(is_active=True).order_by("name", "id"):
        r = sold.get(str(product.pk)) or {}
        out.append(
            {
                "product_id": str(product.pk),
                "name": product.name,
                "category": product.category,
                "stock": product.stock,
                "quantity_sold": int(r.get("quantity") or 0),
                "revenue": _money(r.get("revenue")),
            }
        )

    out.sort(key=lambda row: (-row["quantity_sold"], row["name"], row["product_id"]))
    return out
