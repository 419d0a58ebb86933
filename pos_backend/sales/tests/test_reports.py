# sales/tests/test_reports.py

from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase, override_settings

from inventory.services.exceptions import StockValidationError
from products.models import Product
from sales.models import Order
from sales.services import CartLine, commit_order
from sales.services.reports import (
    MAX_RANGE_DAYS,
    category_report,
    daily_report,
    product_sales_report,
    sales_range_report,
    top_selling_products,
)


def _at(y, m, d, hour=3):
    return datetime(y, m, d, hour, 0, tzinfo=dt_timezone.utc)


@override_settings(POS_BUSINESS_TIME_ZONE="Asia/Manila", POS_CASH_METHODS=["cash"])
class SalesReportTests(TestCase):
    def setUp(self):
        self.latte = Product.objects.create(
            name="Latte", category="Coffee", base_price=Decimal("3.00"), stock=50
        )
        self.muffin = Product.objects.create(
            name="Muffin", category="Pastry", base_price=Decimal("2.00"), stock=50
        )
        self.tea = Product.objects.create(
            name="Tea", category="Tea", base_price=Decimal("1.50"), stock=50
        )

        self._commit(_at(2026, 5, 4), [(self.latte, 2), (self.muffin, 1)])
        self._commit(_at(2026, 5, 4), [(self.latte, 1)])
        self._commit(_at(2026, 5, 6), [(self.muffin, 3)])
        # pending orders never count
        self._commit(_at(2026, 5, 4), [(self.tea, 4)], status=Order.STATUS_PENDING)

    def _commit(self, when, lines, status=Order.STATUS_COMPLETED):
        with patch("django.utils.timezone.now", return_value=when):
            return commit_order(
                items=[CartLine(product_id=p.pk, quantity=q) for p, q in lines],
                payment_method="card",
                status=status,
            )

    def test_daily_report(self):
        report = daily_report(date(2026, 5, 4))

        self.assertEqual(report["total_sales"], Decimal("11.00"))
        self.assertEqual(report["transaction_count"], 2)
        self.assertEqual(report["average_value"], Decimal("5.50"))
        self.assertEqual(
            [(r["name"], r["quantity"]) for r in report["top_products"]],
            [("Latte", 3), ("Muffin", 1)],
        )

    def test_daily_report_uses_business_date(self):
        # 2026-05-04 20:00 UTC is already 2026-05-05 in Manila
        self._commit(_at(2026, 5, 4, hour=20), [(self.tea, 1)])

        self.assertEqual(daily_report(date(2026, 5, 4))["transaction_count"], 2)
        self.assertEqual(daily_report(date(2026, 5, 5))["transaction_count"], 1)

    def test_range_report_includes_empty_days(self):
        report = sales_range_report(date(2026, 5, 4), date(2026, 5, 6))

        self.assertEqual(
            [(d["date"], d["total_sales"]) for d in report["days"]],
            [
                (date(2026, 5, 4), Decimal("11.00")),
                (date(2026, 5, 5), Decimal("0.00")),
                (date(2026, 5, 6), Decimal("6.00")),
            ],
        )
        self.assertEqual(report["total_sales"], Decimal("17.00"))
        self.assertEqual(report["transaction_count"], 3)

    def test_range_report_reaches_last_representable_day(self):
        report = sales_range_report(date(9999, 12, 30), date(9999, 12, 31))

        self.assertEqual([d["date"] for d in report["days"]], [date(9999, 12, 30), date(9999, 12, 31)])
        self.assertEqual(report["total_sales"], Decimal("0.00"))

    def test_range_report_accepts_reversed_dates(self):
        report = sales_range_report(date(2026, 5, 6), date(2026, 5, 4))

        self.assertEqual(report["date_from"], date(2026, 5, 4))
        self.assertEqual(len(report["days"]), 3)

    def test_range_report_is_capped(self):
        start = date(2020, 1, 1)
        self.assertEqual(
            len(sales_range_report(start, start + timedelta(days=MAX_RANGE_DAYS - 1))["days"]),
            MAX_RANGE_DAYS,
        )

        with self.assertRaises(StockValidationError) as ctx:
            sales_range_report(start, start + timedelta(days=MAX_RANGE_DAYS))
        self.assertEqual(ctx.exception.detail["field"], "date_to")

    def test_top_selling_products(self):
        rows = top_selling_products(limit=1)
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["name"], "Muffin")
        self.assertEqual(rows[0]["quantity"], 4)
        self.assertEqual(rows[0]["revenue"], Decimal("8.00"))

    def test_category_report(self):
        rows = category_report()
        self.assertEqual(
            [(r["category"], r["revenue"]) for r in rows],
            [("Coffee", Decimal("9.00")), ("Pastry", Decimal("8.00"))],
        )

    def test_product_sales_report_keeps_history_after_rename(self):
        self.latte.name = "House Latte"
        self.latte.save()

        rows = {r["product_id"]: r for r in product_sales_report()}

        self.assertEqual(rows[str(self.latte.pk)]["name"], "House Latte")
        self.assertEqual(rows[str(self.latte.pk)]["quantity_sold"], 3)
        self.assertEqual(rows[str(self.tea.pk)]["quantity_sold"], 0)
