# sales/tests/test_pricing.py

from decimal import Decimal

from django.test import SimpleTestCase, override_settings

from inventory.services.exceptions import (
    InvalidQuantityError,
    NegativeChangeError,
    StockValidationError,
)
from products.models import Product
from sales.services.pricing import (
    AddOn,
    Discount,
    compute_change,
    effective_unit_price,
    price_line,
    price_order,
)
from sales.services.service_fee import service_fee_for


def _latte(**overrides):
    values = {
        "name": "Latte",
        "category": "Coffee",
        "base_price": Decimal("3.00"),
        "hot_price": Decimal("3.50"),
        "cold_price": None,
    }
    values.update(overrides)
    return Product(**values)


class EffectivePriceTests(SimpleTestCase):
    def test_hot_uses_hot_price(self):
        self.assertEqual(effective_unit_price(_latte(), "HOT"), Decimal("3.50"))

    def test_cold_falls_back_to_base_price(self):
        self.assertEqual(effective_unit_price(_latte(), "COLD"), Decimal("3.00"))

    def test_none_uses_base_price(self):
        self.assertEqual(effective_unit_price(_latte(), "NONE"), Decimal("3.00"))

    def test_unknown_temperature_rejected(self):
        with self.assertRaises(StockValidationError):
            effective_unit_price(_latte(), "WARM")


class PriceLineTests(SimpleTestCase):
    def test_hot_line_with_add_on(self):
        line = price_line(
            _latte(),
            temperature="HOT",
            quantity=2,
            add_ons=[AddOn(name="Extra Shot", price=Decimal("0.50"), quantity=1)],
        )

        self.assertEqual(line.unit_price, Decimal("3.50"))
        self.assertEqual(line.base_price, Decimal("3.00"))
        self.assertEqual(line.subtotal, Decimal("8.00"))
        self.assertEqual(line.line_total, Decimal("8.00"))

    def test_discount_never_drives_line_negative(self):
        line = price_line(
            _latte(base_price=Decimal("5.00"), hot_price=None),
            quantity=1,
            discount=Discount(discount_type="PROMO", amount=Decimal("7.00")),
        )

        self.assertEqual(line.subtotal, Decimal("5.00"))
        self.assertEqual(line.discount_amount, Decimal("5.00"))
        self.assertEqual(line.line_total, Decimal("0.00"))

    def test_percentage_is_not_used_to_recompute_amount(self):
        line = price_line(
            _latte(base_price=Decimal("10.00"), hot_price=None),
            quantity=1,
            discount=Discount(
                discount_type="SENIOR", amount=Decimal("1.00"), percentage=Decimal("20")
            ),
        )

        self.assertEqual(line.discount_amount, Decimal("1.00"))
        self.assertEqual(line.line_total, Decimal("9.00"))

    def test_rounding_applies_to_final_figures_only(self):
        # 3 x 0.335 = 1.005 -> 1.01 (rounding each unit first would give 1.02)
        line = price_line(
            _latte(base_price=Decimal("0.335"), hot_price=None),
            quantity=3,
        )
        self.assertEqual(line.line_total, Decimal("1.01"))

    def test_quantity_must_be_positive_integer(self):
        for bad in (0, -1, "1.5", None, True):
            with self.assertRaises(InvalidQuantityError):
                price_line(_latte(), quantity=bad)

    def test_negative_add_on_price_rejected(self):
        with self.assertRaises(StockValidationError):
            AddOn(name="Syrup", price=Decimal("-0.10"))

    def test_values_beyond_column_precision_are_validation_errors(self):
        with self.assertRaises(InvalidQuantityError):
            price_line(_latte(), quantity=2**31)
        with self.assertRaises(StockValidationError):
            AddOn(name="Syrup", price=Decimal("100000000.00"))
        with self.assertRaises(StockValidationError):
            Discount(discount_type="PROMO", amount="1e40")

    def test_line_subtotal_must_fit_an_order(self):
        pricey = _latte(base_price=Decimal("99999999.99"))

        self.assertEqual(
            price_line(pricey, quantity=100).subtotal, Decimal("9999999999.00")
        )
        with self.assertRaises(StockValidationError) as ctx:
            price_line(pricey, quantity=101)
        self.assertEqual(ctx.exception.detail["field"], "quantity")


class PriceOrderTests(SimpleTestCase):
    def test_total_is_lines_plus_service_fee(self):
        lines = [
            price_line(_latte(), temperature="HOT", quantity=2),
            price_line(
                _latte(),
                quantity=1,
                discount=Discount(discount_type="PROMO", amount=Decimal("0.50")),
            ),
        ]

        totals = price_order(lines, service_fee=Decimal("0.20"))

        self.assertEqual(totals.subtotal, Decimal("10.00"))
        self.assertEqual(totals.discount_total, Decimal("0.50"))
        self.assertEqual(totals.service_fee, Decimal("0.20"))
        self.assertEqual(totals.total, Decimal("9.70"))

    def test_total_beyond_column_precision_is_rejected(self):
        line = price_line(_latte(base_price=Decimal("99999999.99")), quantity=100)

        with self.assertRaises(StockValidationError):
            price_order([line, line])
        with self.assertRaises(StockValidationError):
            price_order([line], service_fee=Decimal("1.00"))
        with self.assertRaises(StockValidationError):
            price_order([], service_fee="1e30")


@override_settings(POS_CASH_METHODS=["cash"])
class ChangeTests(SimpleTestCase):
    def test_cash_change(self):
        self.assertEqual(
            compute_change(Decimal("45.50"), Decimal("50.00"), "cash"), Decimal("4.50")
        )

    def test_cash_short_tender_fails(self):
        with self.assertRaises(NegativeChangeError):
            compute_change(Decimal("45.50"), Decimal("40.00"), "cash")

    def test_cash_without_tender_fails(self):
        with self.assertRaises(NegativeChangeError):
            compute_change(Decimal("1.00"), None, "Cash")

    def test_non_cash_skips_tender_check(self):
        self.assertEqual(compute_change(Decimal("45.50"), None, "card"), Decimal("0.00"))
        self.assertEqual(
            compute_change(Decimal("45.50"), Decimal("40.00"), "gcash"), Decimal("0.00")
        )


@override_settings(POS_DINE_IN_SERVICE_RATE="0.02")
class ServiceFeeTests(SimpleTestCase):
    def test_dine_in_fee_on_discounted_subtotal(self):
        fee = service_fee_for(
            "DINE_IN", subtotal=Decimal("100.00"), discount_total=Decimal("10.00")
        )
        self.assertEqual(fee, Decimal("1.80"))

    def test_take_out_has_no_fee(self):
        self.assertEqual(service_fee_for("TAKE_OUT", subtotal=Decimal("100.00")), Decimal("0.00"))

    def test_unknown_service_type_rejected(self):
        with self.assertRaises(StockValidationError):
            service_fee_for("DELIVERY", subtotal=Decimal("1.00"))
