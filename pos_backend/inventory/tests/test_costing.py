# inventory/tests/test_costing.py

from decimal import Decimal

from django.test import TestCase

from inventory.models import StockMovement
from inventory.services import ledger
from inventory.services.costing import movement_value
from inventory.services.exceptions import StockValidationError


class CostingPolicyTests(TestCase):
    """
    GUARANTEES:
    - PURCHASE replaces unit_cost (no weighted average)
    - Every other movement snapshots the current unit_cost
    - Snapshots never change after later purchases
    """

    def setUp(self):
        self.beans = ledger.create_ingredient(name="Espresso Beans", unit="kg")

    def test_purchase_replaces_cost(self):
        ledger.receive_purchase(ingredient_id=self.beans.pk, quantity="10", unit_cost="2.00")
        ledger.receive_purchase(ingredient_id=self.beans.pk, quantity="10", unit_cost="4.00")

        self.beans.refresh_from_db()
        self.assertEqual(self.beans.unit_cost, Decimal("4.00"))
        self.assertEqual(self.beans.last_purchase_cost, Decimal("4.00"))
        self.assertIsNotNone(self.beans.last_purchase_date)

    def test_purchase_date_matches_movement_time(self):
        movement = ledger.receive_purchase(
            ingredient_id=self.beans.pk, quantity="1", unit_cost="3.00"
        )

        self.beans.refresh_from_db()
        self.assertEqual(self.beans.last_purchase_date, movement.created_at)
        self.assertEqual(movement.unit_cost_at_time, Decimal("3.00"))

    def test_non_purchase_snapshots_current_cost(self):
        ledger.receive_purchase(ingredient_id=self.beans.pk, quantity="10", unit_cost="2.00")
        waste = ledger.record_waste(ingredient_id=self.beans.pk, quantity="1")

        ledger.receive_purchase(ingredient_id=self.beans.pk, quantity="5", unit_cost="6.00")
        waste.refresh_from_db()

        self.assertEqual(waste.unit_cost_at_time, Decimal("2.00"))
        self.assertEqual(movement_value(waste), Decimal("2.00"))

    def test_snapshot_is_null_when_cost_unknown(self):
        movement = ledger.adjust_quantity(ingredient_id=self.beans.pk, quantity_delta="3")

        self.assertIsNone(movement.unit_cost_at_time)
        self.assertEqual(movement_value(movement), Decimal("0.00"))

    def test_cost_passed_to_non_purchase_does_not_touch_ingredient(self):
        ledger.receive_purchase(ingredient_id=self.beans.pk, quantity="2", unit_cost="5.00")
        ledger.append_movement(
            ingredient_id=self.beans.pk,
            movement_type="RETURN",
            quantity="1",
            unit_cost="99.00",
        )

        self.beans.refresh_from_db()
        self.assertEqual(self.beans.unit_cost, Decimal("5.00"))
        self.assertEqual(
            StockMovement.objects.filter(movement_type="RETURN").get().unit_cost_at_time,
            Decimal("5.00"),
        )

    def test_purchase_requires_positive_cost(self):
        for bad in (None, "", "0", "-1.00", "abc"):
            with self.subTest(unit_cost=bad):
                with self.assertRaises(StockValidationError):
                    ledger.receive_purchase(
                        ingredient_id=self.beans.pk, quantity="1", unit_cost=bad
                    )

        self.beans.refresh_from_db()
        self.assertEqual(self.beans.quantity, Decimal("0.000"))
        self.assertIsNone(self.beans.unit_cost)

    def test_cost_beyond_column_precision_is_rejected(self):
        for bad in ("10000000000.00", "1e40"):
            with self.subTest(unit_cost=bad):
                with self.assertRaises(StockValidationError) as ctx:
                    ledger.receive_purchase(
                        ingredient_id=self.beans.pk, quantity="1", unit_cost=bad
                    )
                self.assertEqual(ctx.exception.code, "validation_error")

        self.beans.refresh_from_db()
        self.assertEqual(self.beans.quantity, Decimal("0.000"))

    def test_movement_value_rounds_once(self):
        movement = ledger.receive_purchase(
            ingredient_id=self.beans.pk, quantity="0.333", unit_cost="3.00"
        )

        self.assertEqual(movement_value(movement), Decimal("1.00"))
