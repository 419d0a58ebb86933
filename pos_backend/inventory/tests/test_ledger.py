# inventory/tests/test_ledger.py

from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone

from inventory.models import Ingredient, StockMovement
from inventory.services import ledger
from inventory.services.exceptions import (
    IngredientNotFoundError,
    InsufficientStockError,
    InvalidQuantityError,
    MovementNotFoundError,
    PersistenceFailure,
    StockValidationError,
)


class StockLedgerTests(TestCase):
    """
    Ingredient ledger tests.

    GUARANTEES:
    - quantity == signed sum of movements after every write
    - Oversell is rejected and leaves quantity unchanged
    - Only ADJUSTMENT/OUT may override the non-negative rule
    - Movements are immutable
    """

    def setUp(self):
        self.milk = ledger.create_ingredient(
            name="Whole Milk",
            unit="L",
            low_stock_threshold="5",
            supplier="Dairy Co",
            opening_quantity="10",
        )

    def _assert_projection_matches_ledger(self, ingredient):
        ingredient.refresh_from_db()
        self.assertEqual(
            ingredient.quantity,
            ledger.ledger_balance(ingredient_id=ingredient.pk),
        )

    def test_opening_quantity_is_recorded_as_adjustment_in(self):
        movements = list(ledger.get_history(ingredient_id=self.milk.pk))

        self.assertEqual(len(movements), 1)
        self.assertEqual(movements[0].movement_type, StockMovement.MovementType.ADJUSTMENT)
        self.assertEqual(movements[0].direction, StockMovement.Direction.IN)
        self.assertEqual(movements[0].quantity, Decimal("10.000"))
        self.assertEqual(movements[0].reason, "Opening balance")
        self._assert_projection_matches_ledger(self.milk)

    def test_create_without_opening_quantity_writes_no_movement(self):
        beans = ledger.create_ingredient(name="Espresso Beans", unit="kg")

        self.assertEqual(beans.quantity, Decimal("0.000"))
        self.assertFalse(StockMovement.objects.filter(ingredient=beans).exists())

    def test_purchase_increases_quantity(self):
        ledger.receive_purchase(ingredient_id=self.milk.pk, quantity="2.5", unit_cost="1.20")

        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("12.500"))
        self._assert_projection_matches_ledger(self.milk)

    def test_sale_that_would_oversell_is_rejected(self):
        ledger.append_movement(
            ingredient_id=self.milk.pk,
            movement_type="ADJUSTMENT",
            direction="OUT",
            quantity="7",
        )

        with self.assertRaises(InsufficientStockError) as ctx:
            ledger.append_movement(
                ingredient_id=self.milk.pk, movement_type="SALE", quantity="5"
            )

        self.assertEqual(ctx.exception.code, "insufficient_stock")
        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("3.000"))
        self.assertEqual(StockMovement.objects.filter(ingredient=self.milk).count(), 2)

    def test_waste_can_empty_stock_exactly(self):
        ledger.record_waste(ingredient_id=self.milk.pk, quantity="10")

        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("0.000"))

    def test_adjustment_requires_explicit_direction(self):
        with self.assertRaises(StockValidationError):
            ledger.append_movement(
                ingredient_id=self.milk.pk, movement_type="ADJUSTMENT", quantity="1"
            )

    def test_direction_contradicting_type_is_rejected(self):
        with self.assertRaises(StockValidationError):
            ledger.append_movement(
                ingredient_id=self.milk.pk,
                movement_type="PURCHASE",
                direction="OUT",
                quantity="1",
                unit_cost="1.00",
            )

    def test_allow_negative_only_for_adjustment_out(self):
        with self.assertRaises(StockValidationError):
            ledger.append_movement(
                ingredient_id=self.milk.pk,
                movement_type="WASTE",
                quantity="50",
                allow_negative=True,
            )

        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("10.000"))

    def test_adjustment_out_with_override_goes_negative_and_is_flagged(self):
        movement = ledger.append_movement(
            ingredient_id=self.milk.pk,
            movement_type="ADJUSTMENT",
            direction="OUT",
            quantity="12",
            allow_negative=True,
            reason="Count correction",
        )

        self.assertTrue(movement.negative_override)
        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("-2.000"))
        self._assert_projection_matches_ledger(self.milk)

    def test_invalid_quantities_are_rejected_before_any_write(self):
        for bad in ("0", "-1", "abc", "", None, "1.2345", True):
            with self.subTest(quantity=bad):
                with self.assertRaises(InvalidQuantityError):
                    ledger.append_movement(
                        ingredient_id=self.milk.pk, movement_type="RETURN", quantity=bad
                    )

        self.assertEqual(StockMovement.objects.filter(ingredient=self.milk).count(), 1)

    def test_quantities_beyond_column_precision_are_validation_errors(self):
        for bad in ("100000000000", "1e30", "-1e30"):
            with self.subTest(quantity=bad):
                with self.assertRaises(InvalidQuantityError) as ctx:
                    ledger.receive_purchase(
                        ingredient_id=self.milk.pk, quantity=bad, unit_cost="1.00"
                    )
                self.assertFalse(ctx.exception.retryable)

        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("10.000"))
        self.assertEqual(StockMovement.objects.filter(ingredient=self.milk).count(), 1)

    def test_write_that_would_overflow_the_projection_is_rejected(self):
        ledger.receive_purchase(
            ingredient_id=self.milk.pk, quantity="99999999989.999", unit_cost="1.00"
        )

        with self.assertRaises(InvalidQuantityError):
            ledger.record_return(ingredient_id=self.milk.pk, quantity="1")

        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, ledger.QTY_MAX)
        self.assertEqual(StockMovement.objects.filter(ingredient=self.milk).count(), 2)

    def test_piece_units_require_whole_quantities(self):
        cups = ledger.create_ingredient(name="Paper Cups", unit="pcs", opening_quantity="100")

        with self.assertRaises(InvalidQuantityError):
            ledger.record_waste(ingredient_id=cups.pk, quantity="1.5")

        ledger.record_waste(ingredient_id=cups.pk, quantity="2")
        cups.refresh_from_db()
        self.assertEqual(cups.quantity, Decimal("98.000"))

    def test_unknown_and_inactive_ingredients_are_not_found(self):
        with self.assertRaises(IngredientNotFoundError):
            ledger.record_return(
                ingredient_id="00000000-0000-0000-0000-000000000000", quantity="1"
            )

        with self.assertRaises(IngredientNotFoundError):
            ledger.record_return(ingredient_id="not-a-uuid", quantity="1")

        ledger.deactivate_ingredient(ingredient_id=self.milk.pk)
        with self.assertRaises(IngredientNotFoundError):
            ledger.record_return(ingredient_id=self.milk.pk, quantity="1")

    def test_invariant_holds_across_mixed_movements(self):
        ledger.receive_purchase(ingredient_id=self.milk.pk, quantity="4.250", unit_cost="1.10")
        ledger.record_waste(ingredient_id=self.milk.pk, quantity="0.750")
        ledger.append_movement(ingredient_id=self.milk.pk, movement_type="SALE", quantity="3")
        ledger.record_return(ingredient_id=self.milk.pk, quantity="0.5")
        ledger.adjust_quantity(ingredient_id=self.milk.pk, quantity_delta="-1.000")

        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("10.000"))
        self._assert_projection_matches_ledger(self.milk)

    def test_adjust_quantity_records_reason_and_notes(self):
        up = ledger.adjust_quantity(ingredient_id=self.milk.pk, quantity_delta="2")
        down = ledger.adjust_quantity(ingredient_id=self.milk.pk, quantity_delta="-5")

        self.assertEqual(up.direction, StockMovement.Direction.IN)
        self.assertEqual(up.reason, "Quantity Increase")
        self.assertEqual(up.notes, "Adjusted from 10.000 to 12.000")

        self.assertEqual(down.direction, StockMovement.Direction.OUT)
        self.assertEqual(down.quantity, Decimal("5.000"))
        self.assertEqual(down.reason, "Quantity Decrease")
        self.assertEqual(down.notes, "Adjusted from 12.000 to 7.000")

    def test_adjust_quantity_rejects_zero_delta(self):
        with self.assertRaises(InvalidQuantityError):
            ledger.adjust_quantity(ingredient_id=self.milk.pk, quantity_delta="0")

    def test_movements_are_immutable(self):
        movement = StockMovement.objects.filter(ingredient=self.milk).first()

        movement.reason = "edited"
        with self.assertRaises(ValidationError):
            movement.save()

        with self.assertRaises(ValidationError):
            movement.delete()

        self.assertTrue(StockMovement.objects.filter(pk=movement.pk, reason="Opening balance").exists())

    def test_database_error_rolls_back_and_surfaces_persistence_failure(self):
        with patch.object(
            StockMovement.objects, "create", side_effect=DatabaseError("disk full")
        ):
            with self.assertRaises(PersistenceFailure) as ctx:
                ledger.receive_purchase(
                    ingredient_id=self.milk.pk, quantity="5", unit_cost="1.00"
                )

        self.assertTrue(ctx.exception.retryable)
        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("10.000"))
        self.assertIsNone(self.milk.last_purchase_cost)

    def test_history_is_newest_first(self):
        ledger.record_waste(ingredient_id=self.milk.pk, quantity="1")
        ledger.record_return(ingredient_id=self.milk.pk, quantity="1")

        stamps = [m.created_at for m in ledger.get_history(ingredient_id=self.milk.pk)]

        self.assertEqual(len(stamps), 3)
        self.assertEqual(stamps, sorted(stamps, reverse=True))

    def test_history_date_range(self):
        today = timezone.localdate()

        self.assertEqual(
            ledger.get_history(ingredient_id=self.milk.pk, date_from=today).count(), 1
        )
        self.assertEqual(
            ledger.get_all(date_to=today - timedelta(days=1)).count(), 0
        )

    def test_get_movement_unknown_id(self):
        with self.assertRaises(MovementNotFoundError):
            ledger.get_movement(movement_id="00000000-0000-0000-0000-000000000000")


class IngredientDetailsTests(TestCase):
    def setUp(self):
        self.sugar = ledger.create_ingredient(name="Sugar", unit="kg", opening_quantity="3")

    def test_quantity_is_not_editable_as_a_detail(self):
        with self.assertRaises(StockValidationError):
            ledger.update_ingredient_details(ingredient_id=self.sugar.pk, quantity="99")

        with self.assertRaises(StockValidationError):
            ledger.update_ingredient_details(ingredient_id=self.sugar.pk, unit_cost="9.99")

    def test_details_update(self):
        updated = ledger.update_ingredient_details(
            ingredient_id=self.sugar.pk,
            name="Brown Sugar",
            supplier="  ",
            low_stock_threshold="1.5",
        )

        self.assertEqual(updated.name, "Brown Sugar")
        self.assertIsNone(updated.supplier)
        self.assertEqual(updated.low_stock_threshold, Decimal("1.500"))
        self.assertEqual(updated.quantity, Decimal("3.000"))

    def test_negative_threshold_rejected(self):
        with self.assertRaises(InvalidQuantityError):
            ledger.update_ingredient_details(
                ingredient_id=self.sugar.pk, low_stock_threshold="-1"
            )

    def test_past_expiration_date_rejected(self):
        yesterday = timezone.localdate() - timedelta(days=1)

        with self.assertRaises(StockValidationError):
            ledger.create_ingredient(name="Cream", unit="L", expiration_date=yesterday)

        with self.assertRaises(StockValidationError):
            ledger.update_ingredient_details(
                ingredient_id=self.sugar.pk, expiration_date=yesterday
            )

    def test_piece_unit_requires_whole_threshold(self):
        with self.assertRaises(StockValidationError):
            ledger.create_ingredient(name="Lids", unit="pieces", low_stock_threshold="2.5")

    def test_deactivate_is_soft_delete(self):
        ledger.deactivate_ingredient(ingredient_id=self.sugar.pk)

        sugar = Ingredient.objects.get(pk=self.sugar.pk)
        self.assertFalse(sugar.is_active)
        self.assertEqual(StockMovement.objects.filter(ingredient=sugar).count(), 1)
