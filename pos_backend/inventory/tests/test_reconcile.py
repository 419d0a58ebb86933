# inventory/tests/test_reconcile.py

from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from inventory.models import Ingredient
from inventory.services import ledger


class ReconcileProjectionTests(TestCase):
    """
    GUARANTEES:
    - Drift between projection and ledger is detected
    - Repair rewrites the projection from the ledger, never the ledger
    - A second pass finds nothing
    """

    def setUp(self):
        self.milk = ledger.create_ingredient(name="Milk", unit="L", opening_quantity="8")
        self.beans = ledger.create_ingredient(name="Beans", unit="kg", opening_quantity="2")
        # simulate an out-of-band write
        Ingredient.objects.filter(pk=self.milk.pk).update(quantity=Decimal("5.000"))

    def test_dry_run_reports_without_repairing(self):
        drifts = ledger.reconcile_projection(dry_run=True)

        self.assertEqual(len(drifts), 1)
        self.assertEqual(drifts[0].ingredient_name, "Milk")
        self.assertEqual(drifts[0].recorded_quantity, Decimal("5.000"))
        self.assertEqual(drifts[0].ledger_quantity, Decimal("8.000"))
        self.assertEqual(drifts[0].difference, Decimal("3.000"))
        self.assertFalse(drifts[0].repaired)

        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("5.000"))

    def test_repair_rewrites_projection(self):
        drifts = ledger.reconcile_projection()

        self.assertTrue(drifts[0].repaired)
        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("8.000"))
        self.assertEqual(ledger.reconcile_projection(), [])

    def test_single_ingredient_scope(self):
        self.assertEqual(ledger.reconcile_projection(ingredient_id=self.beans.pk), [])

    def test_management_command(self):
        out = StringIO()
        call_command("reconcile_ingredient_stock", stdout=out)

        self.assertIn("Drifted ingredients: 1", out.getvalue())
        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("8.000"))

    def test_management_command_dry_run(self):
        out = StringIO()
        call_command("reconcile_ingredient_stock", "--dry-run", stdout=out)

        self.assertIn("DRY RUN complete", out.getvalue())
        self.milk.refresh_from_db()
        self.assertEqual(self.milk.quantity, Decimal("5.000"))

    def test_signed_deltas_sum_to_ledger_balance(self):
        ledger.record_waste(ingredient_id=self.beans.pk, quantity="0.5")

        deltas = [ledger.signed_delta(m) for m in ledger.get_history(ingredient_id=self.beans.pk)]

        self.assertEqual(sorted(deltas), [Decimal("-0.500"), Decimal("2.000")])
        self.assertEqual(ledger.ledger_balance(ingredient_id=self.beans.pk), Decimal("1.500"))
