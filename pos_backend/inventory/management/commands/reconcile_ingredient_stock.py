# inventory/management/commands/reconcile_ingredient_stock.py

"""
RECONCILE INGREDIENT STOCK (LEDGER REPAIR)

Purpose:
- Re-sum the StockMovement ledger for each ingredient and compare it with
  the Ingredient.quantity projection.
- Rewrite drifted projections (the ledger wins).

Rules:
- Movements are never touched; only Ingredient.quantity is rewritten.
- Idempotent: a second run reports no drift.
- Supports --dry-run and --ingredient for safe iteration.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from inventory.models import Ingredient
from inventory.services.ledger import reconcile_projection


class Command(BaseCommand):
    help = "Rewrite Ingredient.quantity from the StockMovement ledger where they disagree."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report drift without saving.",
        )
        parser.add_argument(
            "--ingredient",
            type=str,
            default="",
            help="Only reconcile this ingredient id.",
        )

    def handle(self, *args, **options):
        dry_run = bool(options.get("dry_run"))
        ingredient_id = (options.get("ingredient") or "").strip() or None

        if ingredient_id and not Ingredient.objects.filter(pk=ingredient_id).exists():
            raise CommandError(f"Ingredient {ingredient_id} not found")

        self.stdout.write("Reconciling ingredient stock against the ledger...")
        if dry_run:
            self.stdout.write("DRY RUN: no database changes will be saved.\n")

        drifts = reconcile_projection(ingredient_id=ingredient_id, dry_run=dry_run)

        for drift in drifts:
            self.stdout.write(
                f"{drift.ingredient_name} [{drift.ingredient_id}] "
                f"recorded={drift.recorded_quantity} ledger={drift.ledger_quantity} "
                f"diff={drift.difference}"
            )

        self.stdout.write("\n--- Summary ---")
        self.stdout.write(f"Drifted ingredients: {len(drifts)}")
        if dry_run:
            self.stdout.write("\nDRY RUN complete (no changes saved).")
        else:
            self.stdout.write(self.style.SUCCESS("Reconciliation complete."))
