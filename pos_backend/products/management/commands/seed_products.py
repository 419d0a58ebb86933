# products/management/commands/seed_products.py

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from inventory.models import Ingredient
from inventory.services import ledger
from products.models import Product
from products.services.stock import restock_product


class Command(BaseCommand):
    help = "Seed a demo coffee menu (products with stock) and ingredients with purchases"

    def add_arguments(self, parser):
        parser.add_argument(
            "--skip-ingredients",
            action="store_true",
            help="Only seed menu products.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding menu and ingredients..."))

        # -------------------------------
        # PRODUCTS
        # name, category, base, hot, cold, stock
        # -------------------------------
        products_data = [
            ("Espresso", "Beverages", "2.50", "2.50", None, 45),
            ("Cappuccino", "Beverages", "3.75", "3.75", "4.25", 38),
            ("Latte", "Beverages", "4.25", "4.25", "4.75", 42),
            ("Americano", "Beverages", "3.00", "3.00", "3.50", 35),
            ("Hot Chocolate", "Beverages", "4.50", "4.50", None, 18),
            ("Croissant", "Food", "4.50", None, None, 30),
            ("Blueberry Muffin", "Food", "3.25", None, None, 20),
            ("Chicken Sandwich", "Food", "8.99", None, None, 25),
            ("Coffee Beans (1lb)", "Merchandise", "14.99", None, None, 25),
        ]

        created_products = 0
        for name, category, base, hot, cold, stock in products_data:
            product, created = Product.objects.get_or_create(
                name=name,
                defaults={
                    "category": category,
                    "base_price": Decimal(base),
                    "hot_price": Decimal(hot) if hot else None,
                    "cold_price": Decimal(cold) if cold else None,
                },
            )
            if created:
                restock_product(product_id=product.pk, quantity_delta=stock)
                created_products += 1

        # -------------------------------
        # INGREDIENTS (through the ledger)
        # name, unit, supplier, threshold, purchase qty, unit cost
        # -------------------------------
        created_ingredients = 0
        if not options.get("skip_ingredients"):
            ingredients_data = [
                ("Espresso Beans", "kg", "Bean Roasters", "2", "10", "18.50"),
                ("Whole Milk", "L", "Dairy Co", "5", "24", "1.20"),
                ("Oat Milk", "L", "Dairy Co", "3", "12", "2.10"),
                ("Chocolate Syrup", "L", "Sweet Supply", "1", "4", "6.75"),
                ("Paper Cups", "pcs", "Pack Depot", "100", "500", "0.08"),
            ]

            for name, unit, supplier, threshold, qty, cost in ingredients_data:
                if Ingredient.objects.filter(name=name).exists():
                    continue
                ingredient = ledger.create_ingredient(
                    name=name,
                    unit=unit,
                    supplier=supplier,
                    low_stock_threshold=threshold,
                )
                ledger.receive_purchase(
                    ingredient_id=ingredient.pk,
                    quantity=qty,
                    unit_cost=cost,
                    reason="Initial stock",
                )
                created_ingredients += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {created_products} products and {created_ingredients} ingredients."
            )
        )
