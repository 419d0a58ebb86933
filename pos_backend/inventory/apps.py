"""
INVENTORY APP CONFIG

Ingredient stock ledger:
- Ingredient (quantity is a projection of the ledger)
- StockMovement (append-only ledger entries)
- Costing, low-stock and valuation reports
"""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
    verbose_name = "Ingredient Inventory"
