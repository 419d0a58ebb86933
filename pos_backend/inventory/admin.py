# inventory/admin.py

"""
Admin rules (ledger-safe):

- Ingredient details are editable; quantity and cost fields are read-only
  (they move only through the ledger service).
- StockMovement rows are view-only: no add, no change, no delete.
"""

from django.contrib import admin

from inventory.models import Ingredient, StockMovement


@admin.register(Ingredient)
class IngredientAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "quantity",
        "unit",
        "supplier",
        "low_stock_threshold",
        "unit_cost",
        "is_low_stock",
        "is_active",
    )
    list_filter = ("is_active", "unit", "supplier")
    search_fields = ("name", "supplier")
    ordering = ("name",)
    readonly_fields = (
        "quantity",
        "unit_cost",
        "last_purchase_cost",
        "last_purchase_date",
        "created_at",
        "updated_at",
    )

    def has_delete_permission(self, request, obj=None):
        # soft delete via is_active
        return False


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = (
        "ingredient",
        "movement_type",
        "direction",
        "quantity",
        "unit_cost_at_time",
        "negative_override",
        "reason",
        "created_by",
        "created_at",
    )
    list_filter = ("movement_type", "direction", "negative_override", "created_at")
    search_fields = ("ingredient__name", "reason", "notes", "created_by")
    ordering = ("-created_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
