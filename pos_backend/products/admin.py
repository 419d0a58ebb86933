# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules:

- Product details and prices are editable.
- stock is read-only here; it changes through checkout or the restock
  service (products.services.stock.restock_product).
"""

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "category",
        "base_price",
        "hot_price",
        "cold_price",
        "stock",
        "is_low_stock",
        "is_active",
        "created_at",
    )
    list_filter = ("is_active", "category", "created_at")
    search_fields = ("name", "category")
    ordering = ("category", "name")
    readonly_fields = ("stock", "created_at", "updated_at")
