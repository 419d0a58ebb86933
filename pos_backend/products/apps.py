"""
PRODUCTS APP CONFIG

Menu products: pricing variants (base / hot / cold) and the
denormalized ready-to-sell stock counter.
"""

from django.apps import AppConfig


class ProductsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "products"
    verbose_name = "Products"
