"""
SALES APP CONFIG

Orders (immutable checkout snapshots), pricing and sales reports.
"""

from django.apps import AppConfig


class SalesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sales"
    verbose_name = "Sales"
