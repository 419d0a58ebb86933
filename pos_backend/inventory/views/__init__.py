# inventory/views/__init__.py

from .ingredient import IngredientViewSet
from .reports import InventoryValuationView, LowStockReportView, ReorderSuggestionsView
from .stock_movement import StockMovementViewSet

__all__ = [
    "IngredientViewSet",
    "StockMovementViewSet",
    "LowStockReportView",
    "InventoryValuationView",
    "ReorderSuggestionsView",
]
