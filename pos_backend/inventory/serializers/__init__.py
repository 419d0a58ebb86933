# inventory/serializers/__init__.py

from .ingredient import (
    IngredientAdjustSerializer,
    IngredientSerializer,
    IngredientWriteSerializer,
)
from .reports import (
    InventoryValuationSerializer,
    LowStockReportSerializer,
    ReorderSuggestionSerializer,
)
from .stock_movement import StockMovementCreateSerializer, StockMovementSerializer

__all__ = [
    "IngredientSerializer",
    "IngredientWriteSerializer",
    "IngredientAdjustSerializer",
    "StockMovementSerializer",
    "StockMovementCreateSerializer",
    "LowStockReportSerializer",
    "InventoryValuationSerializer",
    "ReorderSuggestionSerializer",
]
