"""
PATH: inventory/models/__init__.py

Inventory models export surface.
"""

from .ingredient import Ingredient
from .stock_movement import StockMovement

__all__ = [
    "Ingredient",
    "StockMovement",
]
