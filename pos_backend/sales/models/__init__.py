# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS

Purpose:
- Central export surface for sales app models.
"""

from .order import Order
from .order_item import OrderItem, OrderItemAddOn, OrderItemDiscount

__all__ = [
    "Order",
    "OrderItem",
    "OrderItemAddOn",
    "OrderItemDiscount",
]
