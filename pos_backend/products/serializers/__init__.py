# products/serializers/__init__.py

from .product import ProductRestockSerializer, ProductSerializer

__all__ = [
    "ProductSerializer",
    "ProductRestockSerializer",
]
