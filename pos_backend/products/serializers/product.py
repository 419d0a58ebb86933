# products/serializers/product.py

"""
PRODUCT SERIALIZER

Purpose:
- Canonical Product serializer for the POS menu.
- stock is read-only: it changes through checkout and the restock action.
"""

from decimal import Decimal

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """
    GUARANTEES:
    - Prices are non-negative (matches Product.clean())
    - stock is never client-writable
    """

    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "category",
            "base_price",
            "hot_price",
            "cold_price",
            "stock",
            "low_stock_threshold",
            "is_low_stock",
            "image",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "stock",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("name is required")
        return value

    def validate_category(self, value):
        return (value or "").strip()

    def validate_base_price(self, value):
        if value is None or value < Decimal("0.00"):
            raise serializers.ValidationError("base_price must be non-negative")
        return value

    def validate_hot_price(self, value):
        if value is not None and value < Decimal("0.00"):
            raise serializers.ValidationError("hot_price must be non-negative")
        return value

    def validate_cold_price(self, value):
        if value is not None and value < Decimal("0.00"):
            raise serializers.ValidationError("cold_price must be non-negative")
        return value


class ProductRestockSerializer(serializers.Serializer):
    quantity_delta = serializers.IntegerField(
        help_text="Signed change: +N adds units, -N removes units."
    )

    def validate_quantity_delta(self, value):
        if value == 0:
            raise serializers.ValidationError("quantity_delta cannot be 0")
        return value
