# inventory/serializers/reports.py

from rest_framework import serializers

from inventory.serializers.ingredient import IngredientSerializer


class LowStockProductSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    category = serializers.CharField()
    stock = serializers.IntegerField()
    low_stock_threshold = serializers.IntegerField()


class LowStockReportSerializer(serializers.Serializer):
    ingredients = IngredientSerializer(many=True)
    products = LowStockProductSerializer(many=True)


class SupplierValueSerializer(serializers.Serializer):
    supplier = serializers.CharField(allow_null=True)
    label = serializers.CharField()
    total_value = serializers.DecimalField(max_digits=16, decimal_places=2)
    item_count = serializers.IntegerField()


class InventoryValuationSerializer(serializers.Serializer):
    total_value = serializers.DecimalField(max_digits=16, decimal_places=2)
    total_items = serializers.IntegerField()
    value_by_supplier = SupplierValueSerializer(many=True)


class ReorderSuggestionSerializer(serializers.Serializer):
    ingredient = IngredientSerializer()
    depletion_ratio = serializers.DecimalField(
        max_digits=12, decimal_places=4, allow_null=True
    )
    shortfall = serializers.DecimalField(max_digits=14, decimal_places=3)
