# inventory/serializers/ingredient.py

"""
INGREDIENT SERIALIZERS

Read:
- IngredientSerializer exposes the projection (quantity) and cost fields
  as read-only values.

Write:
- IngredientWriteSerializer documents ONLY what the client may send.
  quantity is never writable; an opening balance goes through the ledger.
"""

from rest_framework import serializers

from inventory.models import Ingredient


class IngredientSerializer(serializers.ModelSerializer):
    total_cost = serializers.DecimalField(
        max_digits=16, decimal_places=2, read_only=True
    )
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Ingredient
        fields = [
            "id",
            "name",
            "quantity",
            "unit",
            "supplier",
            "expiration_date",
            "low_stock_threshold",
            "unit_cost",
            "last_purchase_cost",
            "last_purchase_date",
            "total_cost",
            "is_low_stock",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class IngredientWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    unit = serializers.CharField(max_length=20)
    supplier = serializers.CharField(
        max_length=100, required=False, allow_blank=True, allow_null=True
    )
    expiration_date = serializers.DateField(required=False, allow_null=True)
    low_stock_threshold = serializers.DecimalField(
        max_digits=14, decimal_places=3, min_value=0, required=False
    )
    is_active = serializers.BooleanField(required=False)

    # create only
    unit_cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    opening_quantity = serializers.DecimalField(
        max_digits=14, decimal_places=3, min_value=0, required=False
    )

    CREATE_ONLY = ("unit_cost", "opening_quantity")

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("name is required")
        return value

    def validate(self, attrs):
        if self.partial or self.instance is not None:
            blocked = [f for f in self.CREATE_ONLY if f in self.initial_data]
            if blocked:
                raise serializers.ValidationError(
                    {f: "Only allowed when creating an ingredient." for f in blocked}
                )
        return attrs


class IngredientAdjustSerializer(serializers.Serializer):
    quantity_delta = serializers.DecimalField(
        max_digits=14,
        decimal_places=3,
        help_text="Signed change: +N adds stock, -N removes stock.",
    )
    allow_negative = serializers.BooleanField(required=False, default=False)
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)

    def validate_quantity_delta(self, value):
        if value == 0:
            raise serializers.ValidationError("quantity_delta cannot be 0")
        return value
