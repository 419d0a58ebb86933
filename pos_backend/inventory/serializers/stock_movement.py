# inventory/serializers/stock_movement.py

from rest_framework import serializers

from inventory.models import StockMovement
from inventory.services.costing import movement_value


class StockMovementSerializer(serializers.ModelSerializer):
    """Read-only ledger row."""

    ingredient_name = serializers.CharField(source="ingredient.name", read_only=True)
    unit = serializers.CharField(source="ingredient.unit", read_only=True)
    total_value = serializers.SerializerMethodField()

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "ingredient",
            "ingredient_name",
            "unit",
            "movement_type",
            "direction",
            "quantity",
            "unit_cost_at_time",
            "total_value",
            "negative_override",
            "reason",
            "notes",
            "created_by",
            "created_at",
        ]
        read_only_fields = fields

    def get_total_value(self, obj) -> str:
        return str(movement_value(obj))


class StockMovementCreateSerializer(serializers.Serializer):
    """
    Receiving / waste / return / adjustment input.

    - direction is required for ADJUSTMENT only
    - unit_cost is required for PURCHASE only
    """

    ingredient = serializers.UUIDField()
    movement_type = serializers.ChoiceField(choices=StockMovement.MovementType.choices)
    direction = serializers.ChoiceField(
        choices=StockMovement.Direction.choices, required=False, allow_null=True
    )
    quantity = serializers.DecimalField(max_digits=14, decimal_places=3)
    unit_cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    allow_negative = serializers.BooleanField(required=False, default=False)
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")

    def validate(self, attrs):
        movement_type = attrs["movement_type"]
        if movement_type == StockMovement.MovementType.ADJUSTMENT and not attrs.get("direction"):
            raise serializers.ValidationError(
                {"direction": "direction is required for ADJUSTMENT movements."}
            )
        if movement_type == StockMovement.MovementType.PURCHASE and attrs.get("unit_cost") is None:
            raise serializers.ValidationError(
                {"unit_cost": "unit_cost is required for PURCHASE movements."}
            )
        return attrs
