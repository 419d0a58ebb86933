# sales/serializers/order.py

"""
ORDER SERIALIZERS (READ)

Orders are rendered from their immutable snapshots only; nothing here
looks at the live Product row.
"""

from rest_framework import serializers

from sales.models import Order, OrderItem, OrderItemAddOn, OrderItemDiscount
from sales.services.business_time import to_business_time


class OrderItemAddOnSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItemAddOn
        fields = ["name", "price", "quantity"]
        read_only_fields = fields


class OrderItemDiscountSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItemDiscount
        fields = ["discount_type", "percentage", "amount"]
        read_only_fields = fields


class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.CharField(source="product_id_snapshot", read_only=True)
    add_ons = OrderItemAddOnSerializer(many=True, read_only=True)
    discount = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "name",
            "category",
            "price",
            "base_price",
            "temperature",
            "quantity",
            "add_ons",
            "discount",
            "subtotal",
            "discount_amount",
            "line_total",
            "client_price",
            "price_mismatch",
        ]
        read_only_fields = fields

    def get_discount(self, obj):
        try:
            discount = obj.discount
        except OrderItemDiscount.DoesNotExist:
            return None
        return OrderItemDiscountSerializer(discount).data


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    timestamp_local = serializers.SerializerMethodField()
    customer = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "timestamp",
            "timestamp_local",
            "business_date",
            "status",
            "service_type",
            "payment_method",
            "subtotal",
            "discount_total",
            "service_fee",
            "total",
            "amount_received",
            "change",
            "customer",
            "notes",
            "has_price_mismatch",
            "created_by",
            "completed_at",
            "items",
        ]
        read_only_fields = fields

    def get_timestamp_local(self, obj) -> str:
        return to_business_time(obj.timestamp).isoformat()

    def get_customer(self, obj) -> dict:
        return {
            "name": obj.customer_name,
            "email": obj.customer_email,
            "phone": obj.customer_phone,
            "discount_type": obj.customer_discount_type,
            "discount_id": obj.customer_discount_id,
        }


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
