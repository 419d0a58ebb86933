# sales/serializers/checkout.py

"""
CHECKOUT INPUT

Shape checks only. Money math, stock and price authority live in
sales.services; these serializers hand over plain values.
"""

from rest_framework import serializers

from sales.models import Order, OrderItem
from sales.services.checkout_orchestrator import CartLine, CustomerInfo
from sales.services.pricing import AddOn, Discount


class AddOnInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)


class DiscountInputSerializer(serializers.Serializer):
    type = serializers.CharField(max_length=50)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False, allow_null=True
    )


class CartLineInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    temperature = serializers.ChoiceField(
        choices=OrderItem.Temperature.choices, required=False, default=OrderItem.Temperature.NONE
    )
    add_ons = AddOnInputSerializer(many=True, required=False, default=list)
    discount = DiscountInputSerializer(required=False, allow_null=True)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True,
        help_text="Price shown by the client; checked against the server price.",
    )


class CustomerInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    email = serializers.CharField(max_length=254, required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=40, required=False, allow_blank=True, default="")
    discount_type = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    discount_id = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")


class CheckoutInputSerializer(serializers.Serializer):
    items = CartLineInputSerializer(many=True, allow_empty=False)
    payment_method = serializers.CharField(max_length=32, required=False, default="cash")
    service_type = serializers.ChoiceField(
        choices=Order.ServiceType.choices, required=False, default=Order.ServiceType.TAKE_OUT
    )
    amount_received = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    service_fee = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    customer = CustomerInputSerializer(required=False, allow_null=True)
    status = serializers.ChoiceField(
        choices=Order.STATUS_CHOICES, required=False, default=Order.STATUS_COMPLETED
    )
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")

    def to_commit_kwargs(self) -> dict:
        data = self.validated_data

        lines = []
        for raw in data["items"]:
            discount = raw.get("discount")
            lines.append(
                CartLine(
                    product_id=raw["product_id"],
                    quantity=raw["quantity"],
                    temperature=raw.get("temperature") or OrderItem.Temperature.NONE,
                    add_ons=tuple(
                        AddOn(name=a["name"], price=a["price"], quantity=a.get("quantity", 1))
                        for a in raw.get("add_ons") or []
                    ),
                    discount=(
                        Discount(
                            discount_type=discount["type"],
                            amount=discount["amount"],
                            percentage=discount.get("percentage"),
                        )
                        if discount
                        else None
                    ),
                    client_price=raw.get("price"),
                )
            )

        customer = data.get("customer")
        return {
            "items": lines,
            "payment_method": data.get("payment_method"),
            "service_type": data.get("service_type"),
            "amount_received": data.get("amount_received"),
            "service_fee": data.get("service_fee"),
            "customer_info": CustomerInfo(**customer) if customer else None,
            "status": data.get("status"),
            "notes": data.get("notes", ""),
        }
