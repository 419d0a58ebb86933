# sales/admin.py

from django.contrib import admin

from sales.models import Order, OrderItem, OrderItemAddOn, OrderItemDiscount


class ReadOnlyAdminMixin:
    """Orders are committed by checkout only; admin is a viewer."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ======================================================
# ORDER ADMIN
# ======================================================


class OrderItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = (
        "name",
        "category",
        "temperature",
        "price",
        "quantity",
        "discount_amount",
        "line_total",
        "price_mismatch",
    )
    readonly_fields = fields


@admin.register(Order)
class OrderAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "order_number",
        "business_date",
        "status",
        "service_type",
        "payment_method",
        "total",
        "has_price_mismatch",
    )
    list_filter = ("status", "service_type", "payment_method", "business_date", "has_price_mismatch")
    search_fields = ("order_number", "customer_name")
    inlines = [OrderItemInline]


# ======================================================
# ORDER ITEM ADMIN
# ======================================================


@admin.register(OrderItem)
class OrderItemAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("name", "order", "quantity", "price", "line_total", "price_mismatch")
    search_fields = ("name", "product_id_snapshot", "order__order_number")
    list_filter = ("category", "temperature", "price_mismatch")


@admin.register(OrderItemAddOn)
class OrderItemAddOnAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("name", "item", "price", "quantity")


@admin.register(OrderItemDiscount)
class OrderItemDiscountAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("discount_type", "item", "percentage", "amount")
