# sales/serializers/__init__.py

from .checkout import CheckoutInputSerializer
from .order import (
    OrderItemSerializer,
    OrderSerializer,
    OrderStatusSerializer,
)
from .reports import (
    CategorySalesSerializer,
    DailyReportSerializer,
    ProductSalesRowSerializer,
    ProductSalesSerializer,
    SalesRangeReportSerializer,
)

__all__ = [
    "CategorySalesSerializer",
    "CheckoutInputSerializer",
    "DailyReportSerializer",
    "OrderItemSerializer",
    "OrderSerializer",
    "OrderStatusSerializer",
    "ProductSalesRowSerializer",
    "ProductSalesSerializer",
    "SalesRangeReportSerializer",
]
