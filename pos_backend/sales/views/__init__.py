# sales/views/__init__.py

from .order import OrderViewSet
from .reports import (
    CategoryReportView,
    DailySalesReportView,
    ProductSalesReportView,
    SalesRangeReportView,
    TopProductsReportView,
)

__all__ = [
    "CategoryReportView",
    "DailySalesReportView",
    "OrderViewSet",
    "ProductSalesReportView",
    "SalesRangeReportView",
    "TopProductsReportView",
]
