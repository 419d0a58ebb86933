# sales/urls.py

"""
SALES URLS

Mounted under /api/sales/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from sales.views import (
    CategoryReportView,
    DailySalesReportView,
    OrderViewSet,
    ProductSalesReportView,
    SalesRangeReportView,
    TopProductsReportView,
)

router = DefaultRouter()
router.register(r"orders", OrderViewSet, basename="orders")

urlpatterns = [
    path("reports/daily/", DailySalesReportView.as_view(), name="sales-report-daily"),
    path("reports/range/", SalesRangeReportView.as_view(), name="sales-report-range"),
    path("reports/top-products/", TopProductsReportView.as_view(), name="sales-report-top-products"),
    path("reports/categories/", CategoryReportView.as_view(), name="sales-report-categories"),
    path("reports/product-sales/", ProductSalesReportView.as_view(), name="sales-report-product-sales"),
    path("", include(router.urls)),
]
