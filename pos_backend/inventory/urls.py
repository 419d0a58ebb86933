# inventory/urls.py

"""
INVENTORY URLS

Mounted under /api/inventory/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from inventory.views import (
    IngredientViewSet,
    InventoryValuationView,
    LowStockReportView,
    ReorderSuggestionsView,
    StockMovementViewSet,
)

router = DefaultRouter()
router.register(r"ingredients", IngredientViewSet, basename="ingredients")
router.register(r"movements", StockMovementViewSet, basename="movements")

urlpatterns = [
    path("reports/low-stock/", LowStockReportView.as_view(), name="inventory-low-stock"),
    path("reports/valuation/", InventoryValuationView.as_view(), name="inventory-valuation"),
    path(
        "reports/reorder-suggestions/",
        ReorderSuggestionsView.as_view(),
        name="inventory-reorder-suggestions",
    ),
    path("", include(router.urls)),
]
