# inventory/views/reports.py

"""
INVENTORY REPORTS (READ-ONLY)

GET /api/inventory/reports/low-stock/
GET /api/inventory/reports/valuation/
GET /api/inventory/reports/reorder-suggestions/
"""

from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from inventory.serializers import (
    InventoryValuationSerializer,
    LowStockReportSerializer,
    ReorderSuggestionSerializer,
)
from inventory.services import reports


class LowStockReportView(APIView):
    @extend_schema(responses={200: LowStockReportSerializer})
    def get(self, request):
        return Response(LowStockReportSerializer(reports.low_stock()).data)


class InventoryValuationView(APIView):
    @extend_schema(responses={200: InventoryValuationSerializer})
    def get(self, request):
        return Response(InventoryValuationSerializer(reports.valuation()).data)


class ReorderSuggestionsView(APIView):
    @extend_schema(responses={200: ReorderSuggestionSerializer(many=True)})
    def get(self, request):
        return Response(
            ReorderSuggestionSerializer(reports.reorder_suggestions(), many=True).data
        )
