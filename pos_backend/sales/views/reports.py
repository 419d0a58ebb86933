# sales/views/reports.py

"""
SALES REPORTS (READ-ONLY)

All dates are business dates (POS_BUSINESS_TIME_ZONE), YYYY-MM-DD.
Only completed orders are counted.
Malformed or impossible dates are a 400.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from inventory.services.exceptions import PosServiceError
from inventory.views.errors import service_error_response
from inventory.views.params import query_date
from sales.serializers import (
    CategorySalesSerializer,
    DailyReportSerializer,
    ProductSalesRowSerializer,
    ProductSalesSerializer,
    SalesRangeReportSerializer,
)
from sales.services import reports
from sales.services.business_time import business_today


def _date_param(name: str, description: str):
    return OpenApiParameter(
        name=name, type=OpenApiTypes.DATE, required=False, description=description
    )


class DailySalesReportView(APIView):
    @extend_schema(
        parameters=[_date_param("date", "Business date. Defaults to today.")],
        responses={200: DailyReportSerializer},
    )
    def get(self, request):
        d = query_date(request.query_params, "date", default=business_today())
        return Response(DailyReportSerializer(reports.daily_report(d)).data)


class SalesRangeReportView(APIView):
    @extend_schema(
        parameters=[
            _date_param("date_from", "First business date. Defaults to today."),
            _date_param(
                "date_to",
                f"Last business date. Defaults to today. At most {reports.MAX_RANGE_DAYS} days.",
            ),
        ],
        responses={200: SalesRangeReportSerializer},
    )
    def get(self, request):
        today = business_today()
        date_from = query_date(request.query_params, "date_from", default=today)
        date_to = query_date(request.query_params, "date_to", default=today)

        try:
            report = reports.sales_range_report(date_from, date_to)
        except PosServiceError as exc:
            return service_error_response(exc)

        return Response(SalesRangeReportSerializer(report).data)


class TopProductsReportView(APIView):
    @extend_schema(
        parameters=[
            OpenApiParameter("limit", OpenApiTypes.INT, required=False),
            _date_param("date_from", "Optional lower bound."),
            _date_param("date_to", "Optional upper bound."),
        ],
        responses={200: ProductSalesRowSerializer(many=True)},
    )
    def get(self, request):
        raw_limit = request.query_params.get("limit") or reports.DEFAULT_TOP_LIMIT
        try:
            limit = int(raw_limit)
        except (TypeError, ValueError):
            return Response({"detail": "limit must be an integer."}, status=400)

        rows = reports.top_selling_products(
            limit=limit,
            date_from=query_date(request.query_params, "date_from"),
            date_to=query_date(request.query_params, "date_to"),
        )
        return Response(ProductSalesRowSerializer(rows, many=True).data)


class CategoryReportView(APIView):
    @extend_schema(
        parameters=[
            _date_param("date_from", "Optional lower bound."),
            _date_param("date_to", "Optional upper bound."),
        ],
        responses={200: CategorySalesSerializer(many=True)},
    )
    def get(self, request):
        rows = reports.category_report(
            date_from=query_date(request.query_params, "date_from"),
            date_to=query_date(request.query_params, "date_to"),
        )
        return Response(CategorySalesSerializer(rows, many=True).data)


class ProductSalesReportView(APIView):
    @extend_schema(responses={200: ProductSalesSerializer(many=True)})
    def get(self, request):
        return Response(ProductSalesSerializer(reports.product_sales_report(), many=True).data)
