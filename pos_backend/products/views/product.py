# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Menu product management endpoints (CRUD + alerts)
- Manual stock changes (restock action) and availability checks

Key rules:
- stock is never written through CRUD; use /restock/
- DELETE is a soft delete (is_active=False); order snapshots keep working
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from inventory.services.exceptions import PosServiceError
from inventory.views.errors import service_error_response
from products.models import Product
from products.serializers import ProductRestockSerializer, ProductSerializer
from products.services import stock as stock_service


class ProductViewSet(viewsets.ModelViewSet):
    """
    Product endpoints.

    - CRUD
    - GET  /products/products/alerts/low-stock/
    - POST /products/products/{id}/restock/
    - GET  /products/products/{id}/availability/?quantity=N
    """

    serializer_class = ProductSerializer
    filterset_fields = ["category", "is_active"]

    def get_queryset(self):
        qs = Product.objects.all().order_by("category", "name", "id")

        include_inactive = (
            self.request.query_params.get("include_inactive") or ""
        ).strip().lower() in ("1", "true", "yes")
        if not include_inactive and self.action in ("list", "low_stock_alerts"):
            qs = qs.filter(is_active=True)

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(name__icontains=q)
        return qs

    def perform_destroy(self, instance):
        instance.is_active = False
        instance.save(update_fields=["is_active", "updated_at"])

    # -----------------------------
    # Alerts: Low stock
    # -----------------------------
    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="threshold",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Override every product's own low_stock_threshold.",
            ),
        ],
        responses={200: ProductSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="alerts/low-stock")
    def low_stock_alerts(self, request):
        """
        GET /products/products/alerts/low-stock/

        Optional query params:
        - threshold=<int>
        """
        raw_threshold = (request.query_params.get("threshold") or "").strip()
        threshold = None

        if raw_threshold:
            try:
                threshold = int(raw_threshold)
                if threshold < 0:
                    raise ValueError
            except ValueError:
                return Response(
                    {"detail": "threshold must be a non-negative integer"}, status=400
                )

        qs = stock_service.low_stock_products(threshold=threshold)
        data = self.get_serializer(qs, many=True).data
        return Response({"count": len(data), "results": data})

    # -----------------------------
    # Manual stock changes
    # -----------------------------
    @extend_schema(
        request=ProductRestockSerializer,
        responses={
            200: ProductSerializer,
            404: OpenApiResponse(description="Unknown or inactive product"),
            409: OpenApiResponse(description="Would drive stock below zero"),
        },
    )
    @action(detail=True, methods=["post"], url_path="restock")
    def restock(self, request, pk=None):
        serializer = ProductRestockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            product = stock_service.restock_product(
                product_id=pk,
                quantity_delta=serializer.validated_data["quantity_delta"],
                user=request.user,
            )
        except PosServiceError as exc:
            return service_error_response(exc)

        return Response(ProductSerializer(product).data)

    @extend_schema(
        parameters=[
            OpenApiParameter("quantity", int, OpenApiParameter.QUERY, required=False),
        ],
    )
    @action(detail=True, methods=["get"], url_path="availability")
    def availability(self, request, pk=None):
        product = self.get_object()
        try:
            available = stock_service.check_availability(
                product.pk, request.query_params.get("quantity") or 1
            )
        except PosServiceError as exc:
            return service_error_response(exc)

        return Response(
            {
                "product_id": str(product.pk),
                "stock": stock_service.current_stock(product.pk),
                "available": available,
            }
        )
