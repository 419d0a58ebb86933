# sales/views/order.py

"""
ORDERS API

GET  /api/sales/orders/                 list (filters: status, business_date, service_type)
GET  /api/sales/orders/{id}/            retrieve
POST /api/sales/orders/checkout/        commit a cart as an order
POST /api/sales/orders/{id}/status/     pending -> completed

Orders are never updated or deleted through the API.
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from inventory.services.exceptions import PosServiceError
from inventory.views.errors import service_error_response
from sales.models import Order
from sales.serializers import CheckoutInputSerializer, OrderSerializer, OrderStatusSerializer
from sales.services import commit_order, update_order_status


class OrderViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = OrderSerializer
    filterset_fields = ["status", "business_date", "service_type", "payment_method"]

    def get_queryset(self):
        return Order.objects.prefetch_related(
            "items", "items__add_ons", "items__discount"
        ).order_by("-timestamp", "-id")

    @extend_schema(
        request=CheckoutInputSerializer,
        responses={
            201: OrderSerializer,
            400: OpenApiResponse(description="Invalid cart or cash tendered below total"),
            404: OpenApiResponse(description="Unknown or inactive product"),
            409: OpenApiResponse(description="Insufficient stock"),
            503: OpenApiResponse(description="Storage failure; nothing was saved"),
        },
        description="Price the cart server-side, decrement product stock and persist the order atomically.",
    )
    @action(detail=False, methods=["post"], url_path="checkout")
    def checkout(self, request):
        serializer = CheckoutInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = commit_order(user=request.user, **serializer.to_commit_kwargs())
        except PosServiceError as exc:
            return service_error_response(exc)

        order = self.get_queryset().get(pk=order.pk)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=OrderStatusSerializer,
        responses={
            200: OrderSerializer,
            409: OpenApiResponse(description="Transition not allowed"),
        },
    )
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = update_order_status(
                order_id=pk,
                status=serializer.validated_data["status"],
                user=request.user,
            )
        except PosServiceError as exc:
            return service_error_response(exc)

        order = self.get_queryset().get(pk=order.pk)
        return Response(OrderSerializer(order).data)
