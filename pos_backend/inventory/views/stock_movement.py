# inventory/views/stock_movement.py

"""
STOCK MOVEMENT VIEWSET (LEDGER)

- list / retrieve: newest first, filterable by ingredient, type, dates
- create: append one movement through the ledger service
- NO update, NO delete (append-only ledger)
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.response import Response

from inventory.serializers import StockMovementCreateSerializer, StockMovementSerializer
from inventory.services import ledger
from inventory.services.exceptions import PosServiceError
from inventory.views.errors import service_error_response
from inventory.views.params import query_date


class StockMovementViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = StockMovementSerializer
    filterset_fields = ["ingredient", "movement_type", "direction"]

    def get_queryset(self):
        params = self.request.query_params
        return ledger.get_all(
            date_from=query_date(params, "date_from"),
            date_to=query_date(params, "date_to"),
        )

    @extend_schema(
        parameters=[
            OpenApiParameter("date_from", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("date_to", str, OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        request=StockMovementCreateSerializer,
        responses={
            201: StockMovementSerializer,
            400: OpenApiResponse(description="Invalid movement"),
            404: OpenApiResponse(description="Unknown or inactive ingredient"),
            409: OpenApiResponse(description="Would drive quantity below zero"),
            503: OpenApiResponse(description="Storage failure, safe to retry"),
        },
        description="Append one immutable movement and update the ingredient quantity.",
    )
    def create(self, request, *args, **kwargs):
        serializer = StockMovementCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            movement = ledger.append_movement(
                ingredient_id=data["ingredient"],
                movement_type=data["movement_type"],
                quantity=data["quantity"],
                unit_cost=data.get("unit_cost"),
                direction=data.get("direction"),
                allow_negative=data.get("allow_negative", False),
                reason=data.get("reason", ""),
                notes=data.get("notes", ""),
                user=request.user,
            )
        except PosServiceError as exc:
            return service_error_response(exc)

        return Response(
            StockMovementSerializer(movement).data,
            status=status.HTTP_201_CREATED,
        )
