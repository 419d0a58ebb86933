# inventory/views/ingredient.py

"""
INGREDIENT VIEWSET

Purpose:
- Ingredient catalogue CRUD (details only)
- Signed quantity adjustment -> ADJUSTMENT movement
- Per-ingredient movement history

Rules:
- quantity is never written here; every change goes through the ledger
- DELETE is a soft delete (is_active=False); history survives
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from inventory.models import Ingredient
from inventory.serializers import (
    IngredientAdjustSerializer,
    IngredientSerializer,
    IngredientWriteSerializer,
    StockMovementSerializer,
)
from inventory.services import ledger
from inventory.services.exceptions import PosServiceError
from inventory.views.errors import service_error_response
from inventory.views.params import query_date


class IngredientViewSet(viewsets.ModelViewSet):
    serializer_class = IngredientSerializer
    filterset_fields = ["supplier", "unit", "is_active"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        qs = Ingredient.objects.all().order_by("name", "id")
        include_inactive = (self.request.query_params.get("include_inactive") or "").lower()
        if self.action != "movements" and include_inactive not in ("1", "true", "yes"):
            qs = qs.filter(is_active=True)
        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(name__icontains=q)
        return qs

    @extend_schema(request=IngredientWriteSerializer, responses={201: IngredientSerializer})
    def create(self, request, *args, **kwargs):
        serializer = IngredientWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop("is_active", None)

        try:
            ingredient = ledger.create_ingredient(user=request.user, **data)
        except PosServiceError as exc:
            return service_error_response(exc)

        return Response(IngredientSerializer(ingredient).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=IngredientWriteSerializer, responses={200: IngredientSerializer})
    def partial_update(self, request, *args, **kwargs):
        serializer = IngredientWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            ingredient = ledger.update_ingredient_details(
                ingredient_id=kwargs["pk"], **serializer.validated_data
            )
        except PosServiceError as exc:
            return service_error_response(exc)

        return Response(IngredientSerializer(ingredient).data)

    def destroy(self, request, *args, **kwargs):
        try:
            ledger.deactivate_ingredient(ingredient_id=kwargs["pk"])
        except PosServiceError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=IngredientAdjustSerializer,
        responses={
            201: StockMovementSerializer,
            400: OpenApiResponse(description="Invalid quantity"),
            409: OpenApiResponse(description="Would drive quantity below zero"),
        },
        description="Adjust quantity by a signed delta (ADJUSTMENT movement).",
    )
    @action(detail=True, methods=["post"], url_path="adjust")
    def adjust(self, request, pk=None):
        serializer = IngredientAdjustSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            movement = ledger.adjust_quantity(
                ingredient_id=pk,
                quantity_delta=data["quantity_delta"],
                allow_negative=data.get("allow_negative", False),
                reason=data.get("reason") or None,
                notes=data.get("notes") or None,
                user=request.user,
            )
        except PosServiceError as exc:
            return service_error_response(exc)

        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[
            OpenApiParameter("date_from", str, OpenApiParameter.QUERY, required=False),
            OpenApiParameter("date_to", str, OpenApiParameter.QUERY, required=False),
        ],
        responses={200: StockMovementSerializer(many=True)},
    )
    @action(detail=True, methods=["get"], url_path="movements")
    def movements(self, request, pk=None):
        ingredient = self.get_object()

        qs = ledger.get_history(
            ingredient_id=ingredient.pk,
            date_from=query_date(request.query_params, "date_from"),
            date_to=query_date(request.query_params, "date_to"),
        )
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(StockMovementSerializer(page, many=True).data)
        return Response(StockMovementSerializer(qs, many=True).data)
