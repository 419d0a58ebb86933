# inventory/views/errors.py

"""
Service error -> HTTP response mapping shared by inventory and sales views.

Services never know about HTTP; views catch PosServiceError and hand it
here. Body is the error's as_dict(): {"code", "detail", "retryable", ...}.
"""

from rest_framework import status
from rest_framework.response import Response

from inventory.services.exceptions import PosServiceError

STATUS_BY_CODE = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "invalid_quantity": status.HTTP_400_BAD_REQUEST,
    "negative_change": status.HTTP_400_BAD_REQUEST,
    "empty_order": status.HTTP_400_BAD_REQUEST,
    "checkout_error": status.HTTP_400_BAD_REQUEST,
    "ingredient_not_found": status.HTTP_404_NOT_FOUND,
    "movement_not_found": status.HTTP_404_NOT_FOUND,
    "product_not_found": status.HTTP_404_NOT_FOUND,
    "order_not_found": status.HTTP_404_NOT_FOUND,
    "insufficient_stock": status.HTTP_409_CONFLICT,
    "invalid_order_transition": status.HTTP_409_CONFLICT,
    "persistence_failure": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def service_error_response(exc: PosServiceError) -> Response:
    return Response(
        exc.as_dict(),
        status=STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST),
    )
