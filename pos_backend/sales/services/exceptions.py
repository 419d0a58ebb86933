# sales/services/exceptions.py

"""
CHECKOUT / ORDER ERRORS

Same contract as inventory.services.exceptions: stable `code`,
`retryable` flag, structured `detail`. Wording is the caller's job.
"""

from __future__ import annotations

from inventory.services.exceptions import PosServiceError


class CheckoutError(PosServiceError):
    """Base checkout exception"""

    code = "checkout_error"


class EmptyOrderError(CheckoutError):
    code = "empty_order"


class OrderNotFoundError(PosServiceError):
    code = "order_not_found"


class InvalidOrderTransitionError(PosServiceError):
    code = "invalid_order_transition"
