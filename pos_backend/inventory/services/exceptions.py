# inventory/services/exceptions.py

"""
POS SERVICE ERRORS

Centralized domain errors for the ingredient ledger and checkout services.

Contract:
- Every error carries a stable machine `code` and a `retryable` flag.
- `detail` holds structured context (ids, quantities) for the caller.
- Human-readable wording belongs to the caller (API layer / UI).
"""

from __future__ import annotations


class PosServiceError(Exception):
    """Base exception for all POS service failures."""

    code = "error"
    retryable = False

    def __init__(self, message: str = "", **detail):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.detail = detail

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "detail": self.message,
            "retryable": self.retryable,
            **{k: (str(v) if v is not None else None) for k, v in self.detail.items()},
        }


class StockValidationError(PosServiceError):
    """Malformed input rejected before any write."""

    code = "validation_error"


class InvalidQuantityError(StockValidationError):
    code = "invalid_quantity"


class IngredientNotFoundError(PosServiceError):
    code = "ingredient_not_found"


class MovementNotFoundError(PosServiceError):
    code = "movement_not_found"


class ProductNotFoundError(PosServiceError):
    code = "product_not_found"


class InsufficientStockError(PosServiceError):
    """A write would drive a quantity below zero."""

    code = "insufficient_stock"


class NegativeChangeError(PosServiceError):
    """Cash tendered is below the order total."""

    code = "negative_change"


class PersistenceFailure(PosServiceError):
    """Storage error; the unit of work was rolled back and may be retried."""

    code = "persistence_failure"
    retryable = True
