# backend/kasir/errors.py
"""
Domain error taxonomy.

Not-found kinds share NotFoundError as a base, so callers can catch the
generic kind or a specific one. Input problems derive from ValidationError
(also a ValueError). Storage infrastructure errors are never wrapped.
"""
from __future__ import annotations


class KasirError(Exception):
    """Root of every error raised by the service and repository layers."""

    message = "kasir error"

    def __init__(self, message: str | None = None, details: dict | None = None):
        super().__init__(message or self.message)
        self.details = details or {}


class NotFoundError(KasirError):
    message = "not found"


class CategoryNotFoundError(NotFoundError):
    message = "Category is not found"


class ProductNotFoundError(NotFoundError):
    message = "Product is not found"


class TransactionNotFoundError(NotFoundError):
    message = "Transaction is not found"


class ValidationError(KasirError, ValueError):
    """400-level input problem."""

    message = "invalid input"


class NameRequiredError(ValidationError):
    message = "name should not be empty"


class PriceInvalidError(ValidationError):
    message = "price must be greater than 0"


class StockInvalidError(ValidationError):
    message = "stock must be greater than or equal to 0"


class IDRequiredError(ValidationError):
    message = "id is required"


class EmptyCheckoutError(ValidationError):
    message = "checkout items cannot be empty"


class InvalidQuantityError(ValidationError):
    message = "quantity must be greater than 0"


class InsufficientStockError(ValidationError):
    message = "insufficient stock"


class InvalidDateRangeError(ValidationError):
    message = "invalid date range"
