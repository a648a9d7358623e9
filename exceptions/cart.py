"""
Cart-related exceptions.
"""

from .base import PosEngineException


class CartException(PosEngineException):
    """Base exception for cart-related errors."""
    pass


class EmptyCartException(CartException):
    """Raised when trying to finalize or check out an empty cart."""

    def __init__(self):
        super().__init__("Cannot create an order from an empty cart")


class CartLineNotFoundException(CartException):
    """Raised when a cart line is not found."""

    def __init__(self, line_id: str):
        super().__init__(
            f"Cart line {line_id} not found",
            details={'line_id': line_id}
        )
        self.line_id = line_id


class CustomBundleNotAllowedException(CartException):
    """Raised when a custom bundle template is added without a finished selection."""

    def __init__(self, bundle_id: str):
        super().__init__(
            f"Custom bundle {bundle_id} must be added through a completed selection",
            details={'bundle_id': bundle_id}
        )
        self.bundle_id = bundle_id
