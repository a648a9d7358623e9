"""
Discount-related exceptions.

Note: an unknown or inapplicable code is NOT an error. The discount engine
returns a zero amount and the caller decides what to show.
"""

from .base import PosEngineException


class DiscountException(PosEngineException):
    """Base exception for discount-related errors."""
    pass


class InvalidDiscountException(DiscountException):
    """Raised when a discount definition violates its value rules."""

    def __init__(self, code: str, reason: str):
        super().__init__(
            f"Invalid discount {code}: {reason}",
            details={'code': code, 'reason': reason}
        )
        self.code = code
        self.reason = reason
