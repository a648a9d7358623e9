"""
Order-related exceptions.
"""

from .base import PosEngineException


class OrderException(PosEngineException):
    """Base exception for order-related errors."""
    pass


class MissingActorException(OrderException):
    """Raised when an order is finalized without a cashier/user context."""

    def __init__(self):
        super().__init__("A cashier is required to create an order")


class InsufficientStockException(OrderException):
    """Raised when stock no longer covers the quantities an order would consume."""

    def __init__(self, item_id: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for item {item_id}: requested {requested}, available {available}",
            details={'item_id': item_id, 'requested': requested, 'available': available}
        )
        self.item_id = item_id
        self.requested = requested
        self.available = available


class OrderCommitException(OrderException):
    """Raised when the persistence layer rejects an order commit."""

    def __init__(self, order_number: str, reason: str):
        super().__init__(
            f"Order {order_number} could not be saved: {reason}",
            details={'order_number': order_number, 'reason': reason}
        )
        self.order_number = order_number
        self.reason = reason
