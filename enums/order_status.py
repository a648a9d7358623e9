from enum import Enum


class OrderStatus(str, Enum):
    COMPLETED = "completed"    # Paid and handed over at the register
    CANCELLED = "cancelled"    # Voided after checkout
    REFUNDED = "refunded"      # Money returned to the customer
