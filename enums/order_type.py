from enum import Enum


class OrderType(str, Enum):
    DINE_IN = "DINE-IN"
    TAKE_OUT = "TAKE OUT"
    DELIVERY = "DELIVERY"
