from enum import Enum


class DiscountType(str, Enum):
    """
    How a discount value is interpreted.

    - PERCENTAGE: value is a percent of the subtotal (0 < value <= 100)
    - FLAT: value is a fixed currency amount (value > 0), capped at the subtotal
    """

    PERCENTAGE = "percentage"
    FLAT = "flat"

    @classmethod
    def from_string(cls, value: str) -> 'DiscountType':
        """
        Convert string to DiscountType.

        Accepts the legacy "fixed" spelling as an alias for FLAT.

        Raises:
            ValueError: If value is not a known discount type
        """
        if not value:
            raise ValueError("Discount type cannot be empty")

        normalized = value.strip().lower()
        if normalized == "fixed":
            return cls.FLAT

        for discount_type in cls:
            if discount_type.value == normalized:
                return discount_type

        valid_types = [t.value for t in cls]
        raise ValueError(f"Invalid discount type '{value}'. Valid types: {', '.join(valid_types)}")
