import logging
from typing import Iterable

from enums.discount_type import DiscountType
from exceptions.discount import InvalidDiscountException
from models.discount import DiscountDTO, DiscountApplicationDTO
from utils.money import round_money

logger = logging.getLogger(__name__)


class DiscountEngine:
    """
    Discount code matching and amount calculation.

    Scoping policy: a discount with applies_to set is category-scoped and only
    counts when at least one plain item line of that category is in the cart.
    Bundles carry no category and never make a scoped discount applicable.
    When applicable, the amount is computed against the whole subtotal.
    """

    @staticmethod
    def normalize_code(code: str | None) -> str:
        return (code or "").strip().upper()

    @staticmethod
    def validate(discount: DiscountDTO) -> DiscountDTO:
        """
        Check the value rules of a discount definition.

        - percentage: 0 < value <= 100
        - flat: value > 0

        Raises:
            InvalidDiscountException: If the code is blank or the value is out of range
        """
        if not discount.code:
            raise InvalidDiscountException(discount.code, "code cannot be empty")
        if discount.type == DiscountType.PERCENTAGE and not (0 < discount.value <= 100):
            raise InvalidDiscountException(discount.code, f"percentage must be in (0, 100], got {discount.value}")
        if discount.type == DiscountType.FLAT and discount.value <= 0:
            raise InvalidDiscountException(discount.code, f"flat amount must be positive, got {discount.value}")
        return discount

    @staticmethod
    def match(code: str | None, discounts: Iterable[DiscountDTO]) -> DiscountDTO | None:
        """Case-insensitive exact lookup. Prefixes never match."""
        normalized = DiscountEngine.normalize_code(code)
        if not normalized:
            return None
        for discount in discounts:
            if discount.code == normalized:
                return discount
        return None

    @staticmethod
    def suggest(prefix: str | None, discounts: Iterable[DiscountDTO], limit: int = 5) -> list[DiscountDTO]:
        """
        Autocomplete suggestions for a partially typed code.

        Only for display: a suggestion is not applied until its full code is
        matched with match().
        """
        normalized = DiscountEngine.normalize_code(prefix)
        if not normalized:
            return []
        suggestions = sorted(
            (d for d in discounts if d.code.startswith(normalized)),
            key=lambda d: d.code
        )
        return suggestions[:limit]

    @staticmethod
    def is_applicable(discount: DiscountDTO, category_ids: Iterable[str]) -> bool:
        if discount.applies_to is None:
            return True
        return discount.applies_to in set(category_ids)

    @staticmethod
    def calculate(discount: DiscountDTO, subtotal: float, category_ids: Iterable[str] = ()) -> float:
        """
        Deductible amount for a discount.

        Rules:
        - Inapplicable (category not in cart): 0
        - percentage: subtotal × value / 100, rounded to 2 decimals
        - flat: value
        - either way the amount is clamped to [0, subtotal], so a discount
          never makes the total negative

        Examples:
            10% of 33.33 → 3.33
            flat 500 on 100.00 → 100.00
        """
        if subtotal <= 0 or not DiscountEngine.is_applicable(discount, category_ids):
            return 0.0

        if discount.type == DiscountType.PERCENTAGE:
            amount = round_money(subtotal * discount.value / 100)
        else:
            amount = discount.value

        # Feed and database snapshots skip validate(), so out-of-range values are clamped here
        return max(0.0, round_money(min(amount, subtotal)))

    @staticmethod
    def apply(
        code: str | None,
        discounts: Iterable[DiscountDTO],
        subtotal: float,
        category_ids: Iterable[str] = ()
    ) -> DiscountApplicationDTO:
        """
        Match a code and compute its amount in one step.

        Unknown codes give an empty application; known but out-of-scope codes
        give applicable=False with amount 0. Neither is an error.
        """
        category_ids = list(category_ids)
        discount = DiscountEngine.match(code, discounts)
        if discount is None:
            logger.debug(f"Discount code '{DiscountEngine.normalize_code(code)}' not found")
            return DiscountApplicationDTO()

        applicable = DiscountEngine.is_applicable(discount, category_ids)
        amount = DiscountEngine.calculate(discount, subtotal, category_ids) if applicable else 0.0
        return DiscountApplicationDTO(discount=discount, amount=amount, applicable=applicable)
