"""
Unit tests for DiscountEngine.

Tests cover:
- Exact, case-insensitive code matching
- Percentage and flat calculation with 2-decimal rounding
- Category scoping
- Definition validation
"""

import pytest

from enums.discount_type import DiscountType
from exceptions.discount import InvalidDiscountException
from models.discount import DiscountDTO
from services.discount import DiscountEngine


def percentage(value: float, **kwargs) -> DiscountDTO:
    return DiscountDTO(code=kwargs.pop("code", "PCT"), type=DiscountType.PERCENTAGE, value=value, **kwargs)


def flat(value: float, **kwargs) -> DiscountDTO:
    return DiscountDTO(code=kwargs.pop("code", "FLAT"), type=DiscountType.FLAT, value=value, **kwargs)


class TestMatching:

    def test_match_is_case_insensitive(self, discounts):
        assert DiscountEngine.match("save10", discounts).code == "SAVE10"
        assert DiscountEngine.match("  Save10 ", discounts).code == "SAVE10"

    def test_prefix_does_not_match(self, discounts):
        assert DiscountEngine.match("SAVE", discounts) is None

    def test_empty_code(self, discounts):
        assert DiscountEngine.match("", discounts) is None
        assert DiscountEngine.match(None, discounts) is None

    def test_suggest_by_prefix(self, discounts):
        suggestions = DiscountEngine.suggest("s", discounts)

        assert [d.code for d in suggestions] == ["SAVE10"]

    def test_suggest_respects_limit_and_order(self):
        codes = [flat(1, code=f"PROMO{i}") for i in (3, 1, 2)]

        suggestions = DiscountEngine.suggest("promo", codes, limit=2)

        assert [d.code for d in suggestions] == ["PROMO1", "PROMO2"]

    def test_suggest_blank_prefix_returns_nothing(self, discounts):
        assert DiscountEngine.suggest("   ", discounts) == []


class TestCalculation:

    def test_percentage_rounds_half_up(self):
        """10% of 33.33 → 3.33"""
        assert DiscountEngine.calculate(percentage(10), 33.33) == 3.33

    def test_percentage_half_cent(self):
        """12.5% of 1.00 = 0.125 → 0.13"""
        assert DiscountEngine.calculate(percentage(12.5), 1.00) == 0.13

    def test_flat_is_capped_at_subtotal(self):
        """Flat 500 on 100.00 deducts 100.00, never more."""
        assert DiscountEngine.calculate(flat(500), 100.0) == 100.0

    def test_flat_below_subtotal(self):
        assert DiscountEngine.calculate(flat(25), 100.0) == 25.0

    def test_full_percentage(self):
        assert DiscountEngine.calculate(percentage(100), 80.0) == 80.0

    def test_unvalidated_percentage_is_capped_at_subtotal(self):
        """A 150% definition that skipped validate() deducts the subtotal, not 1.5 × subtotal."""
        assert DiscountEngine.calculate(percentage(150), 20.0) == 20.0

    def test_unvalidated_negative_value_deducts_nothing(self):
        assert DiscountEngine.calculate(flat(-5), 20.0) == 0.0

    def test_zero_subtotal(self):
        assert DiscountEngine.calculate(flat(25), 0.0) == 0.0
        assert DiscountEngine.calculate(percentage(10), 0.0) == 0.0

    def test_scoped_discount_without_category(self):
        discount = flat(5, applies_to="drinks")

        assert DiscountEngine.calculate(discount, 50.0, ["food"]) == 0.0

    def test_scoped_discount_with_category(self):
        discount = flat(5, applies_to="drinks")

        assert DiscountEngine.calculate(discount, 50.0, ["food", "drinks"]) == 5.0


class TestApply:

    def test_unknown_code(self, discounts):
        application = DiscountEngine.apply("NOPE", discounts, 100.0)

        assert application.discount is None
        assert application.amount == 0.0
        assert application.applicable is False

    def test_known_code(self, discounts):
        application = DiscountEngine.apply("save10", discounts, 75.0, ["food"])

        assert application.discount.code == "SAVE10"
        assert application.amount == 7.5
        assert application.applicable is True

    def test_out_of_scope_code_matches_but_is_not_applicable(self, discounts):
        application = DiscountEngine.apply("drinks5", discounts, 40.0, ["food"])

        assert application.discount.code == "DRINKS5"
        assert application.applicable is False
        assert application.amount == 0.0

    def test_apply_is_idempotent(self, discounts):
        first = DiscountEngine.apply("SAVE10", discounts, 75.0)
        second = DiscountEngine.apply("SAVE10", discounts, 75.0)

        assert first == second


class TestValidation:

    @pytest.mark.parametrize("value", [0, -5, 100.01, 150])
    def test_percentage_out_of_range(self, value):
        with pytest.raises(InvalidDiscountException):
            DiscountEngine.validate(percentage(value))

    @pytest.mark.parametrize("value", [0, -1])
    def test_flat_must_be_positive(self, value):
        with pytest.raises(InvalidDiscountException):
            DiscountEngine.validate(flat(value))

    def test_blank_code(self):
        with pytest.raises(InvalidDiscountException):
            DiscountEngine.validate(flat(5, code="   "))

    def test_valid_definitions_pass(self):
        assert DiscountEngine.validate(percentage(100)).value == 100
        assert DiscountEngine.validate(flat(0.5)).value == 0.5


class TestDiscountDTO:

    def test_code_is_normalized(self):
        assert flat(5, code=" summer ").code == "SUMMER"

    def test_legacy_fixed_type(self):
        discount = DiscountDTO(code="OLD", type="fixed", value=10)

        assert discount.type == DiscountType.FLAT

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValueError):
            DiscountDTO(code="BAD", type="bogo", value=10)
