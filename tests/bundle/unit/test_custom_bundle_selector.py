"""
Unit tests for CustomBundleSelector.

A custom bundle with max_pieces=3 only confirms with exactly 3 pieces picked,
and each item can be picked at most as often as it has stock.
"""

import pytest

from exceptions.bundle import InvalidBundleException, IncompleteCustomBundleException
from models.item import InventoryItemDTO
from services.custom_bundle import CustomBundleSelector


@pytest.fixture
def selector(custom_bundle):
    return CustomBundleSelector(custom_bundle)


class TestConstruction:

    def test_rejects_fixed_bundle(self, fixed_bundle):
        with pytest.raises(InvalidBundleException) as exc_info:
            CustomBundleSelector(fixed_bundle)

        assert exc_info.value.bundle_id == "bundle-y"

    def test_starts_empty(self, selector):
        assert selector.total_picked == 0
        assert selector.remaining == 3
        assert selector.progress == 0
        assert selector.picks() == {}


class TestPicking:

    def test_increment_and_decrement(self, selector, items_by_id):
        assert selector.increment(items_by_id["item-a"]) is True
        assert selector.increment(items_by_id["item-a"]) is True
        assert selector.quantity_of("item-a") == 2

        assert selector.decrement(items_by_id["item-a"]) is True
        assert selector.quantity_of("item-a") == 1

    def test_decrement_to_zero_removes_pick(self, selector, items_by_id):
        selector.increment(items_by_id["item-a"])
        selector.decrement(items_by_id["item-a"])

        assert "item-a" not in selector.picks()

    def test_decrement_without_pick_is_noop(self, selector, items_by_id):
        assert selector.decrement(items_by_id["item-a"]) is False
        assert selector.total_picked == 0

    def test_item_stock_caps_picks(self, selector):
        scarce = InventoryItemDTO(id="scarce", name="Scarce", price=5.0, stock=1)

        assert selector.increment(scarce) is True
        assert selector.increment(scarce) is False
        assert selector.quantity_of("scarce") == 1

    def test_out_of_stock_item_cannot_be_picked(self, selector, items_by_id):
        assert selector.increment(items_by_id["item-c"]) is False

    def test_max_pieces_caps_total(self, selector, items_by_id):
        for _ in range(3):
            selector.increment(items_by_id["item-a"])

        assert selector.increment(items_by_id["item-b"]) is False
        assert selector.total_picked == 3
        assert selector.remaining == 0
        assert selector.progress == 1.0

    def test_reset(self, selector, items_by_id):
        selector.increment(items_by_id["item-a"])
        selector.reset()

        assert selector.total_picked == 0


class TestFinalize:

    def test_two_of_three_is_rejected(self, selector, items_by_id):
        selector.increment(items_by_id["item-a"])
        selector.increment(items_by_id["item-b"])

        assert selector.is_complete() is False
        with pytest.raises(IncompleteCustomBundleException) as exc_info:
            selector.finalize()

        assert exc_info.value.picked == 2
        assert exc_info.value.max_pieces == 3

    def test_exactly_three_is_accepted(self, selector, items_by_id):
        selector.increment(items_by_id["item-a"])
        selector.increment(items_by_id["item-a"])
        selector.increment(items_by_id["item-b"])

        selection = selector.finalize()

        assert selection.bundle_id == "bundle-mix"
        assert selection.total_pieces == 3
        assert [(c.inventory_item_id, c.quantity) for c in selection.components] == [("item-a", 2), ("item-b", 1)]

    def test_total_cost_uses_item_costs(self, selector, items_by_id):
        """item-a costs 4.00, item-b has no cost (counts as 0)."""
        selector.increment(items_by_id["item-a"])
        selector.increment(items_by_id["item-a"])
        selector.increment(items_by_id["item-b"])

        selection = selector.finalize()

        assert selection.total_cost == 8.0
        assert selection.components[1].unit_cost == 0.0
        assert selection.components[0].name == "Siomai"


class TestSelectableItems:

    def test_hides_out_of_stock(self, inventory):
        ids = [item.id for item in CustomBundleSelector.selectable_items(inventory)]

        assert "item-c" not in ids
        assert len(ids) == 3

    def test_search_is_case_insensitive(self, inventory):
        result = CustomBundleSelector.selectable_items(inventory, "  iced ")

        assert [item.id for item in result] == ["item-b"]
