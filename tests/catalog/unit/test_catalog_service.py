"""
Unit tests for CatalogService.display_items (store-front listing).
"""

from enums.line_kind import LineKind
from services.catalog import CatalogService


def by_id(entries):
    return {entry.id: entry for entry in entries}


class TestDisplayItems:

    def test_items_then_active_bundles(self, catalog):
        entries = CatalogService.display_items(catalog, [])

        assert [entry.id for entry in entries] == [
            "item-x", "item-a", "item-b", "item-c", "bundle-y", "bundle-mix"
        ]
        assert entries[0].kind == LineKind.ITEM
        assert entries[-1].kind == LineKind.BUNDLE

    def test_availability(self, catalog):
        entries = by_id(CatalogService.display_items(catalog, []))

        assert entries["item-x"].availability == 5
        assert entries["bundle-y"].availability == 4
        # 24 pieces in stock, 3 per custom bundle
        assert entries["bundle-mix"].availability == 8
        assert entries["bundle-mix"].is_custom is True
        assert entries["item-c"].is_out_of_stock is True

    def test_cart_reduces_item_availability(self, catalog, cart, items_by_id):
        cart.add_line(items_by_id["item-x"])
        cart.add_line(items_by_id["item-x"])

        entries = by_id(CatalogService.display_items(catalog, cart.lines))

        assert entries["item-x"].availability == 3

    def test_price_label(self, catalog):
        entries = by_id(CatalogService.display_items(catalog, []))

        assert entries["item-x"].price_label == "₱20.00"

    def test_search(self, catalog):
        entries = CatalogService.display_items(catalog, [], search="SIOMAI")

        assert [entry.id for entry in entries] == ["item-a", "bundle-y"]

    def test_category_filter_applies_to_items_only(self, catalog):
        entries = CatalogService.display_items(catalog, [], category_id="drinks")

        assert [entry.id for entry in entries] == ["item-b", "bundle-y", "bundle-mix"]

    def test_hide_out_of_stock(self, catalog):
        entries = CatalogService.display_items(catalog, [], hide_out_of_stock=True)

        assert "item-c" not in by_id(entries)

    def test_store_setting_is_the_default(self, catalog):
        """HIDE_OUT_OF_STOCK is false in the test environment."""
        entries = CatalogService.display_items(catalog, [])

        assert "item-c" in by_id(entries)
