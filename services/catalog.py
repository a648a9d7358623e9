import logging

from pydantic import BaseModel

import config
from enums.line_kind import LineKind
from models.cart import CartLineDTO
from services.bundle_availability import BundleAvailabilityCalculator
from services.feed import CatalogFeeds
from services.stock_ledger import StockLedger
from utils.money import format_money

logger = logging.getLogger(__name__)


class DisplayItemDTO(BaseModel):
    id: str
    kind: LineKind
    name: str
    price: float
    price_label: str
    availability: int
    category_id: str | None = None
    img_url: str | None = None
    is_custom: bool = False
    max_pieces: int | None = None

    @property
    def is_out_of_stock(self) -> bool:
        return self.availability <= 0


class CatalogService:
    """Store-front listing: what can be tapped and how many are left."""

    @staticmethod
    def display_items(
        catalog: CatalogFeeds,
        cart_lines: list[CartLineDTO],
        search: str = "",
        category_id: str | None = None,
        hide_out_of_stock: bool | None = None
    ) -> list[DisplayItemDTO]:
        """
        Items first, then active bundles.

        Availability:
        - item: stock left after this cart's item lines
        - fixed bundle: bundle availability from raw inventory
        - custom bundle: in-stock pieces // max_pieces (upper bound, picks decide)

        The category filter applies to items only; bundles are shown unless a
        search excludes them. hide_out_of_stock defaults to the store setting
        and only filters the listing, it never changes prices.
        """
        if hide_out_of_stock is None:
            hide_out_of_stock = config.HIDE_OUT_OF_STOCK
        needle = search.strip().lower()
        inventory = catalog.inventory.snapshot
        ledger = StockLedger(inventory)

        result = []
        for item in inventory:
            if needle and needle not in item.name.lower():
                continue
            if category_id and item.category_id != category_id:
                continue
            result.append(DisplayItemDTO(
                id=item.id,
                kind=LineKind.ITEM,
                name=item.name,
                price=item.price,
                price_label=format_money(item.price, config.CURRENCY_SYMBOL),
                availability=ledger.available_stock(item.id, cart_lines),
                category_id=item.category_id,
                img_url=item.img_url
            ))

        pieces_in_stock = sum(item.stock for item in inventory if item.stock > 0)
        availability = BundleAvailabilityCalculator.availability_map(catalog.bundles.snapshot, inventory)
        for bundle in catalog.bundles.snapshot:
            if not bundle.is_active:
                continue
            if needle and needle not in bundle.name.lower():
                continue
            if bundle.is_custom:
                bundle_availability = pieces_in_stock // bundle.max_pieces
            else:
                bundle_availability = availability.get(bundle.id, 0)
            result.append(DisplayItemDTO(
                id=bundle.id,
                kind=LineKind.BUNDLE,
                name=bundle.name,
                price=bundle.price,
                price_label=format_money(bundle.price, config.CURRENCY_SYMBOL),
                availability=bundle_availability,
                img_url=bundle.img_url,
                is_custom=bundle.is_custom,
                max_pieces=bundle.max_pieces
            ))

        if hide_out_of_stock:
            result = [entry for entry in result if not entry.is_out_of_stock]

        logger.debug(f"Catalog listing: {len(result)} entries (search='{needle}', category={category_id})")
        return result
