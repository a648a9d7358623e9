import logging
from typing import Iterable

from enums.line_kind import LineKind
from models.cart import CartLineDTO
from models.item import InventoryItemDTO

logger = logging.getLogger(__name__)


class StockLedger:
    """
    Read-only view of per-item stock, reconciled against an in-progress cart.

    Only plain item lines reserve stock here. Bundle lines consume their
    components through BundleAvailabilityCalculator, which reads the raw
    inventory counts, so a bundle and a loose item sharing a component are
    not netted against each other while the cart is open. The combined
    consumption is re-checked at checkout (see CheckoutService.verify_stock).
    """

    def __init__(self, inventory: Iterable[InventoryItemDTO]):
        self._stock_by_id = {item.id: item.stock for item in inventory}

    def stock_of(self, item_id: str) -> int:
        """Raw on-hand stock, 0 for an unknown item."""
        return max(0, self._stock_by_id.get(item_id, 0))

    @staticmethod
    def reserved(item_id: str, cart_lines: Iterable[CartLineDTO], exclude_line_id: str | None = None) -> int:
        return sum(
            line.quantity
            for line in cart_lines
            if line.kind == LineKind.ITEM and line.id == item_id and line.id != exclude_line_id
        )

    def available_stock(self, item_id: str, cart_lines: Iterable[CartLineDTO]) -> int:
        """
        Units of an item that can still be added to the cart.

        available = max(0, stock - quantity already held by item lines)

        Args:
            item_id: Inventory item id
            cart_lines: Current cart lines

        Returns:
            Non-negative integer; unknown items are treated as out of stock
        """
        if item_id not in self._stock_by_id:
            logger.debug(f"Stock lookup for unknown item {item_id}, treating as 0")
        return max(0, self.stock_of(item_id) - self.reserved(item_id, cart_lines))

    def line_ceiling(self, item_id: str, cart_lines: Iterable[CartLineDTO], exclude_line_id: str | None = None) -> int:
        """Highest quantity a single item line may hold, given every other item line."""
        return max(0, self.stock_of(item_id) - self.reserved(item_id, cart_lines, exclude_line_id))
