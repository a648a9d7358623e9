import logging
from typing import Iterable

from exceptions.bundle import InvalidBundleException, IncompleteCustomBundleException
from models.bundle import BundleDTO, BundleComponentDTO, CustomBundleSelectionDTO
from models.item import InventoryItemDTO
from utils.money import round_money

logger = logging.getLogger(__name__)


class CustomBundleSelector:
    """
    In-progress pick list for a mix-and-match bundle.

    The buyer must pick exactly max_pieces pieces; each item can be picked at
    most as many times as it has stock. Saturated increments and empty
    decrements are silent no-ops returning False, the UI is expected to
    disable the controls instead.

    Stock is captured per item on each increment attempt only. If another
    register sells an item after it was picked, the selection is not
    revalidated here; the checkout stock check catches it before commit.
    """

    def __init__(self, bundle: BundleDTO):
        if not bundle.is_custom:
            raise InvalidBundleException(bundle.id, "bundle is not a custom bundle")
        if not bundle.max_pieces or bundle.max_pieces <= 0:
            raise InvalidBundleException(bundle.id, "custom bundle requires max_pieces > 0")

        self.bundle = bundle
        self.max_pieces = bundle.max_pieces
        # item_id -> (item snapshot, picked quantity), in pick order
        self._picks: dict[str, tuple[InventoryItemDTO, int]] = {}

    @property
    def total_picked(self) -> int:
        return sum(qty for _, qty in self._picks.values())

    @property
    def remaining(self) -> int:
        return max(0, self.max_pieces - self.total_picked)

    @property
    def progress(self) -> float:
        """Fill ratio for the progress bar, capped at 1.0."""
        return min(self.total_picked / self.max_pieces, 1.0)

    def quantity_of(self, item_id: str) -> int:
        entry = self._picks.get(item_id)
        return entry[1] if entry else 0

    def picks(self) -> dict[str, int]:
        return {item_id: qty for item_id, (_, qty) in self._picks.items()}

    def can_increment(self, item: InventoryItemDTO) -> bool:
        return self.total_picked < self.max_pieces and self.quantity_of(item.id) < item.stock

    def increment(self, item: InventoryItemDTO) -> bool:
        if not self.can_increment(item):
            logger.debug(f"Custom bundle {self.bundle.id}: pick of {item.id} refused "
                         f"(picked={self.total_picked}/{self.max_pieces}, item_stock={item.stock})")
            return False
        self._picks[item.id] = (item, self.quantity_of(item.id) + 1)
        return True

    def decrement(self, item: InventoryItemDTO) -> bool:
        current = self.quantity_of(item.id)
        if current <= 0:
            return False
        if current == 1:
            del self._picks[item.id]
        else:
            snapshot, _ = self._picks[item.id]
            self._picks[item.id] = (snapshot, current - 1)
        return True

    def reset(self) -> None:
        self._picks.clear()

    def is_complete(self) -> bool:
        # Exact match: under- and over-selection both block confirmation
        return self.total_picked == self.max_pieces

    @staticmethod
    def selectable_items(inventory: Iterable[InventoryItemDTO], search: str = "") -> list[InventoryItemDTO]:
        """In-stock items whose name contains the search text (case-insensitive)."""
        needle = search.strip().lower()
        return [item for item in inventory if item.stock > 0 and needle in item.name.lower()]

    def finalize(self) -> CustomBundleSelectionDTO:
        """
        Turn the pick list into bundle components.

        Each component carries the unit cost of its item (missing cost counts
        as 0); total_cost = sum(unit_cost × quantity).

        Raises:
            IncompleteCustomBundleException: If total picked != max_pieces
        """
        if not self.is_complete():
            raise IncompleteCustomBundleException(self.bundle.id, self.total_picked, self.max_pieces)

        components = [
            BundleComponentDTO(
                inventory_item_id=item_id,
                quantity=qty,
                unit_cost=item.cost or 0.0,
                name=item.name
            )
            for item_id, (item, qty) in self._picks.items()
        ]
        total_cost = round_money(sum(c.unit_cost * c.quantity for c in components))

        return CustomBundleSelectionDTO(
            bundle_id=self.bundle.id,
            components=components,
            total_cost=total_cost,
            total_pieces=self.total_picked
        )
