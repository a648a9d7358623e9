import logging
from typing import Iterable, Mapping

from models.bundle import BundleDTO, BundleComponentDTO
from models.item import InventoryItemDTO

logger = logging.getLogger(__name__)


class BundleAvailabilityCalculator:
    """How many units of a bundle can be assembled from current stock."""

    @staticmethod
    def stock_map(inventory: Iterable[InventoryItemDTO]) -> dict[str, int]:
        return {item.id: item.stock for item in inventory}

    @staticmethod
    def components_availability(
        components: Iterable[BundleComponentDTO],
        stock_by_id: Mapping[str, int]
    ) -> int:
        """
        Min-of-ratios feasibility over a component list.

        Algorithm:
        1. For each component: floor(stock / required quantity)
        2. A component with required quantity <= 0 contributes 0 (blocked)
        3. Take the minimum across components, floored at 0
        4. No components at all means the bundle is never orderable

        Example:
            components [(A, 2), (B, 3)], stock A=10, B=9
            → min(10 // 2, 9 // 3) = min(5, 3) = 3
        """
        per_component = []
        for component in components:
            if component.quantity <= 0:
                per_component.append(0)
                continue
            stock = max(0, stock_by_id.get(component.inventory_item_id, 0))
            per_component.append(stock // component.quantity)

        if not per_component:
            return 0
        return max(min(per_component), 0)

    @staticmethod
    def availability(bundle: BundleDTO, inventory: Iterable[InventoryItemDTO]) -> int:
        """
        Availability of a fixed-recipe bundle against raw inventory.

        Inactive bundles are not sellable and report 0. Custom bundles carry
        no fixed components, so they also report 0 here; their feasibility is
        decided per selection by CustomBundleSelector.
        """
        if not bundle.is_active:
            return 0
        stock_by_id = BundleAvailabilityCalculator.stock_map(inventory)
        return BundleAvailabilityCalculator.components_availability(bundle.components, stock_by_id)

    @staticmethod
    def availability_map(bundles: Iterable[BundleDTO], inventory: Iterable[InventoryItemDTO]) -> dict[str, int]:
        """Availability for every bundle, recomputed from the given snapshot."""
        inventory = list(inventory)
        stock_by_id = BundleAvailabilityCalculator.stock_map(inventory)
        result = {}
        for bundle in bundles:
            if not bundle.is_active:
                result[bundle.id] = 0
                continue
            result[bundle.id] = BundleAvailabilityCalculator.components_availability(bundle.components, stock_by_id)
        logger.debug(f"Computed availability for {len(result)} bundles")
        return result
