"""
Catalog feeds.

Each feed holds the latest full-replacement snapshot of one collection
(inventory, categories, bundles, discounts) and re-emits it to subscribers.
Feeds are plain objects passed to whoever owns a cart; there is no
module-level instance.
"""

import logging
from typing import Callable, Generic, Iterable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from models.bundle import BundleDTO
from models.category import CategoryDTO
from models.discount import DiscountDTO
from models.item import InventoryItemDTO

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[list], None]


class SnapshotFeed(Generic[T]):
    """
    Latest snapshot of a collection plus its listeners.

    Every publish() replaces the previous snapshot entirely; deltas are not
    supported. A listener that raises is logged and skipped, the remaining
    listeners still receive the snapshot.
    """

    def __init__(self, name: str, initial: Iterable[T] | None = None):
        self.name = name
        self._snapshot: list[T] = list(initial or [])
        self._listeners: list[Callable[[list[T]], None]] = []
        self._closed = False

    @property
    def snapshot(self) -> list[T]:
        return list(self._snapshot)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, snapshot: Iterable[T]) -> None:
        if self._closed:
            logger.warning(f"[Feed:{self.name}] publish on closed feed ignored")
            return
        self._snapshot = list(snapshot)
        logger.debug(f"[Feed:{self.name}] snapshot of {len(self._snapshot)} records")
        for listener in list(self._listeners):
            try:
                listener(self.snapshot)
            except Exception as e:
                logger.error(f"[Feed:{self.name}] listener {listener!r} failed: {e}")

    def subscribe(self, listener: Callable[[list[T]], None], emit_current: bool = True) -> Callable[[], None]:
        """
        Register a listener.

        Args:
            listener: Called with the full snapshot on every publish
            emit_current: Deliver the current snapshot immediately

        Returns:
            A function that unsubscribes this listener
        """
        self._listeners.append(listener)
        if emit_current:
            listener(self.snapshot)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Callable[[list[T]], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def close(self) -> None:
        self._listeners.clear()
        self._closed = True


class CatalogFeeds:
    """The four collections the pricing engine reads from."""

    def __init__(
        self,
        inventory: Iterable[InventoryItemDTO] | None = None,
        categories: Iterable[CategoryDTO] | None = None,
        bundles: Iterable[BundleDTO] | None = None,
        discounts: Iterable[DiscountDTO] | None = None
    ):
        self.inventory: SnapshotFeed[InventoryItemDTO] = SnapshotFeed("inventory", inventory)
        self.categories: SnapshotFeed[CategoryDTO] = SnapshotFeed("categories", categories)
        self.bundles: SnapshotFeed[BundleDTO] = SnapshotFeed("bundles", bundles)
        self.discounts: SnapshotFeed[DiscountDTO] = SnapshotFeed("discounts", discounts)

    def item(self, item_id: str) -> InventoryItemDTO | None:
        return next((item for item in self.inventory.snapshot if item.id == item_id), None)

    def bundle(self, bundle_id: str) -> BundleDTO | None:
        return next((bundle for bundle in self.bundles.snapshot if bundle.id == bundle_id), None)

    def category(self, category_id: str) -> CategoryDTO | None:
        return next((c for c in self.categories.snapshot if c.id == category_id), None)

    async def refresh(self, session: AsyncSession | Session) -> None:
        """Pull fresh snapshots of every collection from the database."""
        from repositories.bundle import BundleRepository
        from repositories.category import CategoryRepository
        from repositories.discount import DiscountRepository
        from repositories.item import InventoryRepository

        self.inventory.publish(await InventoryRepository.get_all(session))
        self.categories.publish(await CategoryRepository.get_all(session))
        self.bundles.publish(await BundleRepository.get_all(session))
        self.discounts.publish(await DiscountRepository.get_all(session))
        logger.info("[Feed] Catalog refreshed from database")

    def close(self) -> None:
        for feed in (self.inventory, self.categories, self.bundles, self.discounts):
            feed.close()
