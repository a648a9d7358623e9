import asyncio
import logging

from utils.logging_config import setup_logging

# Initialize centralized logging configuration
setup_logging()

from db import create_db_and_tables, get_db_session
from services.bundle_availability import BundleAvailabilityCalculator
from services.feed import CatalogFeeds


async def bootstrap() -> CatalogFeeds:
    """
    Prepare a register: make sure the schema exists and load the catalog.

    The returned feeds are handed to CartAggregator/CatalogService by the UI
    layer; call refresh() again whenever the backing store reports changes.
    """
    await create_db_and_tables()
    feeds = CatalogFeeds()
    async with get_db_session() as session:
        await feeds.refresh(session)

    availability = BundleAvailabilityCalculator.availability_map(feeds.bundles.snapshot, feeds.inventory.snapshot)
    sellable_bundles = sum(1 for value in availability.values() if value > 0)
    logging.info(f"Register ready: {len(feeds.inventory.snapshot)} items, "
                 f"{len(feeds.bundles.snapshot)} bundles ({sellable_bundles} sellable), "
                 f"{len(feeds.discounts.snapshot)} discount codes")
    return feeds


if __name__ == "__main__":
    asyncio.run(bootstrap())
