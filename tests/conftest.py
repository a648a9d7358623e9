"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import os
import sys

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Configure the environment before config.py is imported anywhere
os.environ["RUNTIME_ENVIRONMENT"] = "TEST"
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["HIDE_OUT_OF_STOCK"] = "false"

from enums.bundle_status import BundleStatus
from enums.discount_type import DiscountType
from models.bundle import BundleDTO, BundleComponentDTO
from models.category import CategoryDTO
from models.discount import DiscountDTO
from models.item import InventoryItemDTO
from services.cart import CartAggregator
from services.feed import CatalogFeeds


# ============================================================================
# Catalog Fixtures
# ============================================================================

@pytest.fixture
def categories():
    return [
        CategoryDTO(id="food", name="Food", color="#FF7043"),
        CategoryDTO(id="drinks", name="Drinks", color="#29B6F6"),
    ]


@pytest.fixture
def inventory():
    """
    item-x: plain item, 5 in stock
    item-a / item-b: components of bundle-y
    item-c: out of stock
    """
    return [
        InventoryItemDTO(id="item-x", name="Chicken Rice", price=20.0, cost=12.0, stock=5, category_id="food"),
        InventoryItemDTO(id="item-a", name="Siomai", price=10.0, cost=4.0, stock=10, category_id="food"),
        InventoryItemDTO(id="item-b", name="Iced Tea", price=8.0, cost=None, stock=9, category_id="drinks"),
        InventoryItemDTO(id="item-c", name="Halo-Halo", price=5.0, cost=2.0, stock=0, category_id="food"),
    ]


@pytest.fixture
def fixed_bundle():
    """Availability against the default inventory: min(10 // 2, 9 // 2) = 4."""
    return BundleDTO(
        id="bundle-y",
        name="Siomai Meal",
        price=15.0,
        components=[
            BundleComponentDTO(inventory_item_id="item-a", quantity=2),
            BundleComponentDTO(inventory_item_id="item-b", quantity=2),
        ]
    )


@pytest.fixture
def custom_bundle():
    return BundleDTO(id="bundle-mix", name="Pick Any 3", price=30.0, is_custom=True, max_pieces=3)


@pytest.fixture
def inactive_bundle():
    return BundleDTO(
        id="bundle-old",
        name="Old Combo",
        price=12.0,
        status=BundleStatus.INACTIVE,
        components=[BundleComponentDTO(inventory_item_id="item-a", quantity=1)]
    )


@pytest.fixture
def discounts():
    return [
        DiscountDTO(code="SAVE10", type=DiscountType.PERCENTAGE, value=10),
        DiscountDTO(code="FLAT500", type=DiscountType.FLAT, value=500),
        DiscountDTO(code="DRINKS5", type=DiscountType.FLAT, value=5, applies_to="drinks"),
    ]


@pytest.fixture
def catalog(inventory, categories, fixed_bundle, custom_bundle, inactive_bundle, discounts):
    return CatalogFeeds(
        inventory=inventory,
        categories=categories,
        bundles=[fixed_bundle, custom_bundle, inactive_bundle],
        discounts=discounts
    )


@pytest.fixture
def cart(catalog):
    return CartAggregator(catalog)


@pytest.fixture
def items_by_id(inventory):
    return {item.id: item for item in inventory}


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine (in-memory SQLite)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool
    )

    # Import and create all tables
    from db import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_session(session_factory):
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def seeded_factory(session_factory, categories, inventory, fixed_bundle, custom_bundle, discounts):
    """Database holding the default catalog; returns the session factory."""
    from repositories.bundle import BundleRepository
    from repositories.category import CategoryRepository
    from repositories.discount import DiscountRepository
    from repositories.item import InventoryRepository

    async with session_factory() as session:
        for category in categories:
            await CategoryRepository.add(category, session)
        for item in inventory:
            await InventoryRepository.add(item, session)
        await BundleRepository.add(fixed_bundle, session)
        await BundleRepository.add(custom_bundle, session)
        for discount in discounts:
            await DiscountRepository.create(discount, session)
        await session.commit()

    return session_factory
