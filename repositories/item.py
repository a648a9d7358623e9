import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from exceptions.order import InsufficientStockException
from models.item import InventoryItem, InventoryItemDTO
from models.order import StockDeltaDTO

logger = logging.getLogger(__name__)


class InventoryRepository:

    @staticmethod
    async def get_all(session: Session | AsyncSession) -> list[InventoryItemDTO]:
        stmt = select(InventoryItem).order_by(InventoryItem.name)
        items = await session_execute(stmt, session)
        return [InventoryItemDTO.model_validate(item, from_attributes=True) for item in items.scalars().all()]

    @staticmethod
    async def get_by_ids(item_ids: list[str], session: Session | AsyncSession) -> dict[str, InventoryItemDTO]:
        """
        Batch load items by id (prevents N+1 queries).

        Returns:
            Dict mapping item_id -> InventoryItemDTO; missing ids are absent
        """
        if not item_ids:
            return {}
        stmt = select(InventoryItem).where(InventoryItem.id.in_(item_ids))
        items = await session_execute(stmt, session)
        return {
            item.id: InventoryItemDTO.model_validate(item, from_attributes=True)
            for item in items.scalars().all()
        }

    @staticmethod
    async def add(item_dto: InventoryItemDTO, session: Session | AsyncSession) -> str:
        data = item_dto.model_dump(exclude_none=True)
        data["status"] = item_dto.status.value
        item = InventoryItem(**data)
        session.add(item)
        await session_flush(session)
        return item.id

    @staticmethod
    async def apply_stock_deltas(deltas: list[StockDeltaDTO], session: Session | AsyncSession) -> None:
        """
        Apply stock changes inside the caller's transaction.

        Deltas for the same item are summed first. Nothing is committed here:
        the caller commits or rolls back the whole unit of work.

        Raises:
            InsufficientStockException: If an item is missing or would go below zero
        """
        combined: dict[str, int] = {}
        for delta in deltas:
            combined[delta.item_id] = combined.get(delta.item_id, 0) + delta.delta

        for item_id, delta in combined.items():
            stmt = select(InventoryItem.stock).where(InventoryItem.id == item_id).with_for_update()
            result = await session_execute(stmt, session)
            current = result.scalar()
            if current is None:
                raise InsufficientStockException(item_id, requested=-delta, available=0)
            if current + delta < 0:
                raise InsufficientStockException(item_id, requested=-delta, available=current)

            update_stmt = update(InventoryItem).where(InventoryItem.id == item_id).values(stock=current + delta)
            await session_execute(update_stmt, session)
            logger.debug(f"Stock {item_id}: {current} -> {current + delta}")
