import json
import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import get_db_session, session_commit, session_execute, session_flush, session_rollback
from enums.line_kind import LineKind
from exceptions.order import InsufficientStockException
from models.bundle import BundleComponentDTO
from models.order import Order, OrderLine, OrderDTO, OrderLineDTO, StockDeltaDTO, CommitResultDTO
from repositories.item import InventoryRepository

logger = logging.getLogger(__name__)


class OrderRepository:

    @staticmethod
    async def create(order_dto: OrderDTO, session: Session | AsyncSession) -> int:
        order = Order(
            order_number=order_dto.order_number,
            cashier_id=order_dto.cashier_id,
            order_type=order_dto.order_type.value,
            status=order_dto.status.value,
            subtotal=order_dto.subtotal,
            discount_code=order_dto.discount_code,
            discount_amount=order_dto.discount_amount,
            total=order_dto.total,
            total_profit=order_dto.total_profit,
            item_count=order_dto.item_count,
            line_count=order_dto.line_count,
            created_at=order_dto.created_at
        )
        order.lines = [
            OrderLine(
                position=position,
                item_id=line.item_id,
                bundle_id=line.bundle_id,
                name=line.name,
                is_bundle=line.kind == LineKind.BUNDLE,
                price=line.price,
                cost=line.cost,
                quantity=line.quantity,
                subtotal=line.subtotal,
                profit=line.profit,
                bundle_components=json.dumps([c.model_dump() for c in line.components]) if line.components else None
            )
            for position, line in enumerate(order_dto.lines)
        ]
        session.add(order)
        await session_flush(session)
        return order.id

    @staticmethod
    def to_dto(order: Order) -> OrderDTO:
        lines = tuple(
            OrderLineDTO(
                kind=LineKind.BUNDLE if line.is_bundle else LineKind.ITEM,
                name=line.name,
                item_id=line.item_id,
                bundle_id=line.bundle_id,
                price=line.price,
                cost=line.cost,
                quantity=line.quantity,
                subtotal=line.subtotal,
                profit=line.profit,
                components=tuple(
                    BundleComponentDTO(**component)
                    for component in json.loads(line.bundle_components or "[]")
                )
            )
            for line in order.lines
        )
        return OrderDTO(
            id=order.id,
            order_number=order.order_number,
            cashier_id=order.cashier_id,
            order_type=order.order_type,
            status=order.status,
            lines=lines,
            subtotal=order.subtotal,
            discount_code=order.discount_code,
            discount_amount=order.discount_amount,
            total=order.total,
            total_profit=order.total_profit,
            item_count=order.item_count,
            line_count=order.line_count,
            created_at=order.created_at
        )

    @staticmethod
    async def get_by_id(order_id: int, session: Session | AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.id == order_id)
        result = await session_execute(stmt, session)
        order = result.scalar()
        return OrderRepository.to_dto(order) if order else None

    @staticmethod
    async def get_by_date_range(
        start: datetime,
        end: datetime,
        session: Session | AsyncSession
    ) -> list[OrderDTO]:
        """Orders with start <= created_at < end, oldest first."""
        stmt = (select(Order)
                .where(Order.created_at >= start, Order.created_at < end)
                .order_by(Order.created_at))
        result = await session_execute(stmt, session)
        return [OrderRepository.to_dto(order) for order in result.scalars().all()]


class SqlAlchemyCommitSink:
    """
    Persists an order and its stock decrements as one transaction.

    Either the order row, its lines and every stock change are committed, or
    nothing is. Failures come back as CommitResultDTO.error, never half-applied.
    """

    def __init__(self, session_factory: Callable = get_db_session):
        self._session_factory = session_factory

    async def commit_order(self, order: OrderDTO, deltas: list[StockDeltaDTO]) -> CommitResultDTO:
        async with self._session_factory() as session:
            try:
                order_id = await OrderRepository.create(order, session)
                await InventoryRepository.apply_stock_deltas(deltas, session)
                await session_commit(session)
                logger.info(f"Order {order.order_number} committed with id {order_id}")
                return CommitResultDTO(order_id=order_id)
            except InsufficientStockException as e:
                await session_rollback(session)
                logger.warning(f"Order {order.order_number} rejected at commit: {e}")
                return CommitResultDTO(error=str(e))
            except SQLAlchemyError as e:
                await session_rollback(session)
                logger.error(f"Order {order.order_number} commit failed: {e}")
                return CommitResultDTO(error=f"Database error: {e.__class__.__name__}")
