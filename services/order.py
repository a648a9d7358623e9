import logging
from collections import OrderedDict
from datetime import datetime
from typing import Iterable
from uuid import uuid4

import config
from enums.line_kind import LineKind
from enums.order_type import OrderType
from exceptions.cart import EmptyCartException
from exceptions.order import MissingActorException
from models.cart import CartLineDTO
from models.discount import DiscountDTO
from models.order import OrderDTO, OrderLineDTO, StockDeltaDTO
from utils.money import round_money

logger = logging.getLogger(__name__)


class OrderFinalizer:
    """
    Snapshot a priced cart into an order and the stock it consumes.

    Pure computation: nothing here reads or writes storage. The returned
    stock deltas are a plan that the persistence layer must apply in one
    all-or-nothing commit.
    """

    @staticmethod
    def generate_order_number(now: datetime) -> str:
        """
        <prefix>-<epoch millis>-<4 hex chars>, e.g. ORD-1773491400000-9F2C.

        Checkouts in the same millisecond on different registers still get
        distinct numbers.
        """
        return f"{config.ORDER_NUMBER_PREFIX}-{int(now.timestamp() * 1000)}-{uuid4().hex[:4].upper()}"

    @staticmethod
    def line_profit(price: float, cost: float | None, quantity: int) -> float:
        """
        (price - cost) × quantity.

        Missing cost data counts as 0, so such lines report their full
        revenue as profit. This is a placeholder, not a real margin.
        """
        return round_money((price - (cost or 0.0)) * quantity)

    @staticmethod
    def build_line(line: CartLineDTO) -> OrderLineDTO:
        is_bundle = line.kind == LineKind.BUNDLE
        return OrderLineDTO(
            kind=line.kind,
            name=line.name,
            item_id=None if is_bundle else line.id,
            bundle_id=(line.bundle_id or line.id) if is_bundle else None,
            price=line.unit_price,
            cost=line.unit_cost,
            quantity=line.quantity,
            subtotal=round_money(line.unit_price * line.quantity),
            profit=OrderFinalizer.line_profit(line.unit_price, line.unit_cost, line.quantity),
            components=tuple(c.model_copy() for c in line.components) if is_bundle else ()
        )

    @staticmethod
    def stock_deltas(lines: Iterable[CartLineDTO]) -> list[StockDeltaDTO]:
        """
        Stock decrements for a set of cart lines.

        - item line: (item_id, -quantity)
        - bundle line: (component_item_id, -quantity × component_quantity) per component
        """
        deltas = []
        for line in lines:
            if line.kind == LineKind.ITEM:
                deltas.append(StockDeltaDTO(item_id=line.id, delta=-line.quantity))
            else:
                for component in line.components:
                    deltas.append(StockDeltaDTO(
                        item_id=component.inventory_item_id,
                        delta=-(line.quantity * component.quantity)
                    ))
        return deltas

    @staticmethod
    def combine_deltas(deltas: Iterable[StockDeltaDTO]) -> list[StockDeltaDTO]:
        """Merge deltas per item id, keeping first-seen order."""
        combined: OrderedDict[str, int] = OrderedDict()
        for delta in deltas:
            combined[delta.item_id] = combined.get(delta.item_id, 0) + delta.delta
        return [StockDeltaDTO(item_id=item_id, delta=value) for item_id, value in combined.items()]

    @staticmethod
    def finalize(
        lines: list[CartLineDTO],
        subtotal: float,
        total: float,
        discount: DiscountDTO | None,
        discount_amount: float,
        cashier_id: str | None,
        order_type: OrderType = OrderType.DINE_IN,
        now: datetime | None = None
    ) -> tuple[OrderDTO, list[StockDeltaDTO]]:
        """
        Build the immutable order record and its stock-decrement plan.

        Stock sufficiency is NOT checked here; the caller must re-check right
        before committing.

        Args:
            lines: Cart lines to snapshot
            subtotal: Cart subtotal
            total: Cart total after discount
            discount: Applied discount, if any
            discount_amount: Amount deducted by the discount
            cashier_id: Worker creating the order
            order_type: DINE-IN, TAKE OUT or DELIVERY
            now: Creation timestamp (defaults to the current time)

        Returns:
            (OrderDTO, list of StockDeltaDTO)

        Raises:
            EmptyCartException: If there are no lines
            MissingActorException: If no cashier is given
        """
        if not lines:
            raise EmptyCartException()
        if not cashier_id:
            raise MissingActorException()

        now = now or datetime.now()
        order_lines = tuple(OrderFinalizer.build_line(line) for line in lines)

        order = OrderDTO(
            order_number=OrderFinalizer.generate_order_number(now),
            cashier_id=cashier_id,
            order_type=order_type,
            lines=order_lines,
            subtotal=round_money(subtotal),
            discount_code=discount.code if discount else None,
            discount_amount=round_money(discount_amount) if discount else 0.0,
            total=round_money(total),
            total_profit=round_money(sum(line.profit for line in order_lines)),
            item_count=sum(line.quantity for line in order_lines),
            line_count=len(order_lines),
            created_at=now
        )
        deltas = OrderFinalizer.stock_deltas(lines)

        logger.info(f"Order {order.order_number} finalized: {order.line_count} lines, "
                    f"{order.item_count} items, total={order.total:.2f}")
        return order, deltas
