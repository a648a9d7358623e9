import logging
from typing import Iterable, Protocol

from enums.order_type import OrderType
from exceptions.order import InsufficientStockException, OrderCommitException
from models.item import InventoryItemDTO
from models.order import OrderDTO, StockDeltaDTO, CommitResultDTO, CheckoutResultDTO
from services.cart import CartAggregator
from services.order import OrderFinalizer

logger = logging.getLogger(__name__)


class CommitSink(Protocol):
    """Persistence boundary: stores an order and applies its stock deltas atomically."""

    async def commit_order(self, order: OrderDTO, deltas: list[StockDeltaDTO]) -> CommitResultDTO:
        ...


class CheckoutService:
    """
    Turns a cart into a committed order.

    Flow:
    1. OrderFinalizer snapshots the cart (empty cart / missing cashier fail here)
    2. verify_stock() re-checks the combined consumption against the latest
       inventory snapshot, catching stale custom-bundle picks and bundles that
       share components with loose items
    3. The sink commits order + stock deltas in one transaction
    4. Only on success is the cart cleared

    Any failure raises and leaves the cart exactly as it was. There is no
    automatic retry: the cashier refreshes stock and confirms again.
    """

    def __init__(self, cart: CartAggregator, sink: CommitSink):
        self.cart = cart
        self.sink = sink

    @staticmethod
    def verify_stock(deltas: Iterable[StockDeltaDTO], inventory: Iterable[InventoryItemDTO]) -> None:
        """
        Raises:
            InsufficientStockException: For the first item whose stock does not cover its combined decrement
        """
        stock_by_id = {item.id: item.stock for item in inventory}
        for delta in OrderFinalizer.combine_deltas(deltas):
            requested = -delta.delta
            available = stock_by_id.get(delta.item_id, 0)
            if requested > available:
                raise InsufficientStockException(delta.item_id, requested, available)

    def prepare(self, cashier_id: str | None, order_type: OrderType = OrderType.DINE_IN) -> tuple[OrderDTO, list[StockDeltaDTO]]:
        """Finalize and verify without committing."""
        order, deltas = OrderFinalizer.finalize(
            lines=self.cart.lines,
            subtotal=self.cart.subtotal(),
            total=self.cart.total(),
            discount=self.cart.applied_discount,
            discount_amount=self.cart.discount_amount(),
            cashier_id=cashier_id,
            order_type=order_type
        )
        self.verify_stock(deltas, self.cart.catalog.inventory.snapshot)
        return order, deltas

    async def checkout(self, cashier_id: str | None, order_type: OrderType = OrderType.DINE_IN) -> CheckoutResultDTO:
        """
        Finalize, verify and commit the cart.

        Returns:
            CheckoutResultDTO with the order, its database id and the applied deltas

        Raises:
            EmptyCartException: Cart has no lines
            MissingActorException: No cashier given
            InsufficientStockException: Latest snapshot no longer covers the order
            OrderCommitException: The sink rejected the commit
        """
        try:
            order, deltas = self.prepare(cashier_id, order_type)
        except InsufficientStockException as e:
            logger.warning(f"Checkout blocked before commit: {e}")
            raise

        result = await self.sink.commit_order(order, deltas)
        if not result.ok:
            reason = result.error or "commit returned no order id"
            logger.warning(f"Checkout of {order.order_number} failed: {reason}")
            raise OrderCommitException(order.order_number, reason)

        self.cart.clear()
        logger.info(f"Checkout complete: order {order.order_number} (id={result.order_id}), total={order.total:.2f}")
        return CheckoutResultDTO(order=order.model_copy(update={'id': result.order_id}),
                                 order_id=result.order_id,
                                 stock_deltas=deltas)
