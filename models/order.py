from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, String, Boolean, Text, func, CheckConstraint, Index
from sqlalchemy.orm import relationship

from enums.line_kind import LineKind
from enums.order_status import OrderStatus
from enums.order_type import OrderType
from models.base import Base
from models.bundle import BundleComponentDTO


class Order(Base):
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_number = Column(String, nullable=False, unique=True)
    cashier_id = Column(String, nullable=False)
    order_type = Column(String(12), nullable=False, default=OrderType.DINE_IN.value)
    status = Column(String(12), nullable=False, default=OrderStatus.COMPLETED.value)
    subtotal = Column(Float, nullable=False)
    discount_code = Column(String, nullable=True)
    discount_amount = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False)
    total_profit = Column(Float, nullable=False, default=0.0)
    item_count = Column(Integer, nullable=False)
    line_count = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    lines = relationship('OrderLine', back_populates='order', cascade='all, delete-orphan',
                         lazy='selectin', order_by='OrderLine.position')

    __table_args__ = (
        CheckConstraint('total >= 0', name='check_order_total_non_negative'),
        Index('ix_orders_created_at', 'created_at'),
    )


class OrderLine(Base):
    __tablename__ = 'order_lines'

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    order_id = Column(Integer, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    item_id = Column(String, nullable=True)
    bundle_id = Column(String, nullable=True)
    name = Column(String, nullable=False)
    is_bundle = Column(Boolean, nullable=False, default=False)
    price = Column(Float, nullable=False)
    cost = Column(Float, nullable=True)
    quantity = Column(Integer, nullable=False)
    subtotal = Column(Float, nullable=False)
    profit = Column(Float, nullable=False)
    # JSON-encoded component list for bundle lines (snapshot, never re-read for stock)
    bundle_components = Column(Text, nullable=True)

    order = relationship('Order', back_populates='lines')

    __table_args__ = (
        CheckConstraint('quantity > 0', name='check_order_line_quantity_positive'),
        Index('ix_order_lines_order_id', 'order_id'),
    )


class OrderLineDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: LineKind
    name: str
    item_id: str | None = None
    bundle_id: str | None = None
    price: float
    cost: float | None = None
    quantity: int
    subtotal: float
    profit: float
    components: tuple[BundleComponentDTO, ...] = ()


class OrderDTO(BaseModel):
    """Immutable snapshot of a checked-out cart."""
    model_config = ConfigDict(frozen=True)

    id: int | None = None
    order_number: str
    cashier_id: str
    order_type: OrderType = OrderType.DINE_IN
    status: OrderStatus = OrderStatus.COMPLETED
    lines: tuple[OrderLineDTO, ...]
    subtotal: float
    discount_code: str | None = None
    discount_amount: float = 0.0
    total: float
    total_profit: float
    item_count: int
    line_count: int
    created_at: datetime


class StockDeltaDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: str
    delta: int


class CommitResultDTO(BaseModel):
    order_id: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.order_id is not None


class CheckoutResultDTO(BaseModel):
    order: OrderDTO
    order_id: int
    stock_deltas: list[StockDeltaDTO]
