from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator
from sqlalchemy import Column, String, Float, Integer, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship

from enums.item_status import ItemStatus
from models.base import Base


# Inventory item: a countable good sold on its own or as a bundle component
class InventoryItem(Base):
    __tablename__ = 'inventory_items'

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    category_id = Column(String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    category = relationship("Category", lazy="joined")
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    price = Column(Float, nullable=False)
    # Optional, used only for profit reporting
    cost = Column(Float, nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    barcode = Column(String, nullable=True)
    img_url = Column(String, nullable=True)
    status = Column(String(10), nullable=False, default=ItemStatus.ACTIVE.value)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint('price >= 0', name='check_item_price_non_negative'),
        CheckConstraint('stock >= 0', name='check_item_stock_non_negative'),
    )


class InventoryItemDTO(BaseModel):
    id: str
    name: str
    price: float
    cost: float | None = None
    stock: int = Field(default=0, ge=0)
    category_id: str | None = None
    description: str | None = None
    barcode: str | None = None
    img_url: str | None = None
    status: ItemStatus = ItemStatus.ACTIVE
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator('stock', mode='before')
    @classmethod
    def clamp_stock(cls, v):
        """Treat a missing stock count as zero."""
        return 0 if v is None else v
