from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, model_validator
from sqlalchemy import Column, String, Float, Integer, Boolean, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship

from enums.bundle_status import BundleStatus
from models.base import Base


class Bundle(Base):
    """
    Composite sellable.

    A fixed bundle consumes its components for every unit sold. A custom
    bundle has no fixed components: the buyer picks exactly max_pieces items
    per order and the picked items become the components of that cart line.
    """
    __tablename__ = 'bundles'

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    price = Column(Float, nullable=False)
    img_url = Column(String, nullable=True)
    is_custom = Column(Boolean, nullable=False, default=False)
    max_pieces = Column(Integer, nullable=True)
    status = Column(String(10), nullable=False, default=BundleStatus.ACTIVE.value)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    components = relationship("BundleComponent", back_populates="bundle", cascade="all, delete-orphan",
                              lazy="selectin", order_by="BundleComponent.position")

    __table_args__ = (
        CheckConstraint('price >= 0', name='check_bundle_price_non_negative'),
        CheckConstraint('is_custom = 0 OR max_pieces > 0', name='check_custom_bundle_max_pieces'),
    )


class BundleComponent(Base):
    __tablename__ = 'bundle_components'

    id = Column(Integer, primary_key=True, autoincrement=True)
    bundle_id = Column(String, ForeignKey("bundles.id", ondelete="CASCADE"), nullable=False)
    inventory_item_id = Column(String, ForeignKey("inventory_items.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    bundle = relationship("Bundle", back_populates="components")

    __table_args__ = (
        CheckConstraint('quantity > 0', name='check_component_quantity_positive'),
    )


class BundleComponentDTO(BaseModel):
    inventory_item_id: str
    quantity: int
    # Only set on components synthesized from a custom bundle selection
    unit_cost: float | None = None
    name: str | None = None


class BundleDTO(BaseModel):
    id: str
    name: str
    price: float
    status: BundleStatus = BundleStatus.ACTIVE
    is_custom: bool = False
    max_pieces: int | None = None
    components: list[BundleComponentDTO] = []
    description: str | None = None
    img_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode='after')
    def check_custom_max_pieces(self):
        if self.is_custom and (self.max_pieces is None or self.max_pieces <= 0):
            raise ValueError(f"Custom bundle {self.id} requires max_pieces > 0")
        return self

    @property
    def is_active(self) -> bool:
        return self.status == BundleStatus.ACTIVE


class CustomBundleSelectionDTO(BaseModel):
    """Finished pick list of a custom bundle, ready to become a cart line."""
    bundle_id: str
    components: list[BundleComponentDTO]
    total_cost: float
    total_pieces: int
