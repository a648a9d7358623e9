from datetime import datetime

from pydantic import BaseModel, field_validator
from sqlalchemy import Column, String, Float, DateTime, ForeignKey, CheckConstraint, func

from enums.discount_type import DiscountType
from models.base import Base


class Discount(Base):
    __tablename__ = 'discounts'

    # The code is the identity, stored upper-cased
    code = Column(String, primary_key=True)
    type = Column(String(12), nullable=False)
    value = Column(Float, nullable=False)
    # Category scope; NULL applies to the whole order
    applies_to = Column(String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=func.now())
    modified_at = Column(DateTime, default=func.now(), onupdate=func.now())
    created_by = Column(String, nullable=False)
    modified_by = Column(String, nullable=True)

    __table_args__ = (
        CheckConstraint('value > 0', name='check_discount_value_positive'),
    )


class DiscountDTO(BaseModel):
    code: str
    type: DiscountType
    value: float
    applies_to: str | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None
    created_by: str | None = None
    modified_by: str | None = None

    @field_validator('code', mode='before')
    @classmethod
    def normalize_code(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator('type', mode='before')
    @classmethod
    def parse_type(cls, v):
        if isinstance(v, str):
            return DiscountType.from_string(v)
        return v


class DiscountApplicationDTO(BaseModel):
    """
    Outcome of applying a code to a cart.

    applicable=False with amount 0 means the code matched but its category is
    not in the cart; discount=None means the code is unknown.
    """
    discount: DiscountDTO | None = None
    amount: float = 0.0
    applicable: bool = False
