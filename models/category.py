from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel
from sqlalchemy import Column, String, DateTime, func

from models.base import Base


class Category(Base):
    __tablename__ = 'categories'

    id = Column(String, primary_key=True, default=lambda: uuid4().hex)
    name = Column(String, nullable=False, unique=True)
    color = Column(String, nullable=False, default="#9E9E9E")
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())


class CategoryDTO(BaseModel):
    id: str | None = None
    name: str | None = None
    color: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
