from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.category import Category, CategoryDTO


class CategoryRepository:

    @staticmethod
    async def get_all(session: Session | AsyncSession) -> list[CategoryDTO]:
        stmt = select(Category).order_by(Category.name)
        categories = await session_execute(stmt, session)
        return [CategoryDTO.model_validate(category, from_attributes=True) for category in categories.scalars().all()]

    @staticmethod
    async def add(category_dto: CategoryDTO, session: Session | AsyncSession) -> str:
        category = Category(**category_dto.model_dump(exclude_none=True))
        session.add(category)
        await session_flush(session)
        return category.id
