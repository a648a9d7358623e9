from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.discount import Discount, DiscountDTO
from services.discount import DiscountEngine


class DiscountRepository:

    @staticmethod
    async def get_all(session: Session | AsyncSession) -> list[DiscountDTO]:
        stmt = select(Discount).order_by(Discount.created_at.desc())
        discounts = await session_execute(stmt, session)
        return [DiscountDTO.model_validate(discount, from_attributes=True) for discount in discounts.scalars().all()]

    @staticmethod
    async def get_by_code(code: str, session: Session | AsyncSession) -> DiscountDTO | None:
        stmt = select(Discount).where(Discount.code == DiscountEngine.normalize_code(code))
        result = await session_execute(stmt, session)
        discount = result.scalar()
        return DiscountDTO.model_validate(discount, from_attributes=True) if discount else None

    @staticmethod
    async def create(discount_dto: DiscountDTO, session: Session | AsyncSession) -> str:
        """
        Store a new discount under its upper-cased code.

        Raises:
            InvalidDiscountException: If the value is out of range for its type
        """
        DiscountEngine.validate(discount_dto)
        discount = Discount(
            code=discount_dto.code,
            type=discount_dto.type.value,
            value=discount_dto.value,
            applies_to=discount_dto.applies_to,
            created_by=discount_dto.created_by or "system"
        )
        session.add(discount)
        await session_flush(session)
        return discount.code
