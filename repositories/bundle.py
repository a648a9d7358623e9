from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.bundle import Bundle, BundleComponent, BundleDTO


class BundleRepository:

    @staticmethod
    async def get_all(session: Session | AsyncSession) -> list[BundleDTO]:
        """All bundles with their components (custom bundles have none)."""
        stmt = select(Bundle).order_by(Bundle.name)
        bundles = await session_execute(stmt, session)
        return [BundleDTO.model_validate(bundle, from_attributes=True) for bundle in bundles.scalars().all()]

    @staticmethod
    async def add(bundle_dto: BundleDTO, session: Session | AsyncSession) -> str:
        data = bundle_dto.model_dump(exclude={'components'}, exclude_none=True)
        data['status'] = bundle_dto.status.value
        bundle = Bundle(**data)
        # Custom bundles synthesize their components per order
        if not bundle_dto.is_custom:
            bundle.components = [
                BundleComponent(inventory_item_id=c.inventory_item_id, quantity=c.quantity, position=i)
                for i, c in enumerate(bundle_dto.components)
            ]
        session.add(bundle)
        await session_flush(session)
        return bundle.id
