"""
Business-scoped query helpers.

Every read of tenant data goes through these helpers so the business_id
filter is never forgotten.
"""

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Business, Service


async def get_business_by_slug(session: AsyncSession, slug: str) -> Optional[Business]:
    """Exact, case-sensitive slug lookup."""
    result = await session.execute(select(Business).where(Business.slug == slug))
    return result.scalar_one_or_none()


async def list_active_services(session: AsyncSession, business_id: int) -> Sequence[Service]:
    """Active services of a business in catalog order (by id)."""
    result = await session.execute(
        select(Service)
        .where(Service.business_id == business_id, Service.active.is_(True))
        .order_by(Service.id)
    )
    return result.scalars().all()
