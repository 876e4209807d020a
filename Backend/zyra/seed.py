from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .core.config import Settings
from .models import Business, Service


DEMO_SERVICES = [
    {"name": "Haircut", "price_cents": 3500, "duration_minutes": 30,
     "description": "Wash, cut and style"},
    {"name": "Hair Colour", "price_cents": 8000, "duration_minutes": 90,
     "description": "Full colour or highlights"},
    {"name": "Beard Trim", "price_cents": 2000, "duration_minutes": 20,
     "description": None},
]


async def seed_initial_data(session: AsyncSession, settings: Settings) -> None:
    """Create the fallback business and a demo catalog if they are missing."""
    slug = settings.fallback_business_slug
    result = await session.execute(select(Business).where(Business.slug == slug))
    business = result.scalar_one_or_none()

    if not business:
        business = Business(name=settings.default_business_name, slug=slug)
        session.add(business)
        await session.flush()

    # Seed services if missing
    result = await session.execute(select(Service).where(Service.business_id == business.id))
    services = result.scalars().all()
    if not services:
        session.add_all(
            [Service(business_id=business.id, active=True, **svc) for svc in DEMO_SERVICES]
        )

    await session.commit()
