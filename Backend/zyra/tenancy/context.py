"""
Business (tenant) context resolution.

A chat request names its business by an opaque slug, usually set by the
embeddable widget. Resolution never fails the request:

    1. exact lookup of the requested slug
    2. lookup of the configured fallback slug
    3. a hard-coded last-resort identity with an empty catalog

Lookup errors are logged and also degrade to the last-resort identity.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..models import Business, Service
from .queries import get_business_by_slug, list_active_services


logger = logging.getLogger(__name__)


class ResolutionSource(str, Enum):
    """How the business context was determined."""

    SLUG = "slug"                 # The slug sent with the request
    FALLBACK = "fallback"         # The configured fallback business
    LAST_RESORT = "last_resort"   # No row found or lookup failed


@dataclass(frozen=True)
class CatalogService:
    """Read-only snapshot of an active Service row."""

    name: str
    description: Optional[str] = None
    price_cents: Optional[int] = None
    duration_minutes: Optional[int] = None

    @classmethod
    def from_model(cls, service: Service) -> "CatalogService":
        return cls(
            name=service.name,
            description=service.description,
            price_cents=service.price_cents,
            duration_minutes=service.duration_minutes,
        )


@dataclass(frozen=True)
class BusinessContext:
    """
    Immutable per-request view of the business a conversation belongs to.

    Attributes:
        business_id: businesses.id, or None for the last-resort identity
        slug: slug of the resolved row, None for the last-resort identity
        name: human-readable business name
        services: active catalog snapshot, in catalog order
        source: how this context was determined (for logging)
    """

    business_id: Optional[int]
    name: str
    slug: Optional[str] = None
    services: tuple[CatalogService, ...] = field(default_factory=tuple)
    source: ResolutionSource = ResolutionSource.LAST_RESORT

    @property
    def service_names(self) -> list[str]:
        return [service.name for service in self.services]

    @property
    def is_last_resort(self) -> bool:
        return self.business_id is None


def last_resort_context(name: str) -> BusinessContext:
    return BusinessContext(business_id=None, name=name, source=ResolutionSource.LAST_RESORT)


async def _lookup(
    session: AsyncSession,
    slug: Optional[str],
    fallback_slug: str,
) -> tuple[Optional[Business], ResolutionSource]:
    if slug:
        business = await get_business_by_slug(session, slug)
        if business:
            return business, ResolutionSource.SLUG
        logger.info(f"Unknown business slug '{slug}', trying fallback '{fallback_slug}'")

    if fallback_slug and fallback_slug != slug:
        business = await get_business_by_slug(session, fallback_slug)
        if business:
            return business, ResolutionSource.FALLBACK

    return None, ResolutionSource.LAST_RESORT


async def resolve_business_context(
    session_factory: async_sessionmaker[AsyncSession],
    slug: Optional[str],
    *,
    fallback_slug: str,
    last_resort_name: str,
) -> BusinessContext:
    """
    Resolve the business and snapshot its active catalog.

    Args:
        session_factory: Factory for a short-lived read session
        slug: Slug from the request; blank or whitespace-only means absent
        fallback_slug: Slug tried when the requested one is absent or unknown
        last_resort_name: Display name used when nothing resolves

    Returns:
        A usable BusinessContext. Never raises.
    """
    normalized = (slug or "").strip() or None

    try:
        async with session_factory() as session:
            business, source = await _lookup(session, normalized, fallback_slug)
            if business is None:
                logger.warning(
                    f"No business for slug={normalized!r} or fallback={fallback_slug!r}; "
                    "using last-resort identity"
                )
                return last_resort_context(last_resort_name)

            services = await list_active_services(session, business.id)
            return BusinessContext(
                business_id=business.id,
                name=business.name,
                slug=business.slug,
                services=tuple(CatalogService.from_model(svc) for svc in services),
                source=source,
            )
    except Exception:
        logger.exception(f"Business lookup failed for slug={normalized!r}; using last-resort identity")
        return last_resort_context(last_resort_name)
