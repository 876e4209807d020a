"""
Multi-tenancy package for Zyra.

Modules:
    context: BusinessContext resolution with fallback and last-resort identity
    queries: Business-scoped query helpers
"""

from .context import (
    BusinessContext,
    CatalogService,
    ResolutionSource,
    last_resort_context,
    resolve_business_context,
)

from .queries import (
    get_business_by_slug,
    list_active_services,
)

__all__ = [
    # Context
    "BusinessContext",
    "CatalogService",
    "ResolutionSource",
    "last_resort_context",
    "resolve_business_context",
    # Query helpers
    "get_business_by_slug",
    "list_active_services",
]
