"""
Pytest configuration and shared fixtures.

Tests never touch a real database, model or webhook: session factories are
replaced by in-memory fakes, the model by a canned completion client and the
webhook by httpx.MockTransport.
"""
import os
import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from zyra.core.config import Settings
from zyra.tenancy import BusinessContext, CatalogService, ResolutionSource


class FakeSessionFactory:
    """
    Stand-in for async_sessionmaker.

    Calling it yields an async context manager around ``session``; when
    ``error`` is set, entering the context raises it instead.
    """

    def __init__(self, session=None, error: Exception | None = None):
        self.session = session if session is not None else make_session()
        self.error = error
        self.opened = 0

    def __call__(self):
        return self

    async def __aenter__(self):
        self.opened += 1
        if self.error is not None:
            raise self.error
        return self.session

    async def __aexit__(self, exc_type, exc, tb):
        return False


def make_session(next_client_id: int = 1):
    """Mock AsyncSession that assigns an id to the Client on commit."""
    session = MagicMock()
    session.added = []
    session.add.side_effect = session.added.append

    async def commit():
        for obj in session.added:
            if getattr(obj, "id", None) is None and type(obj).__name__ == "Client":
                obj.id = next_client_id

    session.commit = AsyncMock(side_effect=commit)
    session.execute = AsyncMock(return_value=MagicMock())
    return session


class StubCompletionClient:
    """Returns a canned model reply and records what it was asked."""

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def complete(self, system_prompt: str, message: str) -> str:
        self.calls.append((system_prompt, message))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings():
    return Settings(
        fallback_business_slug="default",
        last_resort_business_name="our business",
        booking_webhook_url="https://scheduler.test/api/book",
        openai_api_key="test-key",
    )


@pytest.fixture
def salon():
    """Resolved business with a two-entry catalog."""
    return BusinessContext(
        business_id=7,
        name="Glow Studio",
        slug="glow-studio",
        services=(
            CatalogService(name="Haircut", price_cents=3500, duration_minutes=30),
            CatalogService(name="Hair Colour", price_cents=8000, duration_minutes=90,
                           description="Full colour or highlights"),
        ),
        source=ResolutionSource.SLUG,
    )


@pytest.fixture
def mock_business():
    """Mock Business row."""
    return SimpleNamespace(id=7, name="Glow Studio", slug="glow-studio")
