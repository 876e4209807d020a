"""
HTTP surface tests for /chat, /services and /health.

The orchestrator dependency is overridden, so no startup wiring (database,
OpenAI, webhook client) runs.

Run with: pytest tests/test_chat_endpoint.py -v
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from zyra.conversation import (
    AssistantNotConfiguredError,
    ConversationResult,
    ERROR_REPLY,
    NO_MESSAGE_REPLY,
    NOT_CONFIGURED_REPLY,
)
from zyra.main import app, get_orchestrator


@pytest.fixture
def orchestrator(salon):
    orchestrator = MagicMock()
    orchestrator.handle = AsyncMock(return_value=ConversationResult(reply="Hi! How can I help?"))
    orchestrator.resolve_business = AsyncMock(return_value=salon)
    return orchestrator


@pytest.fixture
async def client(orchestrator):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_chat_returns_reply(client, orchestrator):
    response = await client.post("/chat", json={"message": "Hello", "businessSlug": "glow-studio"})

    assert response.status_code == 200
    assert response.json() == {"reply": "Hi! How can I help?"}
    orchestrator.handle.assert_awaited_once_with("Hello", "glow-studio")


@pytest.mark.asyncio
async def test_chat_without_slug(client, orchestrator):
    response = await client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 200
    orchestrator.handle.assert_awaited_once_with("Hello", None)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"message": ""}, {"businessSlug": "glow-studio"}])
async def test_missing_message_short_circuits(client, orchestrator, body):
    response = await client.post("/chat", json=body)

    assert response.status_code == 200
    assert response.json() == {"reply": NO_MESSAGE_REPLY}
    orchestrator.handle.assert_not_awaited()


@pytest.mark.asyncio
async def test_unexpected_error_returns_apology(client, orchestrator):
    orchestrator.handle.side_effect = RuntimeError("model exploded")

    response = await client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 500
    assert response.json() == {"reply": ERROR_REPLY}


@pytest.mark.asyncio
async def test_unconfigured_assistant(client, orchestrator):
    orchestrator.handle.side_effect = AssistantNotConfiguredError("no key")

    response = await client.post("/chat", json={"message": "Hello"})

    assert response.status_code == 503
    assert response.json() == {"reply": NOT_CONFIGURED_REPLY}


@pytest.mark.asyncio
async def test_services_lists_catalog(client, orchestrator):
    response = await client.get("/services", params={"businessSlug": "glow-studio"})

    assert response.status_code == 200
    body = response.json()
    assert body["business"] == {"name": "Glow Studio", "slug": "glow-studio"}
    assert [svc["name"] for svc in body["services"]] == ["Haircut", "Hair Colour"]
    orchestrator.resolve_business.assert_awaited_once_with("glow-studio")


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"ok": True}
