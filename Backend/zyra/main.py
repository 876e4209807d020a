import logging

import httpx
from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from openai import AsyncOpenAI

from .assistant import OpenAICompletionClient
from .booking_forwarder import BookingForwarder
from .conversation import (
    AssistantNotConfiguredError,
    ChatRequest,
    ChatResponse,
    ConversationOrchestrator,
    ERROR_REPLY,
    NO_MESSAGE_REPLY,
    NOT_CONFIGURED_REPLY,
)
from .core.config import get_settings
from .core.db import build_engine, build_session_factory, create_tables
from .seed import seed_initial_data


settings = get_settings()
app = FastAPI(title="Zyra Booking Backend")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list or ["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    await create_tables(engine)
    if settings.seed_demo_data:
        async with session_factory() as session:
            await seed_initial_data(session, settings)

    completion_client = None
    if settings.openai_api_key:
        completion_client = OpenAICompletionClient(
            AsyncOpenAI(api_key=settings.openai_api_key),
            model=settings.openai_model,
            temperature=settings.openai_temperature,
        )
    else:
        logger.warning("OPENAI_API_KEY is not set; /chat will report the assistant as unavailable.")

    http_client = httpx.AsyncClient(timeout=settings.booking_webhook_timeout_seconds)
    forwarder = BookingForwarder(settings.booking_webhook_url, client=http_client)

    app.state.engine = engine
    app.state.http_client = http_client
    app.state.orchestrator = ConversationOrchestrator(
        session_factory=session_factory,
        completion_client=completion_client,
        forwarder=forwarder,
        settings=settings,
    )


@app.on_event("shutdown")
async def on_shutdown():
    http_client = getattr(app.state, "http_client", None)
    if http_client is not None:
        await http_client.aclose()
    engine = getattr(app.state, "engine", None)
    if engine is not None:
        await engine.dispose()


def get_orchestrator(request: Request) -> ConversationOrchestrator:
    return request.app.state.orchestrator


@app.get("/health")
async def healthcheck():
    return {"ok": True}


@app.get("/services")
async def list_services(
    businessSlug: str | None = None,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
):
    business = await orchestrator.resolve_business(businessSlug)
    return {
        "business": {"name": business.name, "slug": business.slug},
        "services": [
            {
                "name": svc.name,
                "description": svc.description,
                "price_cents": svc.price_cents,
                "duration_minutes": svc.duration_minutes,
            }
            for svc in business.services
        ],
    }


@app.post("/chat", response_model=ChatResponse)
async def chat_endpoint(
    request: ChatRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
):
    """AI-powered chat endpoint for booking appointments."""
    if not request.message:
        return ChatResponse(reply=NO_MESSAGE_REPLY)

    try:
        result = await orchestrator.handle(request.message, request.business_slug)
    except AssistantNotConfiguredError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"reply": NOT_CONFIGURED_REPLY},
        )
    except Exception:
        logger.exception("Chat request failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"reply": ERROR_REPLY},
        )

    return ChatResponse(reply=result.reply)
