"""
Conversation orchestration for the booking chat.

Each request is handled independently:

    START -> BUSINESS_RESOLVED -> MODEL_RESPONSE_RECEIVED
        -> INTENT_DETECTED -> BOOKING_RECONCILED -> REPLIED
        -> NO_INTENT -> REPLIED

Business resolution degrades instead of failing. Model errors propagate to the
HTTP layer, which answers with a generic apology.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .assistant import CompletionClient, build_system_prompt
from .booking_forwarder import BookingForwarder
from .booking_intent import extract_booking_intent
from .booking_reconciler import BookingOutcome, reconcile_booking
from .booking_store import BookingStore
from .core.config import Settings
from .tenancy import BusinessContext, resolve_business_context

logger = logging.getLogger(__name__)

NO_MESSAGE_REPLY = "You didn’t send a message."
ERROR_REPLY = "I'm having trouble processing your request. Please try again."
NOT_CONFIGURED_REPLY = "I'm sorry, but the AI assistant is not configured. Please contact support."


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    business_slug: Optional[str] = Field(default=None, alias="businessSlug")


class ChatResponse(BaseModel):
    reply: str


class ConversationStage(str, Enum):
    START = "START"
    BUSINESS_RESOLVED = "BUSINESS_RESOLVED"
    MODEL_RESPONSE_RECEIVED = "MODEL_RESPONSE_RECEIVED"
    INTENT_DETECTED = "INTENT_DETECTED"
    NO_INTENT = "NO_INTENT"
    BOOKING_RECONCILED = "BOOKING_RECONCILED"
    REPLIED = "REPLIED"


class AssistantNotConfiguredError(RuntimeError):
    """Raised when no model client is available (missing API key)."""


@dataclass
class ConversationResult:
    reply: str
    business: Optional[BusinessContext] = None
    model_text: str = ""
    booking: Optional[BookingOutcome] = None
    path: list[ConversationStage] = field(default_factory=lambda: [ConversationStage.START])

    def advance(self, stage: ConversationStage) -> None:
        logger.debug(f"Conversation stage {self.path[-1].value} -> {stage.value}")
        self.path.append(stage)


class ConversationOrchestrator:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        completion_client: Optional[CompletionClient],
        forwarder: BookingForwarder,
        settings: Settings,
        store: Optional[BookingStore] = None,
    ):
        self.session_factory = session_factory
        self.completion_client = completion_client
        self.forwarder = forwarder
        self.settings = settings
        self.store = store or BookingStore(session_factory)

    async def resolve_business(self, business_slug: Optional[str]) -> BusinessContext:
        return await resolve_business_context(
            self.session_factory,
            business_slug,
            fallback_slug=self.settings.fallback_business_slug,
            last_resort_name=self.settings.last_resort_business_name,
        )

    async def handle(self, message: str, business_slug: Optional[str] = None) -> ConversationResult:
        if self.completion_client is None:
            raise AssistantNotConfiguredError("OPENAI_API_KEY is not set")

        result = ConversationResult(reply="")

        business = await self.resolve_business(business_slug)
        result.business = business
        result.advance(ConversationStage.BUSINESS_RESOLVED)
        logger.info(
            f"Chat for business '{business.name}' (id={business.business_id}, "
            f"source={business.source.value}, services={len(business.services)})"
        )

        system_prompt = build_system_prompt(
            business,
            assistant_name=self.settings.assistant_name,
            include_business=self.settings.prompt_include_business,
            include_catalog=self.settings.prompt_include_catalog,
        )
        model_text = await self.completion_client.complete(system_prompt, message)
        result.model_text = model_text
        result.advance(ConversationStage.MODEL_RESPONSE_RECEIVED)

        intent = extract_booking_intent(model_text)
        if intent is None:
            result.advance(ConversationStage.NO_INTENT)
            result.reply = model_text
            result.advance(ConversationStage.REPLIED)
            return result

        result.advance(ConversationStage.INTENT_DETECTED)
        logger.info(f"Booking intent detected for '{intent.name}' ({intent.service})")

        outcome = await reconcile_booking(intent, business, self.store, self.forwarder)
        result.booking = outcome
        result.advance(ConversationStage.BOOKING_RECONCILED)

        result.reply = outcome.confirmation
        result.advance(ConversationStage.REPLIED)
        return result
