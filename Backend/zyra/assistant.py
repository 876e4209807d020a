"""
Booking assistant persona and the model completion client.
"""
from typing import Protocol, Sequence

from openai import AsyncOpenAI

from .tenancy import BusinessContext, CatalogService


SYSTEM_PROMPT = """You are {assistant_name}, an intelligent, friendly AI booking assistant for {business_line}.

{catalog_section}CORE RESPONSIBILITIES:
1. Help clients understand available services, prices, and booking options.
2. Guide first-time clients through a step-by-step booking flow: gather name, service, date, time, and phone number.
3. For returning clients, allow fast shorthand booking. If a user says something like "same as last time Friday at 3pm", understand and process it.
4. Always confirm missing details. Never assume anything you aren't told.
5. Keep dates and times exactly as the client said them (e.g. "next Friday", "3pm").
6. Once ALL details are collected, end your reply with the booking summary in clean JSON format:
{{
  "name": "",
  "phone": "",
  "service": "",
  "date": "",
  "time": "",
  "notes": ""
}}
{service_rule}
TONE:
- Warm, professional, helpful.
- Speak in short, clean sentences.
- Never show JSON to the client unless it's the final booking summary.
- If a client just asks a question (not booking), respond normally with helpful info.
"""

CATALOG_SECTION = """SERVICES:
{services}

"""

SERVICE_RULE = "7. Use the service name exactly as listed under SERVICES in the JSON summary.\n"


def format_cents(value: int) -> str:
    return f"${value / 100:.2f}"


def format_catalog(services: Sequence[CatalogService]) -> str:
    """Formatted services list for the system prompt."""
    if not services:
        return "No services listed"

    lines = []
    for svc in services:
        details = []
        if svc.price_cents is not None:
            details.append(format_cents(svc.price_cents))
        if svc.duration_minutes is not None:
            details.append(f"{svc.duration_minutes} min")
        line = f"- {svc.name}"
        if details:
            line += f" ({', '.join(details)})"
        if svc.description:
            line += f": {svc.description}"
        lines.append(line)
    return "\n".join(lines)


def build_system_prompt(
    business: BusinessContext,
    *,
    assistant_name: str = "Zyra",
    include_business: bool = True,
    include_catalog: bool = True,
) -> str:
    business_line = business.name if include_business else "service-based businesses"
    show_catalog = include_catalog and bool(business.services)
    return SYSTEM_PROMPT.format(
        assistant_name=assistant_name,
        business_line=business_line,
        catalog_section=CATALOG_SECTION.format(services=format_catalog(business.services)) if show_catalog else "",
        service_rule=SERVICE_RULE if show_catalog else "",
    )


class CompletionClient(Protocol):
    async def complete(self, system_prompt: str, message: str) -> str:
        ...


class OpenAICompletionClient:
    """Single-turn chat completion: one system message, one user message."""

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4.1-mini", temperature: float = 0.3):
        self.client = client
        self.model = model
        self.temperature = temperature

    async def complete(self, system_prompt: str, message: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": message},
            ],
            temperature=self.temperature,
        )
        return response.choices[0].message.content or ""
