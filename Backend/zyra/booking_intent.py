"""
Booking intent extraction from model output.

Once the assistant has collected every detail it ends its reply with a JSON
summary. Extraction looks for that summary with a deliberately simple
heuristic: slice from the first "{" to the last "}" and parse the span. Only
one span is ever considered; anything that does not parse into a complete
intent means the reply is ordinary conversation.
"""
import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "phone", "service", "date", "time")


class BookingIntent(BaseModel):
    name: str
    phone: str
    service: str
    date: str  # verbatim, e.g. "next Friday"
    time: str  # verbatim, e.g. "3pm"
    notes: str = ""

    @field_validator("name", "phone", "service", "date", "time", "notes", mode="before")
    @classmethod
    def coerce_scalar(cls, value: Any) -> Any:
        # Models sometimes emit phone numbers as JSON numbers.
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return value

    @field_validator("notes", mode="before")
    @classmethod
    def default_notes(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(include={*REQUIRED_FIELDS, "notes"})


def find_json_span(text: str) -> Optional[str]:
    """Return the text between the first "{" and the last "}" inclusive."""
    if not text:
        return None
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or start >= end:
        return None
    return text[start:end + 1]


def extract_booking_intent(text: str) -> Optional[BookingIntent]:
    """Parse a complete BookingIntent out of generated text, or return None."""
    span = find_json_span(text)
    if span is None:
        return None

    try:
        data = json.loads(span)
    except json.JSONDecodeError:
        logger.debug("Brace span in model reply is not valid JSON")
        return None

    if not isinstance(data, dict):
        return None

    try:
        return BookingIntent.model_validate(data)
    except ValidationError as exc:
        missing = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        logger.info(f"Incomplete booking JSON in model reply (invalid fields: {missing})")
        return None
