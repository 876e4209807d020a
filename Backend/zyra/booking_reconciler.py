import logging
from dataclasses import dataclass
from typing import Optional

from .booking_forwarder import BookingForwarder
from .booking_intent import BookingIntent
from .booking_store import BookingRecord, BookingStore
from .service_matcher import match_service
from .tenancy import BusinessContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingOutcome:
    booking: BookingIntent
    record: Optional[BookingRecord]
    forwarded: bool
    confirmation: str


def format_confirmation(booking: BookingIntent) -> str:
    """Customer-facing confirmation; echoes the extracted fields verbatim."""
    return (
        f"You're all set, {booking.name}! Your {booking.service} is booked for "
        f"{booking.date} at {booking.time}. See you then!"
    )


def finalize_booking(intent: BookingIntent, business: BusinessContext) -> BookingIntent:
    """Snap the service name to the catalog (when there is one) and default notes."""
    service = intent.service
    if business.services:
        service = match_service(intent.service, business.service_names)
        if service != intent.service:
            logger.info(f"Service '{intent.service}' reconciled to '{service}'")
    return intent.model_copy(update={"service": service, "notes": intent.notes or ""})


async def reconcile_booking(
    intent: BookingIntent,
    business: BusinessContext,
    store: BookingStore,
    forwarder: BookingForwarder,
) -> BookingOutcome:
    booking = finalize_booking(intent, business)

    # Store first so the confirmation matches what was saved; forwarding
    # happens whatever the store returned.
    record = await store.save_booking(business, booking)
    forwarded = await forwarder.forward(booking)

    return BookingOutcome(
        booking=booking,
        record=record,
        forwarded=forwarded,
        confirmation=format_confirmation(booking),
    )
