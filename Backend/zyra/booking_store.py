"""
Persistence of confirmed bookings.

A booking is written as two rows, each in its own transaction:

    1. a Client row scoped to the business
    2. a Booking row referencing the new client id

The two inserts are intentionally not atomic. If the booking insert fails the
client row stays behind as an orphan and the failure is logged with its id.
Failures of either step are logged and swallowed: the caller still confirms
the booking to the customer and still forwards it downstream.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .booking_intent import BookingIntent
from .models import Booking, Client
from .tenancy import BusinessContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingRecord:
    client_id: int
    booking_id: uuid.UUID


async def insert_client(session: AsyncSession, business_id: int, booking: BookingIntent) -> Client:
    client = Client(business_id=business_id, name=booking.name, phone=booking.phone)
    session.add(client)
    await session.commit()
    return client


async def insert_booking(
    session: AsyncSession,
    business_id: int,
    client_id: int,
    booking: BookingIntent,
) -> Booking:
    row = Booking(
        business_id=business_id,
        client_id=client_id,
        service=booking.service,
        date=booking.date,
        time=booking.time,
        notes=booking.notes or "",
    )
    session.add(row)
    await session.commit()
    return row


class BookingStore:
    """Writes bookings through a process-scoped session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def save_booking(
        self,
        business: BusinessContext,
        booking: BookingIntent,
    ) -> Optional[BookingRecord]:
        """
        Insert the client and booking rows.

        Returns:
            BookingRecord with the generated ids, or None if anything failed
            or the business has no row to scope the booking to.
        """
        if business.business_id is None:
            logger.warning(
                f"Booking for '{booking.name}' not stored: business '{business.name}' "
                "is the last-resort identity"
            )
            return None

        try:
            async with self._session_factory() as session:
                client = await insert_client(session, business.business_id, booking)
                client_id = client.id
        except Exception:
            logger.exception(f"Failed to insert client for business {business.business_id}")
            return None

        try:
            async with self._session_factory() as session:
                row = await insert_booking(session, business.business_id, client_id, booking)
                booking_id = row.id
        except Exception:
            logger.exception(
                f"Failed to insert booking for business {business.business_id}; "
                f"client {client_id} left without a booking"
            )
            return None

        logger.info(
            f"Stored booking {booking_id} (client {client_id}) for business {business.business_id}"
        )
        return BookingRecord(client_id=client_id, booking_id=booking_id)
