"""
Booking Forwarder

Relays finalized bookings to the external scheduling service with a single
JSON POST. Best effort: network errors and non-2xx responses are logged and
never reach the customer. No retries.
"""

import logging
from typing import Optional

import httpx

from .booking_intent import BookingIntent

logger = logging.getLogger(__name__)


class BookingForwarder:
    def __init__(
        self,
        url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.url = url
        self._client = client
        self._timeout = timeout

    async def _post(self, payload: dict) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        if self._client is not None:
            return await self._client.post(self.url, json=payload, headers=headers)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(self.url, json=payload, headers=headers)

    async def forward(self, booking: BookingIntent) -> bool:
        """
        Send the booking downstream.

        Returns:
            True if the endpoint answered with a 2xx status, False otherwise
        """
        if not self.url:
            logger.warning("Booking webhook is not configured; skipping forward.")
            return False

        try:
            response = await self._post(booking.to_payload())
        except httpx.HTTPError as exc:
            logger.warning(f"Booking forward to {self.url} failed: {exc!r}")
            return False

        logger.info(f"Booking forward response {response.status_code}: {response.text[:500]}")
        if not response.is_success:
            logger.warning(f"Booking forward rejected with status {response.status_code}")
            return False
        return True
