"""Notification Service Interface

Defines the contract for announcing booking lifecycle events to the
platform's messaging collaborators (email/SMS delivery lives elsewhere).
"""

from abc import ABC, abstractmethod
from enum import Enum
from src.domain.booking import Booking


class BookingEvent(str, Enum):
    CREATED = "booking.created"
    CONFIRMED = "booking.confirmed"
    CANCELLED = "booking.cancelled"
    EXPIRED = "booking.expired"
    COMPLETED = "booking.completed"


class NotificationService(ABC):
    """
    Abstract notification service for booking events

    Implementations can deliver via:
    - Logging
    - Webhook (HTTP POST)
    """

    @abstractmethod
    async def send_booking_event(self, booking: Booking, event: BookingEvent) -> bool:
        """
        Announce a booking event

        Args:
            booking: Booking the event is about (already committed)
            event: What happened

        Returns:
            True if delivered, False otherwise (never raises)
        """
        pass
