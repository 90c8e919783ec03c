"""Helpers shared by use cases"""

import logging
from libs.result import Error
from src.app.services.notification_service import BookingEvent, NotificationService
from src.domain.booking import Booking
from src.domain.errors import DomainError

logger = logging.getLogger(__name__)


def domain_error(exc: DomainError) -> Error:
    return Error(code=exc.code, message=exc.message, reason=exc.reason)


async def notify(notifier: NotificationService, booking: Booking, event: BookingEvent) -> None:
    """Best-effort announcement after commit; delivery failures never undo a booking."""
    if notifier is None:
        return
    try:
        await notifier.send_booking_event(booking, event)
    except Exception as e:
        logger.error(f"Failed to announce {event.value} for booking {booking.id}: {e}")
