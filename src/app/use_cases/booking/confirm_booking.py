"""ConfirmBooking Use Case

Finalizes a provisional hold once payment/credit commitment is captured.
"""

from libs.result import Result
from src.app.services.notification_service import BookingEvent
from src.domain.booking import BookingStatus
from .dtos import BookingResponseDTO
from .transition_booking import TransitionBooking


class ConfirmBooking(TransitionBooking):
    """
    Use Case: hold -> confirmed

    Fails with ALREADY_TERMINAL when the hold lapsed before confirmation
    (the hold is expired and its credits released in the same call).
    """

    target = BookingStatus.CONFIRMED
    event = BookingEvent.CONFIRMED
    failure_code = "CONFIRM_BOOKING_FAILED"

    async def execute(self, booking_id: str) -> Result[BookingResponseDTO]:
        return await self._run(booking_id)
