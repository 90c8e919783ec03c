"""CheckInBooking Use Case"""

from libs.result import Result
from src.domain.booking import BookingStatus
from .dtos import BookingResponseDTO
from .transition_booking import TransitionBooking


class CheckInBooking(TransitionBooking):
    """Use Case: trainer marks the client as arrived (confirmed -> checked_in)"""

    target = BookingStatus.CHECKED_IN
    failure_code = "CHECK_IN_BOOKING_FAILED"

    async def execute(self, booking_id: str) -> Result[BookingResponseDTO]:
        return await self._run(booking_id)
