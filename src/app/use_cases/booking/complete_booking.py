"""CompleteBooking Use Case

Finalizes a session. Consumed credits stay spent.
"""

from libs.result import Result
from src.app.services.notification_service import BookingEvent
from src.domain.booking import BookingStatus
from .dtos import BookingResponseDTO, CompleteBookingCommandDTO
from .transition_booking import TransitionBooking


class CompleteBooking(TransitionBooking):
    """
    Use Case: checked_in -> completed (or confirmed -> completed for walk-ins)

    Requires a non-empty completion declaration (INVALID_DECLARATION
    otherwise). No ledger reversal happens.
    """

    target = BookingStatus.COMPLETED
    event = BookingEvent.COMPLETED
    failure_code = "COMPLETE_BOOKING_FAILED"

    async def execute(self, command: CompleteBookingCommandDTO) -> Result[BookingResponseDTO]:
        return await self._run(command.booking_id, declaration=command.declaration)
