from .create_booking import CreateBooking
from .cancel_booking import CancelBooking
from .confirm_booking import ConfirmBooking
from .check_in_booking import CheckInBooking
from .complete_booking import CompleteBooking
from .get_booking import GetBooking
from .expire_holds import ExpireStaleHolds
from .dtos import (
    CreateBookingCommandDTO,
    CancelBookingCommandDTO,
    CompleteBookingCommandDTO,
    BookingResponseDTO,
    CancelBookingResponseDTO,
    ExpireHoldsResultDTO,
)

__all__ = [
    "CreateBooking",
    "CancelBooking",
    "ConfirmBooking",
    "CheckInBooking",
    "CompleteBooking",
    "GetBooking",
    "ExpireStaleHolds",
    "CreateBookingCommandDTO",
    "CancelBookingCommandDTO",
    "CompleteBookingCommandDTO",
    "BookingResponseDTO",
    "CancelBookingResponseDTO",
    "ExpireHoldsResultDTO",
]
