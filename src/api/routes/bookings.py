"""Booking API Routes

FastAPI routes for the booking lifecycle.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.booking_request import (
    CancelBookingRequestSchema,
    CompleteBookingRequestSchema,
    CreateBookingRequestSchema,
)
from src.app.services.credit_ledger import CreditLedger
from src.app.services.notification_service import NotificationService
from src.app.services.studio_policy_provider import StudioPolicyProvider
from src.app.use_cases.booking.dtos import (
    BookingResponseDTO,
    CancelBookingCommandDTO,
    CancelBookingResponseDTO,
    CompleteBookingCommandDTO,
    CreateBookingCommandDTO,
)
from src.app.use_cases.booking.create_booking import CreateBooking
from src.app.use_cases.booking.cancel_booking import CancelBooking
from src.app.use_cases.booking.confirm_booking import ConfirmBooking
from src.app.use_cases.booking.check_in_booking import CheckInBooking
from src.app.use_cases.booking.complete_booking import CompleteBooking
from src.app.use_cases.booking.get_booking import GetBooking
from src.adapter.repositories.availability_rule_repository import SqlAlchemyAvailabilityRuleRepository
from src.adapter.repositories.booking_repository import SqlAlchemyBookingRepository
from src.adapter.repositories.credit_package_repository import SqlAlchemyCreditPackageRepository
from src.adapter.repositories.ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from src.adapter.repositories.service_repository import SqlAlchemyServiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_notifier, get_policy_provider, get_session

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def _error_example(code: str, message: str) -> dict:
    return {"application/json": {"example": {"error": {"code": code, "message": message}}}}


def _ledger(session: AsyncSession) -> CreditLedger:
    return CreditLedger(
        SqlAlchemyCreditPackageRepository(session),
        SqlAlchemyLedgerEntryRepository(session),
    )


@router.post(
    "",
    response_model=BookingResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {
            "description": "Insufficient credits",
            "content": _error_example(
                "INSUFFICIENT_CREDITS", "Insufficient credits. Required: 3, Available: 2"
            ),
        },
        404: {
            "description": "Service not found",
            "content": _error_example("SERVICE_NOT_FOUND", "Service service_pt60 not found or not bookable"),
        },
        409: {
            "description": "Slot already taken",
            "content": _error_example(
                "SLOT_CONFLICT", "Trainer trainer_456 is already booked at 2024-01-08T10:30:00"
            ),
        },
        422: {
            "description": "Outside the trainer's open hours",
            "content": _error_example(
                "OUTSIDE_OPERATING_HOURS",
                "2024-01-08T17:30:00 - 2024-01-08T18:30:00 is not within the trainer's open hours",
            ),
        },
    },
)
async def create_booking(
    request: CreateBookingRequestSchema,
    session: AsyncSession = Depends(get_session),
    policy_provider: StudioPolicyProvider = Depends(get_policy_provider),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Book a trainer's time for a client.

    Availability, conflict check, credit reservation and insert happen in
    one transaction. Paid services start as a `hold` that lapses after the
    studio's hold length unless confirmed; free services start `confirmed`.

    **Returns:**
    - 201: Booking created
    - 402: Not enough usable credits (nothing was created)
    - 404: Unknown or inactive service
    - 409: Overlaps an active booking
    - 422: Outside the trainer's open windows
    """
    uow = SqlAlchemyUnitOfWork(session)
    command = CreateBookingCommandDTO(
        client_id=request.client_id,
        trainer_id=request.trainer_id,
        service_id=request.service_id,
        start_time=request.start_time,
    )

    use_case = CreateBooking(
        uow,
        SqlAlchemyBookingRepository(session),
        SqlAlchemyServiceRepository(session),
        SqlAlchemyAvailabilityRuleRepository(session),
        _ledger(session),
        policy_provider,
        notifier,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{booking_id}", response_model=BookingResponseDTO)
async def get_booking(
    booking_id: str,
    session: AsyncSession = Depends(get_session),
    notifier: NotificationService = Depends(get_notifier),
):
    """Current state of a booking (a lapsed hold is reported as expired)."""
    use_case = GetBooking(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyBookingRepository(session),
        _ledger(session),
        notifier,
    )
    result = await use_case.execute(booking_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{booking_id}/cancel",
    response_model=CancelBookingResponseDTO,
    responses={
        404: {
            "description": "Booking not found",
            "content": _error_example("BOOKING_NOT_FOUND", "Booking b_1 not found"),
        },
        409: {
            "description": "Too late to cancel, or booking already final",
            "content": _error_example(
                "OUTSIDE_CANCELLATION_WINDOW", "Cannot cancel within 24 hours of scheduled time"
            ),
        },
    },
)
async def cancel_booking(
    booking_id: str,
    request: CancelBookingRequestSchema,
    session: AsyncSession = Depends(get_session),
    policy_provider: StudioPolicyProvider = Depends(get_policy_provider),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Cancel a booking and return its credits to the packages they came from.

    Only the booking's client or trainer may cancel, and only before the
    studio's cancellation window opens.
    """
    use_case = CancelBooking(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyBookingRepository(session),
        _ledger(session),
        policy_provider,
        notifier,
    )
    result = await use_case.execute(
        CancelBookingCommandDTO(booking_id=booking_id, actor_id=request.actor_id)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{booking_id}/confirm", response_model=BookingResponseDTO)
async def confirm_booking(
    booking_id: str,
    session: AsyncSession = Depends(get_session),
    notifier: NotificationService = Depends(get_notifier),
):
    """Confirm a live hold. A lapsed hold returns 409 ALREADY_TERMINAL."""
    use_case = ConfirmBooking(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyBookingRepository(session),
        _ledger(session),
        notifier,
    )
    result = await use_case.execute(booking_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{booking_id}/check-in", response_model=BookingResponseDTO)
async def check_in_booking(
    booking_id: str,
    session: AsyncSession = Depends(get_session),
    notifier: NotificationService = Depends(get_notifier),
):
    """Mark the client as arrived."""
    use_case = CheckInBooking(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyBookingRepository(session),
        _ledger(session),
        notifier,
    )
    result = await use_case.execute(booking_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{booking_id}/complete", response_model=BookingResponseDTO)
async def complete_booking(
    booking_id: str,
    request: CompleteBookingRequestSchema,
    session: AsyncSession = Depends(get_session),
    notifier: NotificationService = Depends(get_notifier),
):
    """Finish a session with the trainer's completion declaration."""
    use_case = CompleteBooking(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyBookingRepository(session),
        _ledger(session),
        notifier,
    )
    result = await use_case.execute(
        CompleteBookingCommandDTO(booking_id=booking_id, declaration=request.declaration)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
