"""Data Transfer Objects for Booking Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.booking import Booking


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CreateBookingCommandDTO(BaseModel):
    """
    Command DTO for creating a booking

    Used as input to CreateBooking use case.
    """

    client_id: str = Field(..., description="Pre-authenticated client identifier")

    trainer_id: str = Field(..., description="Trainer to book")

    service_id: str = Field(..., description="Service to book")

    start_time: datetime = Field(..., description="Session start; aware values are converted to UTC")

    @field_validator("start_time")
    @classmethod
    def normalize_start(cls, v):
        return to_naive_utc(v).replace(microsecond=0)

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "client_123",
                "trainer_id": "trainer_456",
                "service_id": "service_pt60",
                "start_time": "2024-01-08T11:00:00Z",
            }
        }


class CancelBookingCommandDTO(BaseModel):
    """Command DTO for cancelling a booking"""

    booking_id: str = Field(..., description="Booking to cancel")

    actor_id: str = Field(..., description="Client or trainer requesting the cancellation")


class CompleteBookingCommandDTO(BaseModel):
    """Command DTO for completing a booking"""

    booking_id: str = Field(..., description="Booking to complete")

    declaration: str = Field(..., description="Session completion declaration (non-empty)")


class BookingResponseDTO(BaseModel):
    """
    Response DTO for booking operations

    Returned by CreateBooking, ConfirmBooking, CheckInBooking,
    CompleteBooking and GetBooking.
    """

    booking_id: str
    trainer_id: str
    client_id: str
    service_id: str
    state: str
    scheduled_at: datetime
    duration_minutes: int
    hold_expiry: Optional[datetime] = None
    credits_charged: int = 0
    completion_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponseDTO":
        return cls(
            booking_id=booking.id,
            trainer_id=booking.trainer_id,
            client_id=booking.client_id,
            service_id=booking.service_id,
            state=booking.status.value,
            scheduled_at=booking.scheduled_at,
            duration_minutes=booking.duration_minutes,
            hold_expiry=booking.hold_expiry,
            credits_charged=booking.credits_charged,
            completion_notes=booking.completion_notes,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "booking_id": "5f0c7c1e-9a43-4d3f-9a53-2b1f3f0f7d11",
                "trainer_id": "trainer_456",
                "client_id": "client_123",
                "service_id": "service_pt60",
                "state": "hold",
                "scheduled_at": "2024-01-08T11:00:00",
                "duration_minutes": 60,
                "hold_expiry": "2024-01-01T09:15:00",
                "credits_charged": 1,
                "completion_notes": None,
                "created_at": "2024-01-01T09:00:00",
                "updated_at": "2024-01-01T09:00:00",
            }
        }


class CancelBookingResponseDTO(BaseModel):
    """Response DTO for CancelBooking"""

    booking_id: str
    state: str
    credits_refunded: int


class ExpireHoldsResultDTO(BaseModel):
    """Result of a hold sweep"""

    holds_checked: int
    holds_expired: int
    credits_restored: int
    swept_at: datetime
