"""Request schemas for Booking API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class CreateBookingRequestSchema(BaseModel):
    """
    Request schema for creating a booking

    Used for POST /bookings endpoint.
    """

    client_id: str = Field(
        ...,
        min_length=1,
        description="Client identifier (required, non-empty)"
    )

    trainer_id: str = Field(
        ...,
        min_length=1,
        description="Trainer identifier (required, non-empty)"
    )

    service_id: str = Field(
        ...,
        min_length=1,
        description="Service identifier (required, non-empty)"
    )

    start_time: datetime = Field(
        ...,
        description="Session start; timezone-aware values are converted to UTC"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "client_123",
                "trainer_id": "trainer_456",
                "service_id": "service_pt60",
                "start_time": "2024-01-08T11:00:00Z",
            }
        }


class CancelBookingRequestSchema(BaseModel):
    """
    Request schema for cancelling a booking

    Used for POST /bookings/{booking_id}/cancel endpoint.
    """

    actor_id: str = Field(
        ...,
        min_length=1,
        description="Client or trainer requesting the cancellation"
    )


class CompleteBookingRequestSchema(BaseModel):
    """
    Request schema for completing a booking

    Used for POST /bookings/{booking_id}/complete endpoint.
    """

    declaration: str = Field(
        ...,
        min_length=1,
        description="Session completion declaration"
    )

    @field_validator("declaration")
    @classmethod
    def validate_declaration(cls, v):
        """Reject whitespace-only declarations"""
        if not v.strip():
            raise ValueError("Declaration must not be blank")
        return v.strip()

    class Config:
        json_schema_extra = {
            "example": {
                "declaration": "Client attended the full session; lower-body strength block."
            }
        }
