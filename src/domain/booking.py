"""Booking Domain Entity

A client's reservation of a trainer's time for one service.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from sqlmodel import Field, Index
from sqlalchemy import CheckConstraint, Text, Column, text
from src.domain.base import BaseModel, enum_column, generate_uuid, naive_utc_column, utc_now


class BookingStatus(str, Enum):
    """Booking lifecycle states"""
    HOLD = "hold"              # Provisional, expires at hold_expiry
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


ACTIVE_STATUSES = frozenset(
    {BookingStatus.HOLD, BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN}
)
TERMINAL_STATUSES = frozenset(
    {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.EXPIRED}
)

_ACTIVE_SQL = "status IN ('hold', 'confirmed', 'checked_in')"


class Booking(BaseModel, table=True):
    """
    Booking - Scheduled session between a trainer and a client

    Domain Rules:
    - Active bookings (hold, confirmed, checked_in) of one trainer never overlap
    - hold_expiry is only meaningful while status is HOLD
    - Consumed credits are linked through LedgerEntry.booking_id
    - Never hard-deleted
    """

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="booking_duration_positive"),
        Index("ix_bookings_trainer_scheduled", "trainer_id", "scheduled_at"),
        Index(
            "uq_bookings_trainer_start_active",
            "trainer_id",
            "scheduled_at",
            unique=True,
            postgresql_where=text(_ACTIVE_SQL),
            sqlite_where=text(_ACTIVE_SQL),
        ),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    trainer_id: str = Field(description="Trainer being booked")

    client_id: str = Field(index=True, description="Client who booked")

    service_id: str = Field(foreign_key="services.id", description="Booked service")

    scheduled_at: datetime = Field(
        sa_column=naive_utc_column(nullable=False),
        description="Session start (naive UTC)"
    )

    duration_minutes: int = Field(description="Session length, copied from the service")

    status: BookingStatus = Field(
        sa_column=enum_column(BookingStatus, nullable=False, index=True),
        description="Lifecycle state"
    )

    hold_expiry: Optional[datetime] = Field(
        default=None,
        sa_column=naive_utc_column(nullable=True),
        description="When a HOLD lapses (None for other states)"
    )

    credits_charged: int = Field(default=0, description="Credits reserved for this booking")

    completion_notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Completion declaration supplied by the trainer"
    )

    created_at: datetime = Field(default_factory=utc_now, sa_column=naive_utc_column(nullable=False))

    updated_at: datetime = Field(default_factory=utc_now, sa_column=naive_utc_column(nullable=False))

    @property
    def ends_at(self) -> datetime:
        return self.scheduled_at + timedelta(minutes=self.duration_minutes)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def hold_lapsed(self, now: datetime) -> bool:
        return (
            self.status == BookingStatus.HOLD
            and self.hold_expiry is not None
            and now > self.hold_expiry
        )
