"""Ledger Entry Domain Entity

Immutable append-only audit trail of every credit movement on a package.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Index
from src.domain.base import BaseModel, generate_uuid, naive_utc_column, utc_now


class LedgerReason(str, Enum):
    """Why credits moved"""
    BOOKING = "booking"                    # Consumed by a booking
    REFUND = "refund"                      # Exact reversal of a booking entry
    MANUAL_GRANT = "manual_grant"          # Trainer/admin added credits
    MANUAL_DEDUCTION = "manual_deduction"  # Trainer/admin removed credits


class LedgerEntry(BaseModel, table=True):
    """
    Ledger Entry - Signed credit delta against one package

    Domain Rules:
    - Entries are immutable (append-only)
    - delta < 0 consumes credits, delta > 0 restores or grants them
    - balance_after is the package's remaining credits after this entry
    - A refund points at the entry it reverses; reverses_entry_id is unique,
      so a consumption is reversed at most once
    """

    __tablename__ = "ledger_entries"
    __table_args__ = (
        Index("ix_ledger_entries_booking_reason", "booking_id", "reason"),
        Index("ix_ledger_entries_client_created", "client_id", "created_at"),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    package_id: str = Field(
        foreign_key="credit_packages.id",
        index=True,
        description="Package the credits moved on"
    )

    client_id: str = Field(description="Package owner, denormalized for history queries")

    booking_id: Optional[str] = Field(
        default=None,
        description="Booking that caused the movement (None for manual adjustments)"
    )

    delta: int = Field(description="Signed credit change")

    balance_after: int = Field(description="Remaining credits on the package after the entry")

    reason: LedgerReason = Field(description="booking, refund, manual_grant, manual_deduction")

    reverses_entry_id: Optional[str] = Field(
        default=None,
        unique=True,
        description="Entry this refund reverses"
    )

    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, sa_column=naive_utc_column(nullable=False))
