"""Service Domain Entity

A bookable session type offered by a trainer (e.g. "60 min PT session").
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Numeric
from src.domain.base import BaseModel, generate_uuid, naive_utc_column, utc_now


class Service(BaseModel, table=True):
    """
    Service - Duration, credit cost and price of a bookable session

    Domain Rules:
    - duration_minutes > 0
    - credits_required >= 0 (0 = free or paid outside the credit system)
    - Immutable once referenced by a booking; edits create a new service
    """

    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="service_duration_positive"),
        CheckConstraint("credits_required >= 0", name="service_credits_non_negative"),
        CheckConstraint("capacity >= 1", name="service_capacity_positive"),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    trainer_id: str = Field(index=True, description="Trainer offering the service")

    name: str = Field(description="Display name")

    duration_minutes: int = Field(description="Session length in minutes")

    credits_required: int = Field(default=1, description="Credits charged per booking")

    price: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(10, 2), nullable=False, default=0),
        description="List price of a single session"
    )

    capacity: int = Field(default=1, description="Clients per session")

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=naive_utc_column(nullable=False))

    @property
    def requires_payment(self) -> bool:
        return self.credits_required > 0 or (self.price or Decimal("0")) > 0
