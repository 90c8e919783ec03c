"""Availability Rule Domain Entity

A trainer's recurring (weekly) or one-off availability, either opening time
for bookings or blocking it (breaks, holidays, personal time).
"""

from datetime import date, datetime, time
from enum import Enum
from typing import Optional
from sqlmodel import Field, Index
from sqlalchemy import CheckConstraint
from src.domain.base import BaseModel, generate_uuid, naive_utc_column, utc_now
from src.domain.errors import InvalidAvailabilityRule


class RuleKind(str, Enum):
    """How a rule recurs"""
    WEEKLY = "weekly"  # Every week on day_of_week
    ONCE = "once"      # specific_date through end_date


class RulePolarity(str, Enum):
    """Whether a rule opens time or carves it out"""
    OPEN = "open"
    BLOCKED = "blocked"


def day_of_week(day: date) -> int:
    """0=Sunday ... 6=Saturday"""
    return (day.weekday() + 1) % 7


class AvailabilityRule(BaseModel, table=True):
    """
    Availability Rule - One window of open or blocked trainer time

    Domain Rules:
    - end_time must be strictly after start_time (no overnight rules)
    - WEEKLY rules need day_of_week in 0..6 (0 = Sunday)
    - ONCE rules need specific_date; end_date defaults to specific_date and
      must not precede it (multi-day blocks)
    - BLOCKED rules are subtracted from the union of OPEN rules
    """

    __tablename__ = "availability_rules"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="rule_window_positive"),
        Index("ix_availability_rules_trainer_kind", "trainer_id", "kind"),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique rule identifier"
    )

    trainer_id: str = Field(
        index=True,
        description="Trainer who owns this rule"
    )

    kind: RuleKind = Field(
        description="Recurrence kind (weekly, once)"
    )

    polarity: RulePolarity = Field(
        description="Open or blocked time"
    )

    day_of_week: Optional[int] = Field(
        default=None,
        description="0=Sunday ... 6=Saturday (weekly rules)"
    )

    start_time: time = Field(description="Window start (time of day)")

    end_time: time = Field(description="Window end (time of day, exclusive)")

    specific_date: Optional[date] = Field(
        default=None,
        description="First date covered (one-off rules)"
    )

    end_date: Optional[date] = Field(
        default=None,
        description="Last date covered (one-off rules, defaults to specific_date)"
    )

    reason: Optional[str] = Field(
        default=None,
        description="Why the time is blocked (personal, admin, break, other)"
    )

    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, sa_column=naive_utc_column(nullable=False))

    def check(self) -> None:
        """Raise InvalidAvailabilityRule if the rule cannot be resolved."""
        if self.end_time <= self.start_time:
            raise InvalidAvailabilityRule(
                f"Rule {self.id} ends at {self.end_time} which is not after {self.start_time}",
                reason="end_time must be after start_time",
            )
        if self.kind == RuleKind.WEEKLY:
            if self.day_of_week is None or not 0 <= self.day_of_week <= 6:
                raise InvalidAvailabilityRule(
                    f"Weekly rule {self.id} has invalid day_of_week {self.day_of_week}",
                    reason="day_of_week must be 0..6",
                )
        else:
            if self.specific_date is None:
                raise InvalidAvailabilityRule(
                    f"One-off rule {self.id} has no specific_date",
                    reason="specific_date is required for one-off rules",
                )
            if self.end_date is not None and self.end_date < self.specific_date:
                raise InvalidAvailabilityRule(
                    f"One-off rule {self.id} ends before it starts",
                    reason="end_date must not precede specific_date",
                )

    def applies_on(self, day: date) -> bool:
        if self.kind == RuleKind.WEEKLY:
            return self.day_of_week == day_of_week(day)
        last_day = self.end_date or self.specific_date
        return self.specific_date <= day <= last_day
