"""Studio Policy Value Objects

Operating hours, cancellation window and hold length supplied by the studio
configuration (an external collaborator).
"""

from datetime import time
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator


def parse_hhmm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


class HoursSlot(BaseModel):
    """One opening period within a day, "HH:MM" strings"""

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_hhmm(cls, v):
        parse_hhmm(v)
        return v

    @model_validator(mode="after")
    def validate_order(self):
        if parse_hhmm(self.end) <= parse_hhmm(self.start):
            raise ValueError(f"Opening slot {self.start}-{self.end} must end after it starts")
        return self

    @property
    def start_time(self) -> time:
        return parse_hhmm(self.start)

    @property
    def end_time(self) -> time:
        return parse_hhmm(self.end)


class DayHours(BaseModel):
    enabled: bool = True
    slots: List[HoursSlot] = Field(default_factory=list)


class StudioPolicy(BaseModel):
    """
    Booking policy for the studio a trainer works in

    opening_hours is keyed by day of week as a string, "0" (Sunday) to
    "6" (Saturday). An empty mapping means hours are not configured and
    nothing is clipped.
    """

    opening_hours: Dict[str, DayHours] = Field(default_factory=dict)

    cancellation_window_hours: int = Field(default=24, ge=0)

    hold_minutes: Optional[int] = Field(
        default=15,
        gt=0,
        description="Provisional hold length; None disables holds"
    )

    @field_validator("opening_hours")
    @classmethod
    def validate_days(cls, v):
        for key in v:
            if key not in {"0", "1", "2", "3", "4", "5", "6"}:
                raise ValueError(f"Unknown opening_hours day '{key}' (expected 0-6)")
        return v

    @property
    def hours_configured(self) -> bool:
        return bool(self.opening_hours)

    def day_hours(self, dow: int) -> Optional[DayHours]:
        return self.opening_hours.get(str(dow))
