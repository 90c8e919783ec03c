"""Data Transfer Objects for Availability Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime, time
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator
from src.domain.availability_rule import AvailabilityRule, RuleKind, RulePolarity


class CreateAvailabilityRuleCommandDTO(BaseModel):
    """
    Command DTO for creating an availability rule

    Weekly rules need day_of_week (0 = Sunday); one-off rules need
    specific_date and may span several days via end_date.
    """

    trainer_id: str = Field(..., description="Trainer who owns the rule")

    kind: RuleKind = Field(..., description="weekly or once")

    polarity: RulePolarity = Field(default=RulePolarity.OPEN, description="open or blocked")

    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)

    start_time: time

    end_time: time

    specific_date: Optional[date] = None

    end_date: Optional[date] = None

    reason: Optional[str] = Field(default=None, max_length=100)

    notes: Optional[str] = None

    @model_validator(mode="after")
    def validate_shape(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        if self.kind == RuleKind.WEEKLY and self.day_of_week is None:
            raise ValueError("day_of_week is required for weekly rules")
        if self.kind == RuleKind.ONCE and self.specific_date is None:
            raise ValueError("specific_date is required for one-off rules")
        if self.end_date is not None and self.specific_date is not None and self.end_date < self.specific_date:
            raise ValueError("end_date must not precede specific_date")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "trainer_id": "trainer_456",
                "kind": "weekly",
                "polarity": "open",
                "day_of_week": 1,
                "start_time": "09:00",
                "end_time": "17:00",
            }
        }


class AvailabilityRuleDTO(BaseModel):
    rule_id: str
    trainer_id: str
    kind: str
    polarity: str
    day_of_week: Optional[int] = None
    start_time: time
    end_time: time
    specific_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_rule(cls, rule: AvailabilityRule) -> "AvailabilityRuleDTO":
        return cls(
            rule_id=rule.id,
            trainer_id=rule.trainer_id,
            kind=rule.kind.value,
            polarity=rule.polarity.value,
            day_of_week=rule.day_of_week,
            start_time=rule.start_time,
            end_time=rule.end_time,
            specific_date=rule.specific_date,
            end_date=rule.end_date,
            reason=rule.reason,
            notes=rule.notes,
            created_at=rule.created_at,
        )


class ListAvailabilityRulesResponseDTO(BaseModel):
    trainer_id: str
    rules: List[AvailabilityRuleDTO]


class GetAvailabilityQueryDTO(BaseModel):
    """Query DTO for GetAvailability"""

    trainer_id: str
    service_id: str
    start_date: date
    end_date: date
    stride_minutes: Optional[int] = Field(default=None, gt=0, le=240)


class WindowDTO(BaseModel):
    start: datetime
    end: datetime


class AvailabilityResponseDTO(BaseModel):
    """
    Response DTO for GetAvailability

    windows are the resolved open windows long enough for the service;
    slots are stride-aligned start times that fit a window and do not
    collide with an active booking.
    """

    trainer_id: str
    service_id: str
    duration_minutes: int
    start_date: date
    end_date: date
    windows: List[WindowDTO]
    slots: List[datetime]
