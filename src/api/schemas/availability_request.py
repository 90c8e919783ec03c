"""Request schemas for Availability API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date, time
from typing import Optional
from pydantic import BaseModel, Field, model_validator
from src.domain.availability_rule import RuleKind, RulePolarity


class CreateAvailabilityRuleRequestSchema(BaseModel):
    """
    Request schema for adding an availability rule

    Used for POST /availability/rules endpoint. Weekly rules use
    day_of_week 0 (Sunday) to 6 (Saturday).
    """

    trainer_id: str = Field(
        ...,
        min_length=1,
        description="Trainer identifier (required, non-empty)"
    )

    kind: RuleKind = Field(..., description="weekly or once")

    polarity: RulePolarity = Field(default=RulePolarity.OPEN, description="open or blocked")

    day_of_week: Optional[int] = Field(
        default=None,
        ge=0,
        le=6,
        description="0=Sunday ... 6=Saturday (weekly rules)"
    )

    start_time: time = Field(..., description="Window start, HH:MM")

    end_time: time = Field(..., description="Window end, HH:MM (exclusive)")

    specific_date: Optional[date] = Field(default=None, description="First date (one-off rules)")

    end_date: Optional[date] = Field(default=None, description="Last date (multi-day one-off rules)")

    reason: Optional[str] = Field(default=None, max_length=100)

    notes: Optional[str] = Field(default=None)

    @model_validator(mode="after")
    def validate_window(self):
        """Ensure the window is not empty or inverted"""
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "trainer_id": "trainer_456",
                "kind": "once",
                "polarity": "blocked",
                "start_time": "12:00",
                "end_time": "13:00",
                "specific_date": "2024-01-08",
                "reason": "break",
            }
        }
