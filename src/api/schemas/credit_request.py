"""Request schemas for Credits API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from src.app.use_cases.credits.dtos import AdjustmentKind


class IssuePackageRequestSchema(BaseModel):
    """
    Request schema for issuing a credit package

    Used for POST /credits/packages endpoint.
    """

    client_id: str = Field(
        ...,
        min_length=1,
        description="Client identifier (required, non-empty)"
    )

    credits: int = Field(
        ...,
        gt=0,
        description="Credits in the bundle (must be > 0)"
    )

    name: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Bundle name"
    )

    expires_at: Optional[datetime] = Field(
        default=None,
        description="Expiry timestamp; omit for credits that never expire"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "client_123",
                "credits": 10,
                "name": "10 x PT 60",
                "expires_at": "2024-04-01T00:00:00Z",
            }
        }


class AdjustCreditsRequestSchema(BaseModel):
    """
    Request schema for a manual adjustment

    Used for POST /credits/adjustments endpoint.
    """

    package_id: str = Field(
        ...,
        min_length=1,
        description="Package to adjust"
    )

    kind: AdjustmentKind = Field(
        ...,
        description="grant or deduction"
    )

    credits: int = Field(
        ...,
        gt=0,
        description="Credits to add or remove (must be > 0)"
    )

    notes: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Reason for the adjustment"
    )
