"""Data Transfer Objects for Credit Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.credit_package import CreditPackage
from src.domain.ledger_entry import LedgerEntry
from src.app.use_cases.booking.dtos import to_naive_utc


class IssuePackageCommandDTO(BaseModel):
    """
    Command DTO for issuing a credit package

    Used as input to IssueCreditPackage use case when a client acquires a
    bundle of session credits.
    """

    client_id: str = Field(
        ...,
        description="Client receiving the credits"
    )

    credits: int = Field(
        ...,
        gt=0,
        description="Number of session credits in the bundle (must be > 0)"
    )

    name: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Bundle name, e.g. '10 x PT 60'"
    )

    expires_at: Optional[datetime] = Field(
        default=None,
        description="Expiry timestamp; omitted means the credits never expire"
    )

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, v):
        return to_naive_utc(v) if v is not None else v

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "client_123",
                "credits": 10,
                "name": "10 x PT 60",
                "expires_at": "2024-04-01T00:00:00Z",
            }
        }


class AdjustmentKind(str, Enum):
    GRANT = "grant"
    DEDUCTION = "deduction"


class AdjustCreditsCommandDTO(BaseModel):
    """
    Command DTO for a manual credit adjustment

    Used as input to AdjustCredits use case.
    """

    package_id: str = Field(
        ...,
        description="Package to adjust"
    )

    kind: AdjustmentKind = Field(
        ...,
        description="grant adds credits, deduction removes them"
    )

    credits: int = Field(
        ...,
        gt=0,
        description="Credits to add or remove (must be > 0)"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Why the adjustment was made (kept on the ledger entry)"
    )


class CreditPackageDTO(BaseModel):
    """One package with its derived status"""

    package_id: str
    name: Optional[str] = None
    credits_total: int
    credits_used: int
    credits_remaining: int
    expires_at: Optional[datetime] = None
    status: str
    created_at: datetime

    @classmethod
    def from_package(cls, package: CreditPackage, now: datetime) -> "CreditPackageDTO":
        return cls(
            package_id=package.id,
            name=package.name,
            credits_total=package.credits_total,
            credits_used=package.credits_used,
            credits_remaining=package.remaining,
            expires_at=package.expires_at,
            status=package.status_at(now).value,
            created_at=package.created_at,
        )


class LedgerEntryDTO(BaseModel):
    """One ledger movement"""

    entry_id: str
    package_id: str
    booking_id: Optional[str] = None
    delta: int
    balance_after: int
    reason: str
    reverses_entry_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> "LedgerEntryDTO":
        return cls(
            entry_id=entry.id,
            package_id=entry.package_id,
            booking_id=entry.booking_id,
            delta=entry.delta,
            balance_after=entry.balance_after,
            reason=entry.reason.value,
            reverses_entry_id=entry.reverses_entry_id,
            notes=entry.notes,
            created_at=entry.created_at,
        )


class CreditSummaryDTO(BaseModel):
    """
    Response DTO for GetCreditSummary

    total_remaining and nearest_expiry only count active packages;
    packages lists every package the client owns.
    """

    client_id: str
    total_remaining: int
    nearest_expiry: Optional[datetime] = None
    credit_level: str
    packages: List[CreditPackageDTO]

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "client_123",
                "total_remaining": 7,
                "nearest_expiry": "2024-01-04T00:00:00",
                "credit_level": "good",
                "packages": [],
            }
        }


class AdjustCreditsResponseDTO(BaseModel):
    """Response DTO for AdjustCredits"""

    package: CreditPackageDTO
    entry: LedgerEntryDTO


class ListLedgerEntriesResponseDTO(BaseModel):
    """Paginated ledger history, newest first"""

    entries: List[LedgerEntryDTO]
    total: int
    limit: int
    offset: int
