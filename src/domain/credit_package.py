"""Credit Package Domain Entity

A block of session credits a client acquired, optionally expiring.
Status is never stored: it is derived from (remaining, expires_at, now).
"""

from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Tuple
from sqlmodel import Field, Index
from sqlalchemy import CheckConstraint
from src.domain.base import BaseModel, generate_uuid, naive_utc_column, utc_now


class PackageStatus(str, Enum):
    """Derived package status"""
    ACTIVE = "active"
    EXHAUSTED = "exhausted"
    EXPIRED = "expired"


def package_status(remaining: int, expires_at: Optional[datetime], now: datetime) -> PackageStatus:
    if remaining == 0:
        return PackageStatus.EXHAUSTED
    if expires_at is not None and expires_at <= now:
        return PackageStatus.EXPIRED
    return PackageStatus.ACTIVE


class CreditPackage(BaseModel, table=True):
    """
    Credit Package - Client credit balance from one purchased bundle

    Domain Rules:
    - 0 <= credits_used <= credits_total
    - remaining = credits_total - credits_used
    - expires_at None means the credits never expire
    - Mutated only by the credit ledger; never deleted
    """

    __tablename__ = "credit_packages"
    __table_args__ = (
        CheckConstraint("credits_used >= 0", name="package_used_non_negative"),
        CheckConstraint("credits_used <= credits_total", name="package_used_within_total"),
        Index("ix_credit_packages_client_expiry", "client_id", "expires_at"),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    client_id: str = Field(index=True, description="Owning client")

    name: Optional[str] = Field(default=None, description="Bundle name at purchase time")

    credits_total: int = Field(description="Credits granted")

    credits_used: int = Field(default=0, description="Credits consumed")

    expires_at: Optional[datetime] = Field(
        default=None,
        sa_column=naive_utc_column(nullable=True),
        description="Expiry timestamp (None = never expires)"
    )

    created_at: datetime = Field(default_factory=utc_now, sa_column=naive_utc_column(nullable=False))

    updated_at: datetime = Field(default_factory=utc_now, sa_column=naive_utc_column(nullable=False))

    @property
    def remaining(self) -> int:
        return self.credits_total - self.credits_used

    def status_at(self, now: datetime) -> PackageStatus:
        return package_status(self.remaining, self.expires_at, now)

    def is_usable(self, now: datetime) -> bool:
        return self.status_at(now) == PackageStatus.ACTIVE


class CreditLevel(str, Enum):
    """Coarse balance indicator shown to clients"""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    GOOD = "good"


def credit_level(total_remaining: int) -> CreditLevel:
    if total_remaining <= 0:
        return CreditLevel.NONE
    if total_remaining <= 2:
        return CreditLevel.LOW
    if total_remaining <= 5:
        return CreditLevel.MEDIUM
    return CreditLevel.GOOD


def summarize(
    packages: Iterable[CreditPackage], now: datetime
) -> Tuple[int, Optional[datetime], CreditLevel]:
    """(total_remaining, nearest_expiry, credit_level) over usable packages."""
    usable = [p for p in packages if p.is_usable(now)]
    total = sum(p.remaining for p in usable)
    expiries = [p.expires_at for p in usable if p.expires_at is not None]
    return total, min(expiries) if expiries else None, credit_level(total)
