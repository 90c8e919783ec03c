"""FIFO credit allocation planning

Pure planning step of a reservation: decides how many credits to take from
which package. The credit ledger applies the plan under row locks.
"""

from datetime import datetime
from typing import Iterable, List, Tuple
from src.domain.credit_package import CreditPackage
from src.domain.errors import InsufficientCredits


def fifo_order_key(package: CreditPackage):
    """Soonest expiry first, never-expiring packages last."""
    return (
        package.expires_at is None,
        package.expires_at or datetime.max,
        package.created_at or datetime.min,
        package.id,
    )


def plan_allocation(
    packages: Iterable[CreditPackage], credits_required: int, now: datetime
) -> List[Tuple[CreditPackage, int]]:
    """
    Plan a FIFO deduction of credits_required across the usable packages

    Raises:
        InsufficientCredits: usable remaining credits are short; nothing is planned
    """
    if credits_required < 0:
        raise ValueError("credits_required must be >= 0")

    eligible = sorted((p for p in packages if p.is_usable(now)), key=fifo_order_key)
    available = sum(p.remaining for p in eligible)
    if available < credits_required:
        raise InsufficientCredits(required=credits_required, available=available)

    plan = []
    left = credits_required
    for package in eligible:
        if left == 0:
            break
        take = min(left, package.remaining)
        plan.append((package, take))
        left -= take
    return plan
