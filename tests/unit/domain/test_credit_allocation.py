"""Unit tests for FIFO credit allocation and package status"""

import pytest
from datetime import datetime, timedelta

from src.domain.credit_allocation import fifo_order_key, plan_allocation
from src.domain.credit_package import (
    CreditLevel,
    CreditPackage,
    PackageStatus,
    credit_level,
    package_status,
    summarize,
)
from src.domain.errors import InsufficientCredits

NOW = datetime(2024, 1, 1, 9, 0)


def package(package_id, total, used=0, expires_in_days=None, created_offset=0):
    return CreditPackage(
        id=package_id,
        client_id="client_1",
        credits_total=total,
        credits_used=used,
        expires_at=NOW + timedelta(days=expires_in_days) if expires_in_days is not None else None,
        created_at=NOW - timedelta(days=30) + timedelta(minutes=created_offset),
        updated_at=NOW,
    )


class TestPackageStatus:
    def test_exhausted_takes_precedence_over_expired(self):
        assert package_status(0, NOW - timedelta(days=1), NOW) == PackageStatus.EXHAUSTED

    def test_expired_when_expiry_passed(self):
        assert package_status(3, NOW, NOW) == PackageStatus.EXPIRED

    def test_never_expiring_package_is_active(self):
        assert package_status(3, None, NOW) == PackageStatus.ACTIVE


class TestPlanAllocation:
    def test_soonest_expiry_is_drained_first(self):
        """
        Given: 2 credits expiring in 3 days, 5 credits expiring in 30 days
        When: Planning 3 credits
        Then: 2 from the first package, 1 from the second
        """
        soon = package("soon", 2, expires_in_days=3)
        later = package("later", 5, expires_in_days=30)

        plan = plan_allocation([later, soon], 3, NOW)

        assert [(p.id, n) for p, n in plan] == [("soon", 2), ("later", 1)]

    def test_never_expiring_packages_go_last(self):
        forever = package("forever", 10)
        dated = package("dated", 10, expires_in_days=60)

        plan = plan_allocation([forever, dated], 1, NOW)

        assert [(p.id, n) for p, n in plan] == [("dated", 1)]

    def test_creation_order_breaks_expiry_ties(self):
        first = package("b", 1, expires_in_days=5, created_offset=0)
        second = package("a", 1, expires_in_days=5, created_offset=10)

        assert sorted([second, first], key=fifo_order_key) == [first, second]

    def test_expired_and_exhausted_packages_are_skipped(self):
        expired = package("expired", 5, expires_in_days=-1)
        exhausted = package("exhausted", 3, used=3, expires_in_days=2)
        usable = package("usable", 2, expires_in_days=10)

        plan = plan_allocation([expired, exhausted, usable], 2, NOW)

        assert [(p.id, n) for p, n in plan] == [("usable", 2)]

    def test_short_balance_raises_without_planning(self):
        packages = [package("a", 1, expires_in_days=3), package("b", 1)]

        with pytest.raises(InsufficientCredits) as exc_info:
            plan_allocation(packages, 3, NOW)

        assert exc_info.value.required == 3
        assert exc_info.value.available == 2
        assert all(p.credits_used == 0 for p in packages)

    def test_zero_credits_plans_nothing(self):
        assert plan_allocation([package("a", 1)], 0, NOW) == []


class TestSummary:
    @pytest.mark.parametrize(
        "total,level",
        [(0, CreditLevel.NONE), (1, CreditLevel.LOW), (2, CreditLevel.LOW),
         (5, CreditLevel.MEDIUM), (6, CreditLevel.GOOD)],
    )
    def test_credit_levels(self, total, level):
        assert credit_level(total) == level

    def test_summary_counts_only_usable_packages(self):
        packages = [
            package("soon", 2, expires_in_days=3),
            package("later", 5, used=1, expires_in_days=30),
            package("expired", 4, expires_in_days=-2),
            package("forever", 1),
        ]

        total, nearest, level = summarize(packages, NOW)

        assert total == 7
        assert nearest == NOW + timedelta(days=3)
        assert level == CreditLevel.GOOD
