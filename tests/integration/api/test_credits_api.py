"""Integration tests for Credits API endpoints"""

import pytest
from datetime import timedelta
from httpx import AsyncClient

from src.domain.base import utc_now


class TestCreditsAPIIntegration:
    """Integration test suite for Credits API endpoints"""

    @pytest.mark.asyncio
    async def test_issue_package_and_summary(self, client: AsyncClient):
        """POST /credits/packages then GET summary reflects both packages"""
        # Arrange
        soon = (utc_now() + timedelta(days=3)).replace(microsecond=0)

        # Act
        first = await client.post(
            "/credits/packages",
            json={"client_id": "client_c1", "credits": 2, "name": "Taster", "expires_at": soon.isoformat()},
        )
        second = await client.post("/credits/packages", json={"client_id": "client_c1", "credits": 5})
        summary = await client.get("/credits/client_c1/summary")

        # Assert
        assert first.status_code == 201
        assert first.json()["status"] == "active"
        assert first.json()["credits_remaining"] == 2
        assert second.status_code == 201
        data = summary.json()
        assert data["total_remaining"] == 7
        assert data["credit_level"] == "good"
        assert data["nearest_expiry"].startswith(soon.isoformat())
        assert len(data["packages"]) == 2

    @pytest.mark.asyncio
    async def test_summary_for_unknown_client_is_empty(self, client: AsyncClient):
        response = await client.get("/credits/nobody/summary")

        assert response.status_code == 200
        assert response.json()["total_remaining"] == 0
        assert response.json()["credit_level"] == "none"
        assert response.json()["nearest_expiry"] is None

    @pytest.mark.asyncio
    async def test_issue_package_validation_error(self, client: AsyncClient):
        response = await client.post("/credits/packages", json={"client_id": "client_c1", "credits": 0})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_grant_and_deduct(self, client: AsyncClient):
        package_id = (
            await client.post("/credits/packages", json={"client_id": "client_c2", "credits": 3})
        ).json()["package_id"]

        granted = await client.post(
            "/credits/adjustments",
            json={"package_id": package_id, "kind": "grant", "credits": 2, "notes": "Referral bonus"},
        )
        deducted = await client.post(
            "/credits/adjustments",
            json={"package_id": package_id, "kind": "deduction", "credits": 4},
        )

        assert granted.status_code == 200
        assert granted.json()["package"]["credits_total"] == 5
        assert granted.json()["entry"]["reason"] == "manual_grant"
        assert granted.json()["entry"]["notes"] == "Referral bonus"
        assert deducted.status_code == 200
        assert deducted.json()["entry"]["delta"] == -4
        assert deducted.json()["entry"]["balance_after"] == 1
        assert deducted.json()["package"]["credits_remaining"] == 1

    @pytest.mark.asyncio
    async def test_deduction_beyond_balance_returns_402(self, client: AsyncClient):
        package_id = (
            await client.post("/credits/packages", json={"client_id": "client_c3", "credits": 2})
        ).json()["package_id"]

        response = await client.post(
            "/credits/adjustments",
            json={"package_id": package_id, "kind": "deduction", "credits": 5},
        )

        assert response.status_code == 402
        assert response.json()["error"]["code"] == "INSUFFICIENT_CREDITS"

    @pytest.mark.asyncio
    async def test_adjust_unknown_package_returns_404(self, client: AsyncClient):
        response = await client.post(
            "/credits/adjustments",
            json={"package_id": "pkg_missing", "kind": "grant", "credits": 1},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PACKAGE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_ledger_history_paginated(self, client: AsyncClient):
        package_id = (
            await client.post("/credits/packages", json={"client_id": "client_c4", "credits": 10})
        ).json()["package_id"]
        for credits in (1, 2, 3):
            await client.post(
                "/credits/adjustments",
                json={"package_id": package_id, "kind": "deduction", "credits": credits},
            )

        page = await client.get("/credits/client_c4/ledger", params={"limit": 2, "offset": 0})

        assert page.status_code == 200
        data = page.json()
        assert data["total"] == 3
        assert data["limit"] == 2
        assert len(data["entries"]) == 2

    @pytest.mark.asyncio
    async def test_ledger_limit_validation(self, client: AsyncClient):
        response = await client.get("/credits/client_c4/ledger", params={"limit": 0})

        assert response.status_code == 422
