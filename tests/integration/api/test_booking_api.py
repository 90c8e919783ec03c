"""Integration tests for Booking API endpoints"""

import pytest
import pytest_asyncio
from datetime import datetime, time, timedelta
from httpx import AsyncClient

from src.domain.availability_rule import AvailabilityRule, RuleKind, RulePolarity
from src.domain.base import utc_now
from src.domain.credit_package import CreditPackage
from src.domain.service import Service

TRAINER = "trainer_api"


def upcoming_monday():
    """A Monday at least a week away, so cancellation windows never bite"""
    today = utc_now().date()
    return today + timedelta(days=(7 - today.weekday()) % 7 + 7)


def at(hh, mm=0):
    return datetime.combine(upcoming_monday(), time(hh, mm))


@pytest_asyncio.fixture
async def trainer_setup(db_session):
    db_session.add(
        Service(id="svc_api_pt", trainer_id=TRAINER, name="PT 60", duration_minutes=60, credits_required=3)
    )
    db_session.add(
        AvailabilityRule(
            trainer_id=TRAINER,
            kind=RuleKind.WEEKLY,
            polarity=RulePolarity.OPEN,
            day_of_week=1,
            start_time=time(9, 0),
            end_time=time(17, 0),
        )
    )
    db_session.add(CreditPackage(id="pkg_api_1", client_id="client_api_1", credits_total=5))
    await db_session.commit()


def booking_payload(client_id="client_api_1", start=None):
    return {
        "client_id": client_id,
        "trainer_id": TRAINER,
        "service_id": "svc_api_pt",
        "start_time": (start or at(10)).isoformat(),
    }


class TestBookingAPIIntegration:
    """Integration test suite for Booking API endpoints"""

    @pytest.mark.asyncio
    async def test_create_booking_success(self, client: AsyncClient, trainer_setup):
        """POST /bookings reserves credits and returns a hold"""
        # Act
        response = await client.post("/bookings", json=booking_payload())

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["state"] == "hold"
        assert data["credits_charged"] == 3
        assert datetime.fromisoformat(data["scheduled_at"]) == at(10)
        assert data["hold_expiry"] is not None

        summary = await client.get("/credits/client_api_1/summary")
        assert summary.json()["total_remaining"] == 2

    @pytest.mark.asyncio
    async def test_overlapping_booking_returns_409(self, client: AsyncClient, trainer_setup, db_session):
        db_session.add(CreditPackage(id="pkg_api_2", client_id="client_api_2", credits_total=5))
        await db_session.commit()
        await client.post("/bookings", json=booking_payload())

        response = await client.post(
            "/bookings", json=booking_payload(client_id="client_api_2", start=at(10, 30))
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "SLOT_CONFLICT"

    @pytest.mark.asyncio
    async def test_insufficient_credits_returns_402(self, client: AsyncClient, trainer_setup):
        response = await client.post("/bookings", json=booking_payload(client_id="client_without_credits"))

        assert response.status_code == 402
        assert response.json()["error"]["code"] == "INSUFFICIENT_CREDITS"

    @pytest.mark.asyncio
    async def test_outside_open_hours_returns_422(self, client: AsyncClient, trainer_setup):
        response = await client.post("/bookings", json=booking_payload(start=at(17, 30)))

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "OUTSIDE_OPERATING_HOURS"

    @pytest.mark.asyncio
    async def test_unknown_service_returns_404(self, client: AsyncClient, trainer_setup):
        payload = booking_payload()
        payload["service_id"] = "svc_missing"

        response = await client.post("/bookings", json=payload)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SERVICE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_create_booking_validation_error(self, client: AsyncClient):
        response = await client.post("/bookings", json={"client_id": "", "trainer_id": TRAINER})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_confirm_then_cancel_refunds(self, client: AsyncClient, trainer_setup):
        """
        Given: A hold for 3 credits
        When: It is confirmed and then cancelled by the client a week ahead
        Then: All 3 credits come back
        """
        # Arrange
        booking_id = (await client.post("/bookings", json=booking_payload())).json()["booking_id"]

        # Act
        confirmed = await client.post(f"/bookings/{booking_id}/confirm")
        cancelled = await client.post(f"/bookings/{booking_id}/cancel", json={"actor_id": "client_api_1"})
        again = await client.post(f"/bookings/{booking_id}/cancel", json={"actor_id": "client_api_1"})

        # Assert
        assert confirmed.status_code == 200
        assert confirmed.json()["state"] == "confirmed"
        assert confirmed.json()["hold_expiry"] is None
        assert cancelled.status_code == 200
        assert cancelled.json() == {"booking_id": booking_id, "state": "cancelled", "credits_refunded": 3}
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "ALREADY_TERMINAL"

        summary = await client.get("/credits/client_api_1/summary")
        assert summary.json()["total_remaining"] == 5

    @pytest.mark.asyncio
    async def test_cancel_by_stranger_returns_404(self, client: AsyncClient, trainer_setup):
        booking_id = (await client.post("/bookings", json=booking_payload())).json()["booking_id"]
        await client.post(f"/bookings/{booking_id}/confirm")

        response = await client.post(f"/bookings/{booking_id}/cancel", json={"actor_id": "someone_else"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "BOOKING_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_cancelling_a_live_hold_is_invalid(self, client: AsyncClient, trainer_setup):
        booking_id = (await client.post("/bookings", json=booking_payload())).json()["booking_id"]

        response = await client.post(f"/bookings/{booking_id}/cancel", json={"actor_id": TRAINER})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_TRANSITION"

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, client: AsyncClient, trainer_setup):
        booking_id = (await client.post("/bookings", json=booking_payload())).json()["booking_id"]

        await client.post(f"/bookings/{booking_id}/confirm")
        checked_in = await client.post(f"/bookings/{booking_id}/check-in")
        completed = await client.post(
            f"/bookings/{booking_id}/complete", json={"declaration": "  Full session, squats and rows  "}
        )
        fetched = await client.get(f"/bookings/{booking_id}")

        assert checked_in.json()["state"] == "checked_in"
        assert completed.status_code == 200
        assert completed.json()["state"] == "completed"
        assert fetched.json()["completion_notes"] == "Full session, squats and rows"

    @pytest.mark.asyncio
    async def test_complete_requires_declaration(self, client: AsyncClient, trainer_setup):
        booking_id = (await client.post("/bookings", json=booking_payload())).json()["booking_id"]
        await client.post(f"/bookings/{booking_id}/confirm")

        response = await client.post(f"/bookings/{booking_id}/complete", json={"declaration": "   "})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_completing_a_hold_is_invalid(self, client: AsyncClient, trainer_setup):
        booking_id = (await client.post("/bookings", json=booking_payload())).json()["booking_id"]

        response = await client.post(f"/bookings/{booking_id}/complete", json={"declaration": "done"})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_TRANSITION"

    @pytest.mark.asyncio
    async def test_get_unknown_booking_returns_404(self, client: AsyncClient):
        response = await client.get("/bookings/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"] == {
            "code": "BOOKING_NOT_FOUND",
            "message": "Booking does-not-exist not found",
        }

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("http://test/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
