"""Unit tests for BookingStateMachine

Tests cover:
- Initial state for paid, free and hold-disabled bookings
- Legal and illegal transitions
- Passive hold expiry
- Completion declaration requirement
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from src.domain.booking import Booking, BookingStatus
from src.domain.booking_state import BookingStateMachine
from src.domain.errors import AlreadyTerminal, InvalidDeclaration, InvalidTransition
from src.domain.service import Service
from src.domain.studio_policy import StudioPolicy

NOW = datetime(2024, 1, 1, 9, 0)


def make_booking(status, hold_expiry=None):
    return Booking(
        id="booking_1",
        trainer_id="trainer_1",
        client_id="client_1",
        service_id="svc_1",
        scheduled_at=datetime(2024, 1, 8, 10, 0),
        duration_minutes=60,
        status=status,
        hold_expiry=hold_expiry,
        credits_charged=1,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def machine():
    return BookingStateMachine()


class TestInitialStatus:
    def test_paid_service_starts_in_hold(self, machine):
        service = Service(id="svc_1", trainer_id="t", name="PT", duration_minutes=60, credits_required=1)

        status, expiry = machine.initial_status(service, StudioPolicy(hold_minutes=15), NOW)

        assert status == BookingStatus.HOLD
        assert expiry == NOW + timedelta(minutes=15)

    def test_free_service_is_confirmed(self, machine):
        service = Service(
            id="svc_free", trainer_id="t", name="Intro", duration_minutes=30,
            credits_required=0, price=Decimal("0"),
        )

        status, expiry = machine.initial_status(service, StudioPolicy(), NOW)

        assert status == BookingStatus.CONFIRMED
        assert expiry is None

    def test_priced_service_without_credits_still_holds(self, machine):
        service = Service(
            id="svc_paid", trainer_id="t", name="Drop-in", duration_minutes=60,
            credits_required=0, price=Decimal("25.00"),
        )

        status, _ = machine.initial_status(service, StudioPolicy(), NOW)

        assert status == BookingStatus.HOLD

    def test_holds_disabled_confirms_directly(self, machine):
        service = Service(id="svc_1", trainer_id="t", name="PT", duration_minutes=60, credits_required=1)

        status, expiry = machine.initial_status(service, StudioPolicy(hold_minutes=None), NOW)

        assert status == BookingStatus.CONFIRMED
        assert expiry is None


class TestTransitions:
    def test_confirm_live_hold_clears_expiry(self, machine):
        booking = make_booking(BookingStatus.HOLD, hold_expiry=NOW + timedelta(minutes=10))

        machine.transition(booking, BookingStatus.CONFIRMED, NOW)

        assert booking.status == BookingStatus.CONFIRMED
        assert booking.hold_expiry is None
        assert booking.updated_at == NOW

    def test_confirm_lapsed_hold_rejected(self, machine):
        booking = make_booking(BookingStatus.HOLD, hold_expiry=NOW - timedelta(seconds=1))

        with pytest.raises(InvalidTransition):
            machine.transition(booking, BookingStatus.CONFIRMED, NOW)

    def test_hold_cannot_be_cancelled(self, machine):
        booking = make_booking(BookingStatus.HOLD, hold_expiry=NOW + timedelta(minutes=10))

        with pytest.raises(InvalidTransition):
            machine.transition(booking, BookingStatus.CANCELLED, NOW)

    def test_confirmed_to_checked_in_to_completed(self, machine):
        booking = make_booking(BookingStatus.CONFIRMED)

        machine.transition(booking, BookingStatus.CHECKED_IN, NOW)
        machine.transition(booking, BookingStatus.COMPLETED, NOW, declaration="Full session done")

        assert booking.status == BookingStatus.COMPLETED
        assert booking.completion_notes == "Full session done"

    def test_walk_in_completion_from_confirmed(self, machine):
        booking = make_booking(BookingStatus.CONFIRMED)

        machine.transition(booking, BookingStatus.COMPLETED, NOW, declaration="Walk-in")

        assert booking.status == BookingStatus.COMPLETED

    @pytest.mark.parametrize("declaration", [None, "", "   "])
    def test_completion_requires_declaration(self, machine, declaration):
        booking = make_booking(BookingStatus.CHECKED_IN)

        with pytest.raises(InvalidDeclaration):
            machine.transition(booking, BookingStatus.COMPLETED, NOW, declaration=declaration)
        assert booking.status == BookingStatus.CHECKED_IN

    @pytest.mark.parametrize(
        "status", [BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.EXPIRED]
    )
    def test_terminal_states_are_final(self, machine, status):
        booking = make_booking(status)

        with pytest.raises(AlreadyTerminal):
            machine.transition(booking, BookingStatus.CONFIRMED, NOW)

    def test_already_terminal_is_an_invalid_transition(self):
        assert issubclass(AlreadyTerminal, InvalidTransition)
        assert AlreadyTerminal.code == "ALREADY_TERMINAL"


class TestPassiveExpiry:
    def test_lapsed_hold_expires(self, machine):
        booking = make_booking(BookingStatus.HOLD, hold_expiry=NOW - timedelta(minutes=1))

        assert machine.expire_if_lapsed(booking, NOW) is True
        assert booking.status == BookingStatus.EXPIRED

    def test_second_observation_is_a_no_op(self, machine):
        booking = make_booking(BookingStatus.HOLD, hold_expiry=NOW - timedelta(minutes=1))
        machine.expire_if_lapsed(booking, NOW)

        assert machine.expire_if_lapsed(booking, NOW + timedelta(minutes=5)) is False
        assert booking.status == BookingStatus.EXPIRED

    def test_hold_at_exact_expiry_is_still_live(self, machine):
        booking = make_booking(BookingStatus.HOLD, hold_expiry=NOW)

        assert machine.expire_if_lapsed(booking, NOW) is False
        assert booking.status == BookingStatus.HOLD

    def test_live_hold_cannot_be_forced_to_expire(self, machine):
        booking = make_booking(BookingStatus.HOLD, hold_expiry=NOW + timedelta(minutes=5))

        with pytest.raises(InvalidTransition):
            machine.transition(booking, BookingStatus.EXPIRED, NOW)
