"""Tests for the seat capacity ledger."""

from uuid import uuid4

import pytest

from src.errors import CapacityExceededError, NotFoundError
from src.guests.dtos import ContactDTO, GroupAllocation, IndividualAllocation
from src.guests.features.manage_guests.write_model import SqlGuestWriteModel
from src.invitations.capacity import SeatLedger, load_seat_ledger, remaining_seats
from src.invitations.features.manage_invitation.write_model import SqlInvitationWriteModel
from src.invitations.tests.factories import invitation_fields


def make_ledger(capacity: int, reserved: int, confirmed: int = 0) -> SeatLedger:
    return SeatLedger(
        invitation_id=uuid4(),
        capacity=capacity,
        reserved_seats=reserved,
        confirmed_seats=confirmed,
    )


def test_remaining_seats_never_negative():
    assert remaining_seats(10, 4) == 6
    assert remaining_seats(5, 5) == 0
    assert remaining_seats(3, 7) == 0


def test_zero_capacity_rejects_everything():
    ledger = make_ledger(capacity=0, reserved=0)

    assert ledger.remaining == 0
    assert not ledger.can_reserve(1)


def test_group_filling_last_seats_is_accepted():
    """10 seats, 8 reserved: a group of 2 fits exactly."""
    ledger = make_ledger(capacity=10, reserved=8)

    assert ledger.can_reserve(2)
    ledger.ensure_can_reserve(2)


def test_group_over_remaining_is_rejected_with_count():
    """10 seats, 8 reserved: a group of 3 is refused and told 2 remain."""
    ledger = make_ledger(capacity=10, reserved=8)

    with pytest.raises(CapacityExceededError) as exc_info:
        ledger.ensure_can_reserve(3)

    assert exc_info.value.remaining == 2
    assert exc_info.value.field == "seats_reserved"
    assert "Only 2 seat(s) remaining" in exc_info.value.message
    assert exc_info.value.to_detail()["remaining_seats"] == 2


def test_plus_one_needs_two_seats():
    """10 seats, 9 reserved: an individual with a plus-one does not fit."""
    ledger = make_ledger(capacity=10, reserved=9)

    assert ledger.can_reserve(1)
    with pytest.raises(CapacityExceededError) as exc_info:
        ledger.ensure_can_reserve(2, field="allow_plus_one")

    assert exc_info.value.remaining == 1
    assert exc_info.value.to_detail()["errors"] == {"allow_plus_one": exc_info.value.message}


def test_update_excludes_the_guest_own_seats():
    """A full invitation still lets a guest keep or shrink its own reservation."""
    ledger = make_ledger(capacity=10, reserved=10)

    assert ledger.available_for(excluding_seats=4) == 4
    assert ledger.can_reserve(4, excluding_seats=4)
    assert ledger.can_reserve(3, excluding_seats=4)
    assert not ledger.can_reserve(5, excluding_seats=4)


def test_over_allocated_history_reports_zero_remaining():
    ledger = make_ledger(capacity=4, reserved=6)

    assert ledger.remaining == 0
    with pytest.raises(CapacityExceededError) as exc_info:
        ledger.ensure_can_reserve(1)
    assert exc_info.value.remaining == 0


async def test_load_seat_ledger_sums_live_guests(db_session, template):
    invitation = await SqlInvitationWriteModel(session_overwrite=db_session).create_invitation(
        invitation_fields(template.uuid, capacity=10)
    )
    guests = SqlGuestWriteModel(session_overwrite=db_session)
    await guests.create_guest(
        invitation.id, GroupAllocation(seats_reserved=4), ContactDTO(display_name="The Smiths")
    )
    single = await guests.create_guest(
        invitation.id,
        IndividualAllocation(allow_plus_one=True),
        ContactDTO(display_name="Ana"),
    )

    ledger = await load_seat_ledger(db_session, invitation.id)
    assert ledger.capacity == 10
    assert ledger.reserved_seats == 6
    assert ledger.confirmed_seats == 0
    assert ledger.remaining == 4

    await guests.delete_guest(single.id)
    ledger = await load_seat_ledger(db_session, invitation.id, for_update=True)
    assert ledger.reserved_seats == 4
    assert ledger.remaining == 6


async def test_load_seat_ledger_unknown_invitation(db_session):
    with pytest.raises(NotFoundError):
        await load_seat_ledger(db_session, uuid4())
