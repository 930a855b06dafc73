"""Tests for SqlRSVPReadModel."""

from datetime import UTC, date, datetime
from uuid import uuid4

from src.guests.dtos import ContactDTO, GroupAllocation, GuestKind
from src.guests.features.manage_guests.write_model import SqlGuestWriteModel
from src.guests.repository.read_models import SqlRSVPReadModel
from src.invitations.features.manage_invitation.write_model import SqlInvitationWriteModel
from src.invitations.tests.factories import invitation_fields


async def test_get_rsvp_info(db_session, template):
    invitation = await SqlInvitationWriteModel(session_overwrite=db_session).create_invitation(
        invitation_fields(template.uuid, rsvp_deadline_at=date(2026, 5, 10))
    )
    guest = await SqlGuestWriteModel(session_overwrite=db_session).create_guest(
        invitation.id, GroupAllocation(seats_reserved=3), ContactDTO(display_name="Group")
    )
    read_model = SqlRSVPReadModel(session_overwrite=db_session, timezone="UTC")

    info = await read_model.get_rsvp_info(guest.id, datetime(2026, 5, 1, tzinfo=UTC))

    assert info.invitation.slug == invitation.slug
    assert info.invitation.event_name == "Graduation Party"
    assert info.invitation.event_time == "19:30"
    assert info.invitation.rsvp_deadline_at == date(2026, 5, 10)
    assert info.guest.kind == GuestKind.GROUP
    assert info.guest.seats_reserved == 3
    assert info.is_closed is False

    closed = await read_model.get_rsvp_info(guest.id, datetime(2026, 5, 11, 1, tzinfo=UTC))
    assert closed.is_closed is True


async def test_get_rsvp_info_unknown_guest(db_session):
    read_model = SqlRSVPReadModel(session_overwrite=db_session)

    assert await read_model.get_rsvp_info(uuid4(), datetime.now(UTC)) is None
