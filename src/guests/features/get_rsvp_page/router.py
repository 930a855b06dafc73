from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.clock import Clock, get_clock
from src.errors import DomainError, LinkUnauthorizedError, NotFoundError, to_http_exception
from src.guests.dtos import GuestKind, GuestStatus
from src.guests.links import LinkBuilder, get_link_builder
from src.guests.repository.read_models import RSVPReadModel, SqlRSVPReadModel
from src.guests.urls import RSVP_URL

router = APIRouter()


class RSVPInvitationResponse(BaseModel):
    slug: str
    event_name: str
    host_name: str
    venue_name: str
    venue_address: str | None = None
    event_date: date | None = None
    event_time: str | None = None
    rsvp_deadline_at: date | None = None


class RSVPGuestResponse(BaseModel):
    """Guest fields for the RSVP form - the public token is never exposed here."""

    id: UUID
    type: GuestKind
    display_name: str
    seats_reserved: int
    seats_confirmed: int
    status: GuestStatus
    allow_plus_one: bool
    member_names: list[str] = []


class RSVPPageResponse(BaseModel):
    invitation: RSVPInvitationResponse
    guest: RSVPGuestResponse
    is_closed: bool


def get_rsvp_read_model() -> RSVPReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRSVPReadModel()


def verify_rsvp_link(
    guest_id: str,
    expires: int | None,
    signature: str | None,
    link_builder: LinkBuilder,
    clock: Clock,
) -> UUID:
    """Check the signed link before anything else; returns the parsed guest id."""
    try:
        guest_uuid = UUID(guest_id)
    except ValueError:
        raise to_http_exception(LinkUnauthorizedError())
    try:
        link_builder.verify(guest_uuid, expires, signature, clock())
    except DomainError as e:
        raise to_http_exception(e)
    return guest_uuid


@router.get(RSVP_URL, response_model=RSVPPageResponse)
async def get_rsvp_page(
    guest_id: str,
    expires: int | None = None,
    signature: str | None = None,
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
    link_builder: LinkBuilder = Depends(get_link_builder),
    clock: Clock = Depends(get_clock),
) -> RSVPPageResponse:
    """
    Get RSVP page information through a signed link.
    Still answers after the deadline, with is_closed=true, so the guest can see their response.
    """
    guest_uuid = verify_rsvp_link(guest_id, expires, signature, link_builder, clock)

    rsvp_info = await read_model.get_rsvp_info(guest_uuid, clock())
    if not rsvp_info:
        raise to_http_exception(NotFoundError())

    guest = rsvp_info.guest
    invitation = rsvp_info.invitation
    return RSVPPageResponse(
        invitation=RSVPInvitationResponse(
            slug=invitation.slug,
            event_name=invitation.event_name,
            host_name=invitation.host_name,
            venue_name=invitation.venue_name,
            venue_address=invitation.venue_address,
            event_date=invitation.event_date,
            event_time=invitation.event_time,
            rsvp_deadline_at=invitation.rsvp_deadline_at,
        ),
        guest=RSVPGuestResponse(
            id=guest.id,
            type=guest.kind,
            display_name=guest.display_name,
            seats_reserved=guest.seats_reserved,
            seats_confirmed=guest.seats_confirmed,
            status=guest.status,
            allow_plus_one=guest.allow_plus_one,
            member_names=guest.member_names,
        ),
        is_closed=rsvp_info.is_closed,
    )
