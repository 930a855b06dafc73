from datetime import date, time
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.access import Viewer, get_viewer
from src.clock import Clock, get_clock
from src.errors import NotFoundError, to_http_exception
from src.guests.dtos import GuestStatus
from src.guests.links import get_link_builder
from src.invitations.repository.read_models import InvitationReadModel, SqlInvitationReadModel
from src.invitations.urls import PUBLIC_INVITATION_URL

router = APIRouter()


class PublicGuestResponse(BaseModel):
    guest_id: UUID
    type: str
    display_name: str
    seats_reserved: int
    seats_confirmed: int
    status: GuestStatus
    rsvp_url: str


class PublicInvitationResponse(BaseModel):
    slug: str
    template_key: str
    event_name: str
    host_name: str
    venue_name: str
    venue_address: str | None = None
    event_date: date
    event_time: time
    gift_type: str | None = None
    dress_code: str | None = None
    complementary_text_1: str | None = None
    complementary_text_2: str | None = None
    complementary_text_3: str | None = None
    rsvp_deadline_at: date | None = None
    settings: dict = {}
    guest: PublicGuestResponse | None = None


def get_public_invitation_read_model() -> InvitationReadModel:
    """Dependency to get invitation read model instance."""
    return SqlInvitationReadModel(link_builder=get_link_builder())


@router.get(PUBLIC_INVITATION_URL, response_model=PublicInvitationResponse)
async def get_public_invitation(
    slug: str,
    g: str | None = None,
    s: str | None = None,
    viewer: Viewer = Depends(get_viewer),
    read_model: InvitationReadModel = Depends(get_public_invitation_read_model),
    clock: Clock = Depends(get_clock),
) -> PublicInvitationResponse:
    """
    Public invitation data for the template renderer.
    Drafts answer 404 unless an admin is looking. A valid guest id (g) and
    secret token (s) add that guest's own status and a signed RSVP link.
    """
    invitation = await read_model.get_public_invitation(
        slug,
        viewer=viewer,
        now=clock(),
        guest_id=g,
        public_token=s,
    )
    if invitation is None:
        raise to_http_exception(NotFoundError())

    guest = invitation.guest
    return PublicInvitationResponse(
        slug=invitation.slug,
        template_key=invitation.template_key,
        event_name=invitation.event_name,
        host_name=invitation.host_name,
        venue_name=invitation.venue_name,
        venue_address=invitation.venue_address,
        event_date=invitation.event_date,
        event_time=invitation.event_time,
        gift_type=invitation.gift_type,
        dress_code=invitation.dress_code,
        complementary_text_1=invitation.complementary_text_1,
        complementary_text_2=invitation.complementary_text_2,
        complementary_text_3=invitation.complementary_text_3,
        rsvp_deadline_at=invitation.rsvp_deadline_at,
        settings=invitation.settings,
        guest=(
            PublicGuestResponse(
                guest_id=guest.guest_id,
                type=guest.kind,
                display_name=guest.display_name,
                seats_reserved=guest.seats_reserved,
                seats_confirmed=guest.seats_confirmed,
                status=guest.status,
                rsvp_url=guest.rsvp_url,
            )
            if guest
            else None
        ),
    )
