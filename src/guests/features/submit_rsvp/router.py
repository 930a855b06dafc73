import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.clock import Clock, get_clock
from src.errors import DomainError, to_http_exception
from src.guests.dtos import GuestStatus
from src.guests.features.get_rsvp_page.router import verify_rsvp_link
from src.guests.links import LinkBuilder, get_link_builder
from src.guests.repository.write_models import RSVPWriteModel, SqlRSVPWriteModel
from src.guests.urls import RSVP_URL

logger = logging.getLogger(__name__)

router = APIRouter()


class RSVPResponseSubmit(BaseModel):
    """Individuals send attending (+ plus_one, plus_one_name); groups send seats_confirmed."""

    attending: bool | None = None
    plus_one: bool | None = None
    plus_one_name: str | None = None
    seats_confirmed: int | None = None


class RSVPResponse(BaseModel):
    message: str
    status: GuestStatus
    seats_confirmed: int
    member_names: list[str] = []
    invitation_slug: str


def get_rsvp_write_model() -> RSVPWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRSVPWriteModel()


@router.post(RSVP_URL, response_model=RSVPResponse)
async def submit_rsvp(
    guest_id: str,
    rsvp_data: RSVPResponseSubmit,
    expires: int | None = None,
    signature: str | None = None,
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
    link_builder: LinkBuilder = Depends(get_link_builder),
    clock: Clock = Depends(get_clock),
) -> RSVPResponse:
    """
    Submit RSVP response for a guest through a signed link.
    Can be repeated any number of times until the end of the deadline day.
    """
    guest_uuid = verify_rsvp_link(guest_id, expires, signature, link_builder, clock)

    try:
        response_dto = await write_model.submit_rsvp(
            guest_id=guest_uuid,
            now=clock(),
            attending=rsvp_data.attending,
            plus_one=rsvp_data.plus_one,
            plus_one_name=rsvp_data.plus_one_name,
            seats_confirmed=rsvp_data.seats_confirmed,
        )
    except DomainError as e:
        logger.info("RSVP for guest %s refused: %s", guest_uuid, e)
        raise to_http_exception(e)

    return RSVPResponse(
        message=response_dto.message,
        status=response_dto.status,
        seats_confirmed=response_dto.seats_confirmed,
        member_names=response_dto.member_names,
        invitation_slug=response_dto.invitation_slug,
    )
