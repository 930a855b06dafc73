from datetime import date, datetime, time
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from src.access import require_admin
from src.clock import Clock, get_clock
from src.errors import DomainError, NotFoundError, to_http_exception
from src.guests.features.manage_guests.router import GuestResponse
from src.guests.links import get_link_builder
from src.invitations.dtos import InvitationFieldsDTO, InvitationStatus
from src.invitations.features.manage_invitation.write_model import (
    InvitationWriteModel,
    SqlInvitationWriteModel,
)
from src.invitations.repository.read_models import InvitationReadModel, SqlInvitationReadModel
from src.invitations.urls import (
    INVITATION_URL,
    INVITATIONS_URL,
    PUBLISH_INVITATION_URL,
    TEMPLATES_URL,
    UNPUBLISH_INVITATION_URL,
)

router = APIRouter(dependencies=[Depends(require_admin)])


class InvitationPayload(BaseModel):
    template_id: UUID
    event_name: str = Field(min_length=1, max_length=255)
    host_name: str = Field(min_length=1, max_length=255)
    host_color: str | None = Field(default=None, max_length=20)
    venue_name: str = Field(min_length=1, max_length=255)
    venue_address: str | None = Field(default=None, max_length=255)
    event_date: date
    event_time: time
    capacity: int = Field(ge=0)
    rsvp_deadline_at: date | None = None
    gift_type: str | None = Field(default=None, max_length=255)
    dress_code: str | None = Field(default=None, max_length=255)
    complementary_text_1: str | None = Field(default=None, max_length=255)
    complementary_text_2: str | None = Field(default=None, max_length=255)
    complementary_text_3: str | None = Field(default=None, max_length=255)
    settings: dict = {}

    def to_fields(self) -> InvitationFieldsDTO:
        return InvitationFieldsDTO(**self.model_dump())


class TemplateResponse(BaseModel):
    id: UUID
    key: str
    name: str
    description: str | None = None
    preview_image_url: str | None = None


class InvitationSummaryResponse(BaseModel):
    id: UUID
    slug: str
    template_name: str
    event_name: str
    host_name: str
    event_date: date
    status: InvitationStatus
    created_at: datetime


class InvitationResponse(BaseModel):
    id: UUID
    slug: str
    template_id: UUID
    template_key: str
    event_name: str
    host_name: str
    host_color: str | None = None
    venue_name: str
    venue_address: str | None = None
    event_date: date
    event_time: time
    capacity: int
    rsvp_deadline_at: date | None = None
    status: InvitationStatus
    published_at: datetime | None = None
    gift_type: str | None = None
    dress_code: str | None = None
    complementary_text_1: str | None = None
    complementary_text_2: str | None = None
    complementary_text_3: str | None = None
    settings: dict = {}


class GuestLinksResponse(BaseModel):
    preview_url: str
    rsvp_url: str
    whatsapp_url: str


class AdminGuestResponse(GuestResponse):
    links: GuestLinksResponse


class SeatStatsResponse(BaseModel):
    capacity: int
    reserved_seats: int
    confirmed_seats: int
    remaining_seats: int
    pending_guests: int
    confirmed_guests: int
    declined_guests: int


class InvitationDetailResponse(BaseModel):
    invitation: InvitationResponse
    guests: list[AdminGuestResponse]
    stats: SeatStatsResponse


def get_invitation_write_model() -> InvitationWriteModel:
    """Dependency to get invitation write model instance."""
    return SqlInvitationWriteModel()


def get_invitation_read_model() -> InvitationReadModel:
    """Dependency to get invitation read model instance."""
    return SqlInvitationReadModel(link_builder=get_link_builder())


@router.get(TEMPLATES_URL, response_model=list[TemplateResponse])
async def list_templates(
    read_model: InvitationReadModel = Depends(get_invitation_read_model),
):
    return await read_model.list_templates()


@router.get(INVITATIONS_URL, response_model=list[InvitationSummaryResponse])
async def list_invitations(
    read_model: InvitationReadModel = Depends(get_invitation_read_model),
):
    return await read_model.list_invitations()


@router.post(INVITATIONS_URL, response_model=InvitationResponse, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    payload: InvitationPayload,
    write_model: InvitationWriteModel = Depends(get_invitation_write_model),
):
    """Create a draft invitation. The slug is derived from the event and host names."""
    try:
        return await write_model.create_invitation(payload.to_fields())
    except DomainError as e:
        raise to_http_exception(e)


@router.get(INVITATION_URL, response_model=InvitationDetailResponse)
async def get_invitation(
    invitation_id: UUID,
    read_model: InvitationReadModel = Depends(get_invitation_read_model),
    clock: Clock = Depends(get_clock),
) -> InvitationDetailResponse:
    """
    Invitation dashboard: guests newest first with their preview, signed RSVP
    and WhatsApp links, plus seat and response statistics.
    """
    detail = await read_model.get_invitation_detail(invitation_id, clock())
    if detail is None:
        raise to_http_exception(NotFoundError())

    return InvitationDetailResponse(
        invitation=InvitationResponse.model_validate(detail.invitation, from_attributes=True),
        guests=[
            AdminGuestResponse(
                **GuestResponse.from_dto(item.guest).model_dump(),
                links=GuestLinksResponse.model_validate(item.links, from_attributes=True),
            )
            for item in detail.guests
        ],
        stats=SeatStatsResponse.model_validate(detail.stats, from_attributes=True),
    )


@router.put(INVITATION_URL, response_model=InvitationResponse)
async def update_invitation(
    invitation_id: UUID,
    payload: InvitationPayload,
    write_model: InvitationWriteModel = Depends(get_invitation_write_model),
):
    try:
        return await write_model.update_invitation(invitation_id, payload.to_fields())
    except DomainError as e:
        raise to_http_exception(e)


@router.post(PUBLISH_INVITATION_URL, response_model=InvitationResponse)
async def publish_invitation(
    invitation_id: UUID,
    write_model: InvitationWriteModel = Depends(get_invitation_write_model),
):
    try:
        return await write_model.publish(invitation_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.post(UNPUBLISH_INVITATION_URL, response_model=InvitationResponse)
async def unpublish_invitation(
    invitation_id: UUID,
    write_model: InvitationWriteModel = Depends(get_invitation_write_model),
):
    try:
        return await write_model.unpublish(invitation_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete(INVITATION_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_invitation(
    invitation_id: UUID,
    write_model: InvitationWriteModel = Depends(get_invitation_write_model),
) -> Response:
    """Delete an invitation together with its whole guest list."""
    try:
        await write_model.delete_invitation(invitation_id)
    except DomainError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
