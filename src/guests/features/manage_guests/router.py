from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr, Field

from src.access import require_admin
from src.errors import DomainError, to_http_exception
from src.guests.dtos import ContactDTO, GuestDTO, GuestKind, GuestStatus, build_allocation
from src.guests.features.manage_guests.write_model import GuestWriteModel, SqlGuestWriteModel
from src.guests.urls import GUEST_URL, GUESTS_URL

router = APIRouter(dependencies=[Depends(require_admin)])


class GuestFields(BaseModel):
    display_name: str = Field(min_length=1, max_length=255)
    contact_name: str | None = Field(default=None, max_length=255)
    contact_phone: str | None = Field(default=None, max_length=50)
    contact_email: EmailStr | None = None
    note: str | None = None
    allow_plus_one: bool | None = None
    seats_reserved: int | None = None
    member_names: list[str] | None = None

    def to_contact(self) -> ContactDTO:
        return ContactDTO(
            display_name=self.display_name,
            contact_name=self.contact_name,
            contact_phone=self.contact_phone,
            contact_email=self.contact_email,
            note=self.note,
        )


class GuestCreate(GuestFields):
    type: GuestKind


class GuestUpdate(GuestFields):
    type: GuestKind | None = None


class GuestResponse(BaseModel):
    id: UUID
    invitation_id: UUID
    type: GuestKind
    display_name: str
    seats_reserved: int
    seats_confirmed: int
    status: GuestStatus
    allow_plus_one: bool
    member_names: list[str] = []
    public_token: str
    contact_name: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    note: str | None = None

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "GuestResponse":
        return cls(
            id=guest.id,
            invitation_id=guest.invitation_id,
            type=guest.kind,
            display_name=guest.display_name,
            seats_reserved=guest.seats_reserved,
            seats_confirmed=guest.seats_confirmed,
            status=guest.status,
            allow_plus_one=guest.allow_plus_one,
            member_names=guest.member_names,
            public_token=guest.public_token,
            contact_name=guest.contact_name,
            contact_phone=guest.contact_phone,
            contact_email=guest.contact_email,
            note=guest.note,
        )


def get_guest_write_model() -> GuestWriteModel:
    """Dependency to get guest write model instance."""
    return SqlGuestWriteModel()


@router.post(GUESTS_URL, response_model=GuestResponse, status_code=status.HTTP_201_CREATED)
async def create_guest(
    invitation_id: UUID,
    guest_data: GuestCreate,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestResponse:
    """
    Add an individual or a group to the guest list.
    Rejected with the remaining seat count when the invitation is full.
    """
    try:
        allocation = build_allocation(
            guest_data.type,
            allow_plus_one=guest_data.allow_plus_one,
            seats_reserved=guest_data.seats_reserved,
            member_names=guest_data.member_names,
        )
        guest = await write_model.create_guest(
            invitation_id=invitation_id,
            allocation=allocation,
            contact=guest_data.to_contact(),
        )
    except DomainError as e:
        raise to_http_exception(e)
    return GuestResponse.from_dto(guest)


@router.put(GUEST_URL, response_model=GuestResponse)
async def update_guest(
    guest_id: UUID,
    guest_data: GuestUpdate,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestResponse:
    """Edit a guest. Seat changes are checked against the other guests' reservations."""
    try:
        guest = await write_model.update_guest(
            guest_id=guest_id,
            contact=guest_data.to_contact(),
            allow_plus_one=guest_data.allow_plus_one,
            seats_reserved=guest_data.seats_reserved,
            member_names=guest_data.member_names,
            kind=guest_data.type,
        )
    except DomainError as e:
        raise to_http_exception(e)
    return GuestResponse.from_dto(guest)


@router.delete(GUEST_URL, status_code=status.HTTP_204_NO_CONTENT)
async def delete_guest(
    guest_id: UUID,
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> Response:
    try:
        await write_model.delete_guest(guest_id)
    except DomainError as e:
        raise to_http_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
