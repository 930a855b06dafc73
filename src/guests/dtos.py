from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from uuid import UUID

from src.errors import ValidationFailedError


class GuestKind(str, Enum):
    INDIVIDUAL = "individual"
    GROUP = "group"


class GuestStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


@dataclass(frozen=True)
class IndividualAllocation:
    """Seat allocation of a single invitee, optionally bringing a plus-one."""

    allow_plus_one: bool = False
    plus_one_name: str | None = None

    kind = GuestKind.INDIVIDUAL

    @property
    def seats_reserved(self) -> int:
        return 2 if self.allow_plus_one else 1

    @property
    def member_names(self) -> list[str]:
        if self.allow_plus_one and self.plus_one_name:
            return [self.plus_one_name]
        return []


@dataclass(frozen=True)
class GroupAllocation:
    """Seat allocation of a named group (family, table, ...)."""

    seats_reserved: int
    member_names: list[str] = field(default_factory=list)

    kind = GuestKind.GROUP
    allow_plus_one = False

    def __post_init__(self) -> None:
        if self.seats_reserved is None:
            raise ValidationFailedError("seats_reserved", "Seats are required for a group.")
        if self.seats_reserved < 1:
            raise ValidationFailedError("seats_reserved", "A group needs at least one seat.")


SeatAllocation = IndividualAllocation | GroupAllocation


def build_allocation(
    kind: GuestKind,
    allow_plus_one: bool | None = None,
    seats_reserved: int | None = None,
    member_names: list[str] | None = None,
) -> SeatAllocation:
    """Derive the seat allocation from the admin-submitted fields of a guest.

    Individuals only choose ``allow_plus_one``; any submitted seat count is
    ignored and the first member name is kept as the plus-one name.
    Groups require ``seats_reserved`` and never allow a plus-one.
    """
    names = [name.strip() for name in member_names or [] if name and name.strip()]
    if kind == GuestKind.GROUP:
        return GroupAllocation(seats_reserved=seats_reserved, member_names=names)
    plus_one = bool(allow_plus_one)
    return IndividualAllocation(
        allow_plus_one=plus_one,
        plus_one_name=names[0] if plus_one and names else None,
    )


@dataclass(frozen=True)
class ContactDTO:
    """Descriptive guest fields with no invariant attached."""

    display_name: str
    contact_name: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    note: str | None = None


@dataclass(frozen=True)
class GuestDTO:
    """DTO for guest data."""

    id: UUID
    invitation_id: UUID
    kind: GuestKind
    display_name: str
    seats_reserved: int
    seats_confirmed: int
    status: GuestStatus
    allow_plus_one: bool
    member_names: list[str]
    public_token: str
    contact_name: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    note: str | None = None


@dataclass(frozen=True)
class GuestLinksDTO:
    """Shareable links for one guest."""

    preview_url: str
    rsvp_url: str
    whatsapp_url: str


@dataclass(frozen=True)
class RSVPInvitationDTO:
    """Invitation fields shown on the RSVP page."""

    slug: str
    event_name: str
    host_name: str
    venue_name: str
    venue_address: str | None
    event_date: date | None
    event_time: str | None
    rsvp_deadline_at: date | None


@dataclass(frozen=True)
class RSVPInfoDTO:
    """DTO for RSVP page info returned by read model."""

    invitation: RSVPInvitationDTO
    guest: GuestDTO
    is_closed: bool


@dataclass(frozen=True)
class RSVPResponseDTO:
    """DTO for RSVP response."""

    message: str
    status: GuestStatus
    seats_confirmed: int
    member_names: list[str]
    invitation_slug: str
