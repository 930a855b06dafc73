from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from uuid import UUID

from src.guests.dtos import GuestDTO, GuestLinksDTO, GuestStatus


class InvitationStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


@dataclass(frozen=True)
class InvitationFieldsDTO:
    """Admin-editable fields of an invitation."""

    template_id: UUID
    event_name: str
    host_name: str
    venue_name: str
    event_date: date
    event_time: time
    capacity: int
    host_color: str | None = None
    venue_address: str | None = None
    rsvp_deadline_at: date | None = None
    gift_type: str | None = None
    dress_code: str | None = None
    complementary_text_1: str | None = None
    complementary_text_2: str | None = None
    complementary_text_3: str | None = None
    settings: dict = field(default_factory=dict)


@dataclass(frozen=True)
class TemplateDTO:
    id: UUID
    key: str
    name: str
    description: str | None = None
    preview_image_url: str | None = None


@dataclass(frozen=True)
class InvitationDTO:
    """DTO for invitation data."""

    id: UUID
    slug: str
    template_id: UUID
    template_key: str
    event_name: str
    host_name: str
    venue_name: str
    event_date: date
    event_time: time
    capacity: int
    status: InvitationStatus
    host_color: str | None = None
    venue_address: str | None = None
    rsvp_deadline_at: date | None = None
    published_at: datetime | None = None
    gift_type: str | None = None
    dress_code: str | None = None
    complementary_text_1: str | None = None
    complementary_text_2: str | None = None
    complementary_text_3: str | None = None
    settings: dict = field(default_factory=dict)


@dataclass(frozen=True)
class InvitationSummaryDTO:
    """Row of the admin invitation index."""

    id: UUID
    slug: str
    template_name: str
    event_name: str
    host_name: str
    event_date: date
    status: InvitationStatus
    created_at: datetime


@dataclass(frozen=True)
class SeatStatsDTO:
    capacity: int
    reserved_seats: int
    confirmed_seats: int
    remaining_seats: int
    pending_guests: int
    confirmed_guests: int
    declined_guests: int

    @classmethod
    def from_guests(cls, capacity: int, guests: list[GuestDTO]) -> "SeatStatsDTO":
        reserved = sum(guest.seats_reserved for guest in guests)
        return cls(
            capacity=capacity,
            reserved_seats=reserved,
            confirmed_seats=sum(guest.seats_confirmed for guest in guests),
            remaining_seats=max(0, capacity - reserved),
            pending_guests=sum(1 for g in guests if g.status == GuestStatus.PENDING),
            confirmed_guests=sum(1 for g in guests if g.status == GuestStatus.CONFIRMED),
            declined_guests=sum(1 for g in guests if g.status == GuestStatus.DECLINED),
        )


@dataclass(frozen=True)
class AdminGuestDTO:
    guest: GuestDTO
    links: GuestLinksDTO


@dataclass(frozen=True)
class InvitationDetailDTO:
    """Admin dashboard view of one invitation."""

    invitation: InvitationDTO
    guests: list[AdminGuestDTO]
    stats: SeatStatsDTO


@dataclass(frozen=True)
class PublicGuestDTO:
    """The resolved guest's own summary, shown on the personalised preview."""

    guest_id: UUID
    kind: str
    display_name: str
    seats_reserved: int
    seats_confirmed: int
    status: GuestStatus
    rsvp_url: str


@dataclass(frozen=True)
class PublicInvitationDTO:
    """Read projection handed to the template renderer. No internal ids."""

    slug: str
    template_key: str
    event_name: str
    host_name: str
    venue_name: str
    venue_address: str | None
    event_date: date
    event_time: time
    gift_type: str | None
    dress_code: str | None
    complementary_text_1: str | None
    complementary_text_2: str | None
    complementary_text_3: str | None
    rsvp_deadline_at: date | None
    settings: dict
    guest: PublicGuestDTO | None = None
