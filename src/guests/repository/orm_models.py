from uuid import UUID

from sqlalchemy import JSON, Boolean, CheckConstraint, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.guests.dtos import GuestDTO, GuestKind, GuestStatus
from src.models.base import Base, TimeStamp


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value
    __table_args__ = (
        CheckConstraint("seats_reserved >= 1", name="ck_guests_seats_reserved_positive"),
        CheckConstraint(
            "seats_confirmed >= 0 AND seats_confirmed <= seats_reserved",
            name="ck_guests_seats_confirmed_range",
        ),
        Index("ix_guests_invitation_id_status", "invitation_id", "status"),
    )

    invitation_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.INVITATIONS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Fixed at creation
    kind: Mapped[str] = mapped_column(
        Enum(GuestKind, name="guest_kind_enum", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    allow_plus_one: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Seats
    seats_reserved: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    seats_confirmed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # RSVP status
    status: Mapped[str] = mapped_column(
        Enum(GuestStatus, name="guest_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=GuestStatus.PENDING,
        nullable=False,
    )

    # Plus-one name for individuals, optional attendee names for groups
    member_names: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Secret token embedded in the personalised preview link
    public_token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    def to_dto(self) -> GuestDTO:
        return GuestDTO(
            id=self.uuid,
            invitation_id=self.invitation_id,
            kind=GuestKind(self.kind),
            display_name=self.display_name,
            seats_reserved=self.seats_reserved,
            seats_confirmed=self.seats_confirmed,
            status=GuestStatus(self.status),
            allow_plus_one=self.allow_plus_one,
            member_names=list(self.member_names or []),
            public_token=self.public_token,
            contact_name=self.contact_name,
            contact_phone=self.contact_phone,
            contact_email=self.contact_email,
            note=self.note,
        )

    def __repr__(self) -> str:
        return f"<Guest {self.display_name} - {self.status}>"
