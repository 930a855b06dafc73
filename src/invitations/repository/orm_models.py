from datetime import date, datetime, time
from uuid import UUID

from sqlalchemy import JSON, Boolean, Date, DateTime, Enum, ForeignKey, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.invitations.dtos import InvitationDTO, InvitationStatus
from src.models.base import Base, TimeStamp


class Template(Base, TimeStamp):
    __tablename__ = TableNames.TEMPLATES.value

    key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    preview_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Template {self.key}>"


class Invitation(Base, TimeStamp):
    __tablename__ = TableNames.INVITATIONS.value

    template_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.TEMPLATES.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    event_name: Mapped[str] = mapped_column(String(255), nullable=False)
    host_name: Mapped[str] = mapped_column(String(255), nullable=False)
    host_color: Mapped[str | None] = mapped_column(String(20), nullable=True)

    venue_name: Mapped[str] = mapped_column(String(255), nullable=False)
    venue_address: Mapped[str | None] = mapped_column(String(255), nullable=True)

    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    event_time: Mapped[time] = mapped_column(Time, nullable=False)

    complementary_text_1: Mapped[str | None] = mapped_column(String(255), nullable=True)
    complementary_text_2: Mapped[str | None] = mapped_column(String(255), nullable=True)
    complementary_text_3: Mapped[str | None] = mapped_column(String(255), nullable=True)

    gift_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    dress_code: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Seats
    capacity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    rsvp_deadline_at: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Publication
    status: Mapped[str] = mapped_column(
        Enum(
            InvitationStatus,
            name="invitation_status_enum",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=InvitationStatus.DRAFT,
        nullable=False,
    )
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Template design overrides
    settings: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    def to_dto(self, template_key: str) -> InvitationDTO:
        return InvitationDTO(
            id=self.uuid,
            slug=self.slug,
            template_id=self.template_id,
            template_key=template_key,
            event_name=self.event_name,
            host_name=self.host_name,
            venue_name=self.venue_name,
            event_date=self.event_date,
            event_time=self.event_time,
            capacity=self.capacity,
            status=InvitationStatus(self.status),
            host_color=self.host_color,
            venue_address=self.venue_address,
            rsvp_deadline_at=self.rsvp_deadline_at,
            published_at=self.published_at,
            gift_type=self.gift_type,
            dress_code=self.dress_code,
            complementary_text_1=self.complementary_text_1,
            complementary_text_2=self.complementary_text_2,
            complementary_text_3=self.complementary_text_3,
            settings=dict(self.settings or {}),
        )

    def __repr__(self) -> str:
        return f"<Invitation {self.slug} - {self.status}>"
