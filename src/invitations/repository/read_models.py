import abc
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.access import Viewer
from src.config.database import async_session_manager
from src.guests.dtos import GuestDTO, GuestLinksDTO
from src.guests.links import LinkBuilder, token_matches
from src.guests.repository.orm_models import Guest
from src.guests.share import invitation_message, whatsapp_url
from src.invitations.dtos import (
    AdminGuestDTO,
    InvitationDetailDTO,
    InvitationDTO,
    InvitationStatus,
    InvitationSummaryDTO,
    PublicGuestDTO,
    PublicInvitationDTO,
    SeatStatsDTO,
    TemplateDTO,
)
from src.invitations.repository.orm_models import Invitation, Template


class InvitationReadModel(abc.ABC):
    @abc.abstractmethod
    async def list_templates(self) -> list[TemplateDTO]:
        """Active templates, ordered by name."""
        raise NotImplementedError

    @abc.abstractmethod
    async def list_invitations(self) -> list[InvitationSummaryDTO]:
        """All invitations, newest first."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_invitation_detail(
        self, invitation_id: UUID, now: datetime
    ) -> InvitationDetailDTO | None:
        """Invitation with its guests, their shareable links and seat stats."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_public_invitation(
        self,
        slug: str,
        viewer: Viewer,
        now: datetime,
        guest_id: str | None = None,
        public_token: str | None = None,
    ) -> PublicInvitationDTO | None:
        """
        Public projection of an invitation by slug.
        Returns None for unknown slugs and for drafts seen by a non-admin viewer.
        A matching (guest_id, public_token) pair adds that guest's own summary.
        """
        raise NotImplementedError


class SqlInvitationReadModel(InvitationReadModel):
    """SQL implementation of invitation read model."""

    def __init__(
        self,
        link_builder: LinkBuilder,
        session_overwrite: AsyncSession | None = None,
    ) -> None:
        self.link_builder = link_builder
        self.session_overwrite = session_overwrite

    async def list_templates(self) -> list[TemplateDTO]:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(Template).where(Template.is_active.is_(True)).order_by(Template.name)
            )
            return [
                TemplateDTO(
                    id=template.uuid,
                    key=template.key,
                    name=template.name,
                    description=template.description,
                    preview_image_url=template.preview_image_url,
                )
                for template in result.scalars().all()
            ]

    async def list_invitations(self) -> list[InvitationSummaryDTO]:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(Invitation, Template.name)
                .join(Template, Invitation.template_id == Template.uuid)
                .order_by(Invitation.created_at.desc())
            )
            return [
                InvitationSummaryDTO(
                    id=invitation.uuid,
                    slug=invitation.slug,
                    template_name=template_name,
                    event_name=invitation.event_name,
                    host_name=invitation.host_name,
                    event_date=invitation.event_date,
                    status=InvitationStatus(invitation.status),
                    created_at=invitation.created_at,
                )
                for invitation, template_name in result.all()
            ]

    async def get_invitation_detail(
        self, invitation_id: UUID, now: datetime
    ) -> InvitationDetailDTO | None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            invitation = await self._get_invitation(session, Invitation.uuid == invitation_id)
            if invitation is None:
                return None

            result = await session.execute(
                select(Guest)
                .where(Guest.invitation_id == invitation_id)
                .order_by(Guest.created_at.desc())
            )
            guests = [guest.to_dto() for guest in result.scalars().all()]

            return InvitationDetailDTO(
                invitation=invitation,
                guests=[
                    AdminGuestDTO(guest=guest, links=self._guest_links(invitation, guest, now))
                    for guest in guests
                ],
                stats=SeatStatsDTO.from_guests(invitation.capacity, guests),
            )

    async def get_public_invitation(
        self,
        slug: str,
        viewer: Viewer,
        now: datetime,
        guest_id: str | None = None,
        public_token: str | None = None,
    ) -> PublicInvitationDTO | None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            invitation = await self._get_invitation(session, Invitation.slug == slug)
            if invitation is None:
                return None
            if invitation.status != InvitationStatus.PUBLISHED and not viewer.is_admin:
                return None

            guest = await self._resolve_guest(session, invitation.id, guest_id, public_token)

            return PublicInvitationDTO(
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
                    PublicGuestDTO(
                        guest_id=guest.id,
                        kind=guest.kind.value,
                        display_name=guest.display_name,
                        seats_reserved=guest.seats_reserved,
                        seats_confirmed=guest.seats_confirmed,
                        status=guest.status,
                        rsvp_url=self.link_builder.rsvp_url(
                            guest.id, invitation.rsvp_deadline_at, now
                        ),
                    )
                    if guest
                    else None
                ),
            )

    async def _get_invitation(self, session, condition) -> InvitationDTO | None:
        result = await session.execute(
            select(Invitation, Template.key)
            .join(Template, Invitation.template_id == Template.uuid)
            .where(condition)
        )
        row = result.one_or_none()
        if row is None:
            return None
        invitation, template_key = row
        return invitation.to_dto(template_key)

    async def _resolve_guest(
        self,
        session,
        invitation_id: UUID,
        guest_id: str | None,
        public_token: str | None,
    ) -> GuestDTO | None:
        """The guest named by the preview link, or None on any mismatch."""
        if not guest_id or not public_token:
            return None
        try:
            guest_uuid = UUID(guest_id)
        except ValueError:
            return None

        result = await session.execute(
            select(Guest).where(Guest.uuid == guest_uuid, Guest.invitation_id == invitation_id)
        )
        guest = result.scalar_one_or_none()
        if guest is None or not token_matches(guest.public_token, public_token):
            return None
        return guest.to_dto()

    def _guest_links(self, invitation: InvitationDTO, guest: GuestDTO, now: datetime) -> GuestLinksDTO:
        preview_url = self.link_builder.preview_url(invitation.slug, guest.id, guest.public_token)
        message = invitation_message(
            guest,
            event_name=invitation.event_name,
            event_date=invitation.event_date,
            event_time=invitation.event_time,
            venue_name=invitation.venue_name,
            preview_url=preview_url,
        )
        return GuestLinksDTO(
            preview_url=preview_url,
            rsvp_url=self.link_builder.rsvp_url(guest.id, invitation.rsvp_deadline_at, now),
            whatsapp_url=whatsapp_url(message, guest.contact_phone),
        )
