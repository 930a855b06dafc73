import abc
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.config.settings import settings
from src.guests.dtos import RSVPInfoDTO, RSVPInvitationDTO
from src.guests.repository.orm_models import Guest
from src.guests.rsvp import is_rsvp_closed
from src.invitations.repository.orm_models import Invitation


class RSVPReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_rsvp_info(self, guest_id: UUID, now: datetime) -> RSVPInfoDTO | None:
        """
        Get RSVP page info for a guest.
        Includes the current response for form prefill and whether the RSVP period is closed.
        """
        raise NotImplementedError


class SqlRSVPReadModel(RSVPReadModel):
    """SQL implementation of RSVP read model."""

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        timezone: str = settings.event_timezone,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.timezone = timezone

    async def get_rsvp_info(self, guest_id: UUID, now: datetime) -> RSVPInfoDTO | None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(Guest, Invitation)
                .join(Invitation, Guest.invitation_id == Invitation.uuid)
                .where(Guest.uuid == guest_id)
            )
            row = result.one_or_none()
            if row is None:
                return None
            guest, invitation = row

            return RSVPInfoDTO(
                invitation=RSVPInvitationDTO(
                    slug=invitation.slug,
                    event_name=invitation.event_name,
                    host_name=invitation.host_name,
                    venue_name=invitation.venue_name,
                    venue_address=invitation.venue_address,
                    event_date=invitation.event_date,
                    event_time=(
                        invitation.event_time.strftime("%H:%M") if invitation.event_time else None
                    ),
                    rsvp_deadline_at=invitation.rsvp_deadline_at,
                ),
                guest=guest.to_dto(),
                is_closed=is_rsvp_closed(invitation.rsvp_deadline_at, now, self.timezone),
            )
