"""RSVP write model - applies a guest's response and returns DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.config.settings import settings
from src.errors import NotFoundError
from src.guests.dtos import GuestStatus, RSVPResponseDTO
from src.guests.repository.orm_models import Guest
from src.guests.rsvp import apply_rsvp, build_submission, ensure_rsvp_open
from src.invitations.repository.orm_models import Invitation

logger = logging.getLogger(__name__)

CONFIRMED_MESSAGE = "Thank you for confirming your attendance!"
DECLINED_MESSAGE = "We're sorry you can't make it. Your response has been recorded."


class RSVPWriteModel(ABC):
    @abstractmethod
    async def submit_rsvp(
        self,
        guest_id: UUID,
        now: datetime,
        attending: bool | None = None,
        plus_one: bool | None = None,
        plus_one_name: str | None = None,
        seats_confirmed: int | None = None,
    ) -> RSVPResponseDTO:
        """
        Submit RSVP response for a guest.
        Individuals answer with attending/plus_one/plus_one_name, groups with seats_confirmed.

        Raises:
            NotFoundError: If the guest does not exist.
            RsvpPeriodClosedError: If the invitation's deadline has passed.
            ValidationFailedError: If a required field for the guest's kind is missing.
        """
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    """Write operations for RSVP. Returns DTOs, never ORM models."""

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        timezone: str = settings.event_timezone,
    ) -> None:
        self._session_overwrite = session_overwrite
        self._timezone = timezone

    async def submit_rsvp(
        self,
        guest_id: UUID,
        now: datetime,
        attending: bool | None = None,
        plus_one: bool | None = None,
        plus_one_name: str | None = None,
        seats_confirmed: int | None = None,
    ) -> RSVPResponseDTO:
        async with async_session_manager(session_overwrite=self._session_overwrite) as session:
            result = await session.execute(
                select(Guest, Invitation.rsvp_deadline_at, Invitation.slug)
                .join(Invitation, Guest.invitation_id == Invitation.uuid)
                .where(Guest.uuid == guest_id)
            )
            row = result.one_or_none()
            if row is None:
                raise NotFoundError()
            guest, deadline, slug = row

            # closes even when the signed link itself is still valid
            ensure_rsvp_open(deadline, now, self._timezone)

            current = guest.to_dto()
            submission = build_submission(
                current.kind,
                attending=attending,
                plus_one=plus_one,
                plus_one_name=plus_one_name,
                seats_confirmed=seats_confirmed,
            )
            outcome = apply_rsvp(current, submission)

            guest.status = outcome.status
            guest.seats_confirmed = outcome.seats_confirmed
            guest.member_names = outcome.member_names
            await session.flush()

            logger.info(
                "Guest %s responded %s with %s seat(s)",
                guest_id,
                outcome.status.value,
                outcome.seats_confirmed,
            )
            return RSVPResponseDTO(
                message=(
                    CONFIRMED_MESSAGE
                    if outcome.status == GuestStatus.CONFIRMED
                    else DECLINED_MESSAGE
                ),
                status=outcome.status,
                seats_confirmed=outcome.seats_confirmed,
                member_names=outcome.member_names,
                invitation_slug=slug,
            )
