"""Write model for the admin lifecycle of an invitation.

Creates invitations as drafts with a unique slug, updates their fields,
toggles publication and deletes them together with their guests.
Returns DTOs instead of ORM models.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import asdict
from datetime import UTC, datetime
from functools import partial
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.errors import NotFoundError, ValidationFailedError
from src.guests.repository.orm_models import Guest
from src.invitations.capacity import load_seat_ledger
from src.invitations.dtos import InvitationDTO, InvitationFieldsDTO, InvitationStatus
from src.invitations.repository.orm_models import Invitation, Template
from src.invitations.slugs import unique_slug

logger = logging.getLogger(__name__)

SLUG_INSERT_ATTEMPTS = 5


class InvitationWriteModel(ABC):
    """Abstract base class for invitation write operations."""

    @abstractmethod
    async def create_invitation(self, fields: InvitationFieldsDTO) -> InvitationDTO:
        """Create a draft invitation with a unique slug. Returns DTO."""
        raise NotImplementedError

    @abstractmethod
    async def update_invitation(
        self, invitation_id: UUID, fields: InvitationFieldsDTO
    ) -> InvitationDTO:
        """Replace the editable fields of an invitation. The slug never changes.

        Raises:
            NotFoundError: If the invitation does not exist.
            ValidationFailedError: If the template is unknown or inactive, or
                the new capacity is below the seats already reserved.
        """
        raise NotImplementedError

    @abstractmethod
    async def publish(self, invitation_id: UUID) -> InvitationDTO:
        raise NotImplementedError

    @abstractmethod
    async def unpublish(self, invitation_id: UUID) -> InvitationDTO:
        raise NotImplementedError

    @abstractmethod
    async def delete_invitation(self, invitation_id: UUID) -> None:
        """Delete an invitation and all of its guests."""
        raise NotImplementedError


class SqlInvitationWriteModel(InvitationWriteModel):
    """SQL implementation of invitation write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        clock: Callable[[], datetime] = partial(datetime.now, UTC),
    ) -> None:
        self.session_overwrite = session_overwrite
        self.clock = clock

    async def create_invitation(self, fields: InvitationFieldsDTO) -> InvitationDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            template = await self._get_active_template(session, fields.template_id)
            _check_capacity(fields.capacity)

            invitation = await self._insert_with_unique_slug(session, fields)

            logger.info("Created invitation %s (%s)", invitation.uuid, invitation.slug)
            return invitation.to_dto(template.key)

    async def _insert_with_unique_slug(
        self, session: AsyncSession, fields: InvitationFieldsDTO
    ) -> Invitation:
        # a concurrent create can take the slug between the lookup and the insert
        for _ in range(SLUG_INSERT_ATTEMPTS):
            slug = await unique_slug(session, fields.event_name, fields.host_name)
            invitation = Invitation(
                **asdict(fields),
                slug=slug,
                status=InvitationStatus.DRAFT,
                published_at=None,
            )
            try:
                async with session.begin_nested():
                    session.add(invitation)
            except IntegrityError:
                logger.info("Slug %s was taken concurrently, picking the next one", slug)
                continue
            return invitation
        raise ValidationFailedError("event_name", "Could not reserve a unique link. Try again.")

    async def update_invitation(
        self, invitation_id: UUID, fields: InvitationFieldsDTO
    ) -> InvitationDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            # locks the invitation row so no guest can be added mid-update
            ledger = await load_seat_ledger(session, invitation_id, for_update=True)
            template = await self._get_active_template(session, fields.template_id)
            _check_capacity(fields.capacity)
            if fields.capacity < ledger.reserved_seats:
                raise ValidationFailedError(
                    "capacity",
                    f"{ledger.reserved_seats} seat(s) are already reserved for guests.",
                )

            invitation = await self._get_invitation(session, invitation_id)
            for name, value in asdict(fields).items():
                setattr(invitation, name, value)
            await session.flush()

            logger.info("Updated invitation %s", invitation_id)
            return invitation.to_dto(template.key)

    async def publish(self, invitation_id: UUID) -> InvitationDTO:
        return await self._set_status(invitation_id, InvitationStatus.PUBLISHED)

    async def unpublish(self, invitation_id: UUID) -> InvitationDTO:
        return await self._set_status(invitation_id, InvitationStatus.DRAFT)

    async def delete_invitation(self, invitation_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            await self._get_invitation(session, invitation_id)
            await session.execute(delete(Guest).where(Guest.invitation_id == invitation_id))
            await session.execute(delete(Invitation).where(Invitation.uuid == invitation_id))
            logger.info("Deleted invitation %s", invitation_id)

    async def _set_status(self, invitation_id: UUID, status: InvitationStatus) -> InvitationDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            invitation = await self._get_invitation(session, invitation_id)
            invitation.status = status
            invitation.published_at = self.clock() if status == InvitationStatus.PUBLISHED else None
            await session.flush()

            template_key = await session.scalar(
                select(Template.key).where(Template.uuid == invitation.template_id)
            )
            logger.info("Invitation %s is now %s", invitation_id, status.value)
            return invitation.to_dto(template_key)

    async def _get_invitation(self, session, invitation_id: UUID) -> Invitation:
        result = await session.execute(select(Invitation).where(Invitation.uuid == invitation_id))
        invitation = result.scalar_one_or_none()
        if invitation is None:
            raise NotFoundError()
        return invitation

    async def _get_active_template(self, session, template_id: UUID) -> Template:
        result = await session.execute(
            select(Template).where(Template.uuid == template_id, Template.is_active.is_(True))
        )
        template = result.scalar_one_or_none()
        if template is None:
            raise ValidationFailedError("template_id", "Choose an available template.")
        return template


def _check_capacity(capacity: int) -> None:
    if capacity < 0:
        raise ValidationFailedError("capacity", "Capacity cannot be negative.")
