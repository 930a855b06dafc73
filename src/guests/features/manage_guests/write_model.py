"""Write model for the admin side of the guest list.

Every write that changes a guest's reserved seats runs the capacity check and
the write in one transaction, holding the invitation row lock taken by
``load_seat_ledger(for_update=True)``. Returns DTOs instead of ORM models.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.errors import NotFoundError, ValidationFailedError
from src.guests.dtos import (
    ContactDTO,
    GuestDTO,
    GuestKind,
    GuestStatus,
    SeatAllocation,
    build_allocation,
)
from src.guests.links import generate_public_token
from src.guests.repository.orm_models import Guest
from src.invitations.capacity import load_seat_ledger

logger = logging.getLogger(__name__)


class GuestWriteModel(ABC):
    """Abstract base class for guest list write operations."""

    @abstractmethod
    async def create_guest(
        self,
        invitation_id: UUID,
        allocation: SeatAllocation,
        contact: ContactDTO,
    ) -> GuestDTO:
        """Add a pending guest to an invitation. Returns DTO.

        Raises:
            NotFoundError: If the invitation does not exist.
            CapacityExceededError: If the allocation does not fit.
        """
        raise NotImplementedError

    @abstractmethod
    async def update_guest(
        self,
        guest_id: UUID,
        contact: ContactDTO,
        allow_plus_one: bool | None = None,
        seats_reserved: int | None = None,
        member_names: list[str] | None = None,
        kind: GuestKind | None = None,
    ) -> GuestDTO:
        """Edit a guest. The kind is fixed; passing a different one is rejected.

        Raises:
            NotFoundError: If the guest does not exist.
            ValidationFailedError: On a kind change or a group without seats.
            CapacityExceededError: If a new seat count does not fit.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_guest(self, guest_id: UUID) -> None:
        """Remove a guest, releasing its seats immediately."""
        raise NotImplementedError


class SqlGuestWriteModel(GuestWriteModel):
    """SQL implementation of guest list write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_guest(
        self,
        invitation_id: UUID,
        allocation: SeatAllocation,
        contact: ContactDTO,
    ) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            ledger = await load_seat_ledger(session, invitation_id, for_update=True)
            ledger.ensure_can_reserve(allocation.seats_reserved)

            guest = Guest(
                invitation_id=invitation_id,
                kind=allocation.kind,
                allow_plus_one=allocation.allow_plus_one,
                seats_reserved=allocation.seats_reserved,
                seats_confirmed=0,
                status=GuestStatus.PENDING,
                member_names=allocation.member_names,
                public_token=generate_public_token(),
                display_name=contact.display_name,
                contact_name=contact.contact_name,
                contact_phone=contact.contact_phone,
                contact_email=contact.contact_email,
                note=contact.note,
            )
            session.add(guest)
            await session.flush()

            logger.info(
                "Added %s guest %s to invitation %s with %s seat(s)",
                allocation.kind.value,
                guest.uuid,
                invitation_id,
                allocation.seats_reserved,
            )
            return guest.to_dto()

    async def update_guest(
        self,
        guest_id: UUID,
        contact: ContactDTO,
        allow_plus_one: bool | None = None,
        seats_reserved: int | None = None,
        member_names: list[str] | None = None,
        kind: GuestKind | None = None,
    ) -> GuestDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            invitation_id = await session.scalar(
                select(Guest.invitation_id).where(Guest.uuid == guest_id)
            )
            if invitation_id is None:
                raise NotFoundError()

            ledger = await load_seat_ledger(session, invitation_id, for_update=True)
            guest = await self._get_guest(session, guest_id)
            current_kind = GuestKind(guest.kind)
            if kind is not None and kind != current_kind:
                raise ValidationFailedError("type", "A guest's type cannot be changed.")

            if member_names is None:
                # keep the stored plus-one / attendee names when none are sent
                member_names = list(guest.member_names or [])
            if allow_plus_one is None:
                allow_plus_one = guest.allow_plus_one
            allocation = build_allocation(
                current_kind,
                allow_plus_one=allow_plus_one,
                seats_reserved=seats_reserved,
                member_names=member_names,
            )

            if allocation.seats_reserved != guest.seats_reserved:
                ledger.ensure_can_reserve(
                    allocation.seats_reserved, excluding_seats=guest.seats_reserved
                )

            guest.allow_plus_one = allocation.allow_plus_one
            guest.seats_reserved = allocation.seats_reserved
            guest.seats_confirmed = min(guest.seats_confirmed, allocation.seats_reserved)
            guest.member_names = allocation.member_names
            guest.display_name = contact.display_name
            guest.contact_name = contact.contact_name
            guest.contact_phone = contact.contact_phone
            guest.contact_email = contact.contact_email
            guest.note = contact.note
            await session.flush()

            logger.info("Updated guest %s", guest_id)
            return guest.to_dto()

    async def delete_guest(self, guest_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(delete(Guest).where(Guest.uuid == guest_id))
            if result.rowcount == 0:
                raise NotFoundError()
            logger.info("Deleted guest %s", guest_id)

    async def _get_guest(self, session, guest_id: UUID) -> Guest:
        result = await session.execute(select(Guest).where(Guest.uuid == guest_id))
        guest = result.scalar_one_or_none()
        if guest is None:
            raise NotFoundError()
        return guest
