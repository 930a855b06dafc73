"""Seat capacity ledger.

Totals are always recomputed from the live guest rows of an invitation. Writers
load the ledger with ``for_update=True`` inside the transaction that persists
the guest, which locks the invitation row until commit so two concurrent
requests cannot both claim the last seats. SQLite engines get the same
guarantee from ``BEGIN IMMEDIATE`` (see ``src.config.database``).
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.errors import CapacityExceededError, NotFoundError
from src.guests.repository.orm_models import Guest
from src.invitations.repository.orm_models import Invitation

logger = logging.getLogger(__name__)


def remaining_seats(capacity: int, reserved_seats: int) -> int:
    """Never negative, even if historical data is over-allocated."""
    return max(0, capacity - reserved_seats)


@dataclass(frozen=True)
class SeatLedger:
    invitation_id: UUID
    capacity: int
    reserved_seats: int
    confirmed_seats: int

    @property
    def remaining(self) -> int:
        return remaining_seats(self.capacity, self.reserved_seats)

    def available_for(self, excluding_seats: int = 0) -> int:
        """Seats a guest may hold once its own current allocation is set aside."""
        return remaining_seats(self.capacity, self.reserved_seats - excluding_seats)

    def can_reserve(self, proposed_seats: int, excluding_seats: int = 0) -> bool:
        return proposed_seats <= self.available_for(excluding_seats)

    def ensure_can_reserve(
        self,
        proposed_seats: int,
        excluding_seats: int = 0,
        field: str = "seats_reserved",
    ) -> None:
        if not self.can_reserve(proposed_seats, excluding_seats):
            available = self.available_for(excluding_seats)
            logger.info(
                "Rejected %s seat(s) for invitation %s: %s available",
                proposed_seats,
                self.invitation_id,
                available,
            )
            raise CapacityExceededError(remaining=available, field=field)


async def load_seat_ledger(
    session: AsyncSession,
    invitation_id: UUID,
    for_update: bool = False,
) -> SeatLedger:
    """Load the capacity and seat totals of an invitation.

    Raises:
        NotFoundError: If the invitation does not exist.
    """
    capacity_stmt = select(Invitation.capacity).where(Invitation.uuid == invitation_id)
    if for_update:
        capacity_stmt = capacity_stmt.with_for_update()
    capacity = (await session.execute(capacity_stmt)).scalar_one_or_none()
    if capacity is None:
        raise NotFoundError()

    totals_stmt = select(
        func.coalesce(func.sum(Guest.seats_reserved), 0),
        func.coalesce(func.sum(Guest.seats_confirmed), 0),
    ).where(Guest.invitation_id == invitation_id)
    reserved, confirmed = (await session.execute(totals_stmt)).one()

    return SeatLedger(
        invitation_id=invitation_id,
        capacity=capacity,
        reserved_seats=int(reserved),
        confirmed_seats=int(confirmed),
    )
