"""RSVP state machine.

A guest starts ``pending`` and moves to ``confirmed`` or ``declined`` on every
submission. Submissions may be repeated until the deadline; the same payload
always produces the same outcome. Reserved seats are never touched here.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo

from src.errors import RsvpPeriodClosedError, ValidationFailedError
from src.guests.dtos import GuestDTO, GuestKind, GuestStatus

PLUS_ONE_NAME_MAX_LENGTH = 255


@dataclass(frozen=True)
class IndividualResponse:
    attending: bool
    plus_one: bool = False
    plus_one_name: str | None = None


@dataclass(frozen=True)
class GroupResponse:
    seats_confirmed: int


RsvpSubmission = IndividualResponse | GroupResponse


@dataclass(frozen=True)
class RsvpOutcome:
    status: GuestStatus
    seats_confirmed: int
    member_names: list[str]


def deadline_cutoff(deadline: date, timezone: str = "UTC") -> datetime:
    """Last instant at which a response is still accepted: end of the deadline day."""
    return datetime.combine(deadline, time.max, tzinfo=ZoneInfo(timezone))


def is_rsvp_closed(deadline: date | None, now: datetime, timezone: str = "UTC") -> bool:
    if deadline is None:
        return False
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now > deadline_cutoff(deadline, timezone)


def ensure_rsvp_open(deadline: date | None, now: datetime, timezone: str = "UTC") -> None:
    if is_rsvp_closed(deadline, now, timezone):
        raise RsvpPeriodClosedError()


def build_submission(
    kind: GuestKind,
    attending: bool | None = None,
    plus_one: bool | None = None,
    plus_one_name: str | None = None,
    seats_confirmed: int | None = None,
) -> RsvpSubmission:
    """Pick the fields that apply to the guest's kind from a raw submission."""
    if kind == GuestKind.GROUP:
        if seats_confirmed is None:
            raise ValidationFailedError("seats_confirmed", "Tell us how many seats you will use.")
        if seats_confirmed < 0:
            raise ValidationFailedError("seats_confirmed", "Seats cannot be negative.")
        return GroupResponse(seats_confirmed=seats_confirmed)

    if attending is None:
        raise ValidationFailedError("attending", "Let us know whether you will attend.")
    name = plus_one_name.strip() if plus_one_name else None
    if name and len(name) > PLUS_ONE_NAME_MAX_LENGTH:
        raise ValidationFailedError("plus_one_name", "The companion's name is too long.")
    return IndividualResponse(
        attending=attending,
        plus_one=bool(plus_one),
        plus_one_name=name or None,
    )


def apply_rsvp(guest: GuestDTO, submission: RsvpSubmission) -> RsvpOutcome:
    """Compute the guest's new RSVP state.

    Raises:
        ValidationFailedError: If the submission does not match the guest's
            kind, or a plus-one was chosen without a name.
    """
    if guest.kind == GuestKind.GROUP:
        if not isinstance(submission, GroupResponse):
            raise ValidationFailedError("seats_confirmed", "Tell us how many seats you will use.")
        # over-asking is clamped to the reservation, never rejected
        seats = min(submission.seats_confirmed, guest.seats_reserved)
        return RsvpOutcome(
            status=GuestStatus.CONFIRMED if seats > 0 else GuestStatus.DECLINED,
            seats_confirmed=seats,
            member_names=list(guest.member_names),
        )

    if not isinstance(submission, IndividualResponse):
        raise ValidationFailedError("attending", "Let us know whether you will attend.")

    if not submission.attending:
        return RsvpOutcome(status=GuestStatus.DECLINED, seats_confirmed=0, member_names=[])

    plus_one = submission.plus_one if guest.allow_plus_one else False
    if plus_one:
        if not submission.plus_one_name:
            raise ValidationFailedError("plus_one_name", "Enter your companion's name.")
        return RsvpOutcome(
            status=GuestStatus.CONFIRMED,
            seats_confirmed=2,
            member_names=[submission.plus_one_name],
        )
    return RsvpOutcome(status=GuestStatus.CONFIRMED, seats_confirmed=1, member_names=[])
