from datetime import UTC, date, datetime
from urllib.parse import parse_qs, urlparse
from uuid import UUID, uuid4

import pytest

from src.clock import get_clock
from src.errors import NotFoundError, RsvpPeriodClosedError, ValidationFailedError
from src.guests.dtos import GuestStatus, RSVPResponseDTO
from src.guests.features.submit_rsvp.router import get_rsvp_write_model
from src.guests.links import LinkBuilder, RsvpLinkSigner, get_link_builder
from src.guests.repository.write_models import CONFIRMED_MESSAGE, DECLINED_MESSAGE, RSVPWriteModel
from src.guests.rsvp import ensure_rsvp_open
from src.guests.urls import RSVP_URL

DEADLINE = date(2026, 5, 10)
ISSUED_AT = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)


class InMemoryRSVPWriteModel(RSVPWriteModel):
    """In-memory write model for testing: individuals only, one plus-one allowed."""

    def __init__(self, memory: dict, known_guests: set[UUID]):
        self._memory = memory
        self._known_guests = known_guests

    async def submit_rsvp(
        self,
        guest_id: UUID,
        now: datetime,
        attending: bool | None = None,
        plus_one: bool | None = None,
        plus_one_name: str | None = None,
        seats_confirmed: int | None = None,
    ) -> RSVPResponseDTO:
        if guest_id not in self._known_guests:
            raise NotFoundError()
        ensure_rsvp_open(DEADLINE, now)
        if attending is None:
            raise ValidationFailedError("attending", "Let us know whether you will attend.")
        if attending and plus_one and not plus_one_name:
            raise ValidationFailedError("plus_one_name", "Enter your companion's name.")

        self._memory[guest_id] = {"attending": attending, "plus_one_name": plus_one_name}
        names = [plus_one_name] if attending and plus_one else []
        return RSVPResponseDTO(
            message=CONFIRMED_MESSAGE if attending else DECLINED_MESSAGE,
            status=GuestStatus.CONFIRMED if attending else GuestStatus.DECLINED,
            seats_confirmed=(1 + len(names)) if attending else 0,
            member_names=names,
            invitation_slug="graduation-party-ana",
        )


@pytest.fixture
def link_builder() -> LinkBuilder:
    return LinkBuilder(
        signer=RsvpLinkSigner("test-secret"),
        base_url="https://invites.example.com",
        grace_days=7,
    )


@pytest.fixture
def guest_id() -> UUID:
    return uuid4()


def signed_query(link_builder: LinkBuilder, guest_id: UUID) -> dict:
    url = urlparse(link_builder.rsvp_url(guest_id, DEADLINE, ISSUED_AT))
    return {key: values[0] for key, values in parse_qs(url.query).items()}


def overrides_at(now: datetime, write_model, link_builder) -> dict:
    return {
        get_rsvp_write_model: lambda: write_model,
        get_link_builder: lambda: link_builder,
        get_clock: lambda: lambda: now,
    }


async def test_submit_rsvp_attending(client_factory, link_builder, guest_id):
    memory = {}
    write_model = InMemoryRSVPWriteModel(memory, {guest_id})
    overrides = overrides_at(ISSUED_AT, write_model, link_builder)

    async with client_factory(overrides) as client:
        response = await client.post(
            RSVP_URL.format(guest_id=guest_id),
            params=signed_query(link_builder, guest_id),
            json={"attending": True, "plus_one": True, "plus_one_name": "Sam"},
        )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == GuestStatus.CONFIRMED.value
    assert data["seats_confirmed"] == 2
    assert data["member_names"] == ["Sam"]
    assert data["invitation_slug"] == "graduation-party-ana"
    assert "Thank you for confirming" in data["message"]
    assert memory[guest_id]["plus_one_name"] == "Sam"


async def test_submit_rsvp_not_attending(client_factory, link_builder, guest_id):
    write_model = InMemoryRSVPWriteModel({}, {guest_id})
    overrides = overrides_at(ISSUED_AT, write_model, link_builder)

    async with client_factory(overrides) as client:
        response = await client.post(
            RSVP_URL.format(guest_id=guest_id),
            params=signed_query(link_builder, guest_id),
            json={"attending": False},
        )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == GuestStatus.DECLINED.value
    assert data["seats_confirmed"] == 0
    assert "We're sorry you can't make it" in data["message"]


async def test_plus_one_without_name(client_factory, link_builder, guest_id):
    memory = {}
    write_model = InMemoryRSVPWriteModel(memory, {guest_id})
    overrides = overrides_at(ISSUED_AT, write_model, link_builder)

    async with client_factory(overrides) as client:
        response = await client.post(
            RSVP_URL.format(guest_id=guest_id),
            params=signed_query(link_builder, guest_id),
            json={"attending": True, "plus_one": True},
        )

    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == {"plus_one_name": "Enter your companion's name."}
    assert memory == {}


async def test_after_deadline_is_forbidden(client_factory, link_builder, guest_id):
    memory = {}
    write_model = InMemoryRSVPWriteModel(memory, {guest_id})
    overrides = overrides_at(datetime(2026, 5, 11, 9, 0, tzinfo=UTC), write_model, link_builder)

    async with client_factory(overrides) as client:
        response = await client.post(
            RSVP_URL.format(guest_id=guest_id),
            params=signed_query(link_builder, guest_id),
            json={"attending": True},
        )

    assert response.status_code == 403
    assert response.json()["detail"]["code"] == RsvpPeriodClosedError.code.value
    assert memory == {}


async def test_bad_signature_is_refused_before_anything_else(client_factory, link_builder, guest_id):
    memory = {}
    write_model = InMemoryRSVPWriteModel(memory, {guest_id})
    overrides = overrides_at(ISSUED_AT, write_model, link_builder)
    query = signed_query(link_builder, guest_id)
    query["signature"] = "forged"

    async with client_factory(overrides) as client:
        response = await client.post(
            RSVP_URL.format(guest_id=guest_id), params=query, json={"attending": True}
        )

    assert response.status_code == 403
    assert memory == {}


async def test_unknown_guest(client_factory, link_builder):
    guest_id = uuid4()
    write_model = InMemoryRSVPWriteModel({}, set())
    overrides = overrides_at(ISSUED_AT, write_model, link_builder)

    async with client_factory(overrides) as client:
        response = await client.post(
            RSVP_URL.format(guest_id=guest_id),
            params=signed_query(link_builder, guest_id),
            json={"attending": True},
        )

    assert response.status_code == 404
