"""Tests for guest preview tokens and signed RSVP links."""

from datetime import UTC, date, datetime, timedelta
from urllib.parse import parse_qs, urlparse
from uuid import uuid4

import pytest

from src.errors import LinkUnauthorizedError
from src.guests.links import (
    LinkBuilder,
    RsvpLinkSigner,
    generate_public_token,
    token_matches,
)

NOW = datetime(2026, 4, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def signer() -> RsvpLinkSigner:
    return RsvpLinkSigner("test-secret")


@pytest.fixture
def link_builder(signer) -> LinkBuilder:
    return LinkBuilder(
        signer=signer,
        base_url="https://invites.example.com/",
        fallback_days=30,
        grace_days=7,
    )


def test_public_tokens_are_long_and_unique():
    tokens = {generate_public_token() for _ in range(50)}

    assert len(tokens) == 50
    assert all(len(token) >= 40 for token in tokens)


def test_token_matches():
    token = generate_public_token()

    assert token_matches(token, token)
    assert not token_matches(token, token[:-1] + ("A" if token[-1] != "A" else "B"))
    assert not token_matches(token, "")
    assert not token_matches(token, None)


def test_signed_link_verifies(signer):
    guest_id = uuid4()
    link = signer.sign(guest_id, NOW + timedelta(days=1))

    signer.verify(guest_id, link.expires, link.signature, NOW)


def test_signature_is_bound_to_guest(signer):
    link = signer.sign(uuid4(), NOW + timedelta(days=1))

    with pytest.raises(LinkUnauthorizedError):
        signer.verify(uuid4(), link.expires, link.signature, NOW)


def test_tampered_expiry_is_rejected(signer):
    guest_id = uuid4()
    link = signer.sign(guest_id, NOW + timedelta(days=1))

    with pytest.raises(LinkUnauthorizedError):
        signer.verify(guest_id, link.expires + 3600, link.signature, NOW)


def test_signature_from_another_secret_is_rejected(signer):
    guest_id = uuid4()
    link = RsvpLinkSigner("other-secret").sign(guest_id, NOW + timedelta(days=1))

    with pytest.raises(LinkUnauthorizedError):
        signer.verify(guest_id, link.expires, link.signature, NOW)


def test_missing_parameters_are_rejected(signer):
    guest_id = uuid4()
    link = signer.sign(guest_id, NOW + timedelta(days=1))

    with pytest.raises(LinkUnauthorizedError):
        signer.verify(guest_id, None, link.signature, NOW)
    with pytest.raises(LinkUnauthorizedError):
        signer.verify(guest_id, link.expires, None, NOW)


def test_expired_link_is_rejected(signer):
    guest_id = uuid4()
    link = signer.sign(guest_id, NOW - timedelta(seconds=1))

    with pytest.raises(LinkUnauthorizedError) as exc_info:
        signer.verify(guest_id, link.expires, link.signature, NOW)

    assert "expired" in exc_info.value.message
    assert exc_info.value.status_code == 403


def test_link_expiry_without_deadline_uses_fallback(link_builder):
    assert link_builder.link_expiry(None, NOW) == NOW + timedelta(days=30)


def test_link_expiry_outlives_deadline_by_grace_period(link_builder):
    expiry = link_builder.link_expiry(date(2026, 5, 10), NOW)

    assert expiry.date() == date(2026, 5, 17)
    assert expiry > datetime(2026, 5, 10, 23, 59, tzinfo=UTC)


def test_preview_url_carries_guest_and_token(link_builder):
    guest_id = uuid4()

    url = urlparse(link_builder.preview_url("graduation-ana", guest_id, "secret-token"))

    assert url.netloc == "invites.example.com"
    assert url.path == "/i/graduation-ana"
    assert parse_qs(url.query) == {"g": [str(guest_id)], "s": ["secret-token"]}


def test_rsvp_url_round_trip(link_builder):
    guest_id = uuid4()

    url = urlparse(link_builder.rsvp_url(guest_id, None, NOW))
    query = parse_qs(url.query)

    assert url.path == f"/rsvp/{guest_id}"
    link_builder.verify(guest_id, int(query["expires"][0]), query["signature"][0], NOW)
