from urllib.parse import parse_qs, urlparse

import pytest

from src.guests.urls import GUESTS_URL, RSVP_URL
from src.invitations.urls import INVITATIONS_URL, PUBLIC_INVITATION_URL, PUBLISH_INVITATION_URL


@pytest.fixture
async def draft(client, admin_headers, committed_template_id) -> dict:
    payload = {
        "template_id": str(committed_template_id),
        "event_name": "Graduation Party",
        "host_name": "Ana López",
        "venue_name": "Salón Jardín",
        "event_date": "2026-12-12",
        "event_time": "19:30:00",
        "capacity": 10,
        "dress_code": "Formal",
    }
    response = await client.post(INVITATIONS_URL, json=payload, headers=admin_headers)
    return response.json()


@pytest.fixture
async def guest(client, admin_headers, draft) -> dict:
    response = await client.post(
        GUESTS_URL.format(invitation_id=draft["id"]),
        json={"type": "group", "display_name": "The Smiths", "seats_reserved": 3},
        headers=admin_headers,
    )
    return response.json()


@pytest.fixture
async def published(client, admin_headers, draft) -> dict:
    await client.post(PUBLISH_INVITATION_URL.format(invitation_id=draft["id"]), headers=admin_headers)
    return draft


async def test_draft_is_hidden_from_the_public(client, draft):
    response = await client.get(PUBLIC_INVITATION_URL.format(slug=draft["slug"]))

    assert response.status_code == 404


async def test_admin_can_preview_a_draft(client, admin_headers, draft):
    response = await client.get(PUBLIC_INVITATION_URL.format(slug=draft["slug"]), headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["event_name"] == "Graduation Party"


async def test_unknown_slug(client):
    response = await client.get(PUBLIC_INVITATION_URL.format(slug="nothing-here"))

    assert response.status_code == 404


async def test_published_invitation_without_guest(client, published):
    response = await client.get(PUBLIC_INVITATION_URL.format(slug=published["slug"]))

    assert response.status_code == 200
    data = response.json()
    assert data["slug"] == published["slug"]
    assert data["template_key"] == "grad_modern_01"
    assert data["dress_code"] == "Formal"
    assert data["guest"] is None
    assert "id" not in data
    assert "capacity" not in data


async def test_guest_context_with_matching_token(client, published, guest):
    response = await client.get(
        PUBLIC_INVITATION_URL.format(slug=published["slug"]),
        params={"g": guest["id"], "s": guest["public_token"]},
    )

    assert response.status_code == 200
    context = response.json()["guest"]
    assert context["guest_id"] == guest["id"]
    assert context["display_name"] == "The Smiths"
    assert context["seats_reserved"] == 3
    assert context["status"] == "pending"

    rsvp = urlparse(context["rsvp_url"])
    assert rsvp.path == f"/rsvp/{guest['id']}"
    query = {key: values[0] for key, values in parse_qs(rsvp.query).items()}
    page = await client.get(RSVP_URL.format(guest_id=guest["id"]), params=query)
    assert page.status_code == 200
    assert page.json()["guest"]["display_name"] == "The Smiths"


async def test_wrong_token_renders_without_guest(client, published, guest):
    response = await client.get(
        PUBLIC_INVITATION_URL.format(slug=published["slug"]),
        params={"g": guest["id"], "s": "not-the-token"},
    )

    assert response.status_code == 200
    assert response.json()["guest"] is None


async def test_malformed_guest_id_renders_without_guest(client, published, guest):
    response = await client.get(
        PUBLIC_INVITATION_URL.format(slug=published["slug"]),
        params={"g": "not-a-uuid", "s": guest["public_token"]},
    )

    assert response.status_code == 200
    assert response.json()["guest"] is None
