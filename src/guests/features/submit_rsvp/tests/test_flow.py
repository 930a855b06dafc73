"""Admin adds a guest, the guest answers through the signed link."""

from urllib.parse import parse_qs, urlparse

from src.guests.urls import GUESTS_URL, RSVP_URL
from src.invitations.urls import INVITATION_URL, INVITATIONS_URL


async def test_guest_answers_through_the_dashboard_link(client, admin_headers, committed_template_id):
    invitation = (
        await client.post(
            INVITATIONS_URL,
            json={
                "template_id": str(committed_template_id),
                "event_name": "Graduation Party",
                "host_name": "Ana López",
                "venue_name": "Salón Jardín",
                "event_date": "2026-12-12",
                "event_time": "19:30:00",
                "capacity": 10,
            },
            headers=admin_headers,
        )
    ).json()
    guest = (
        await client.post(
            GUESTS_URL.format(invitation_id=invitation["id"]),
            json={"type": "individual", "display_name": "Ana", "allow_plus_one": True},
            headers=admin_headers,
        )
    ).json()

    detail = (
        await client.get(INVITATION_URL.format(invitation_id=invitation["id"]), headers=admin_headers)
    ).json()
    rsvp_url = urlparse(detail["guests"][0]["links"]["rsvp_url"])
    query = {key: values[0] for key, values in parse_qs(rsvp_url.query).items()}
    url = RSVP_URL.format(guest_id=guest["id"])

    missing_name = await client.post(
        url, params=query, json={"attending": True, "plus_one": True, "plus_one_name": " "}
    )
    assert missing_name.status_code == 422

    response = await client.post(
        url, params=query, json={"attending": True, "plus_one": True, "plus_one_name": "Sam"}
    )
    assert response.status_code == 200
    assert response.json()["seats_confirmed"] == 2
    assert response.json()["invitation_slug"] == invitation["slug"]

    page = (await client.get(url, params=query)).json()
    assert page["guest"]["status"] == "confirmed"
    assert page["guest"]["member_names"] == ["Sam"]
    assert page["is_closed"] is False

    stats = (
        await client.get(INVITATION_URL.format(invitation_id=invitation["id"]), headers=admin_headers)
    ).json()["stats"]
    assert stats["reserved_seats"] == 2
    assert stats["confirmed_seats"] == 2
    assert stats["confirmed_guests"] == 1
