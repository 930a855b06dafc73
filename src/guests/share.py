import re
from datetime import date, time
from urllib.parse import quote

from src.guests.dtos import GuestDTO, GuestKind

WHATSAPP_BASE_URL = "https://wa.me/"


def whatsapp_url(message: str, phone: str | None = None) -> str:
    text = quote(message, safe="")
    cleaned = re.sub(r"[^\d+]", "", phone or "").removeprefix("+")
    if cleaned:
        return f"{WHATSAPP_BASE_URL}{cleaned}?text={text}"
    return f"{WHATSAPP_BASE_URL}?text={text}"


def invitation_message(
    guest: GuestDTO,
    event_name: str,
    event_date: date | None,
    event_time: time | None,
    venue_name: str | None,
    preview_url: str,
) -> str:
    when = event_date.isoformat() if event_date else ""
    at = f" {event_time.strftime('%H:%M')}" if event_time else ""
    venue = f" at {venue_name}" if venue_name else ""

    if guest.kind == GuestKind.GROUP:
        return (
            f"Hi {guest.display_name}, you are all invited to *{event_name}* 🎉\n"
            f"You have {guest.seats_reserved} seats reserved.\n"
            f"📍{venue}\n"
            f"🗓️ {when} ⏰{at}\n\n"
            f"Confirm here: {preview_url}"
        )
    return (
        f"Hi {guest.display_name}, you are invited to *{event_name}* 🎉\n"
        f"📍{venue}\n"
        f"🗓️ {when} ⏰{at}\n\n"
        f"Confirm here: {preview_url}"
    )
