"""Guest access links.

Two independent credentials are handed out per guest:

- the *public token*: a long random string stored on the guest, never rotated.
  Together with the guest id it personalises the public invitation preview.
- the *signed RSVP link*: an HMAC signature over the guest id and an expiry
  timestamp. It is required to view and submit the RSVP form.
"""

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from urllib.parse import urlencode
from uuid import UUID

from itsdangerous import Signer

from src.config.settings import Settings, settings
from src.errors import LinkUnauthorizedError
from src.guests.rsvp import deadline_cutoff

logger = logging.getLogger(__name__)

PUBLIC_TOKEN_BYTES = 30  # 40 url-safe characters


def generate_public_token() -> str:
    return secrets.token_urlsafe(PUBLIC_TOKEN_BYTES)


def token_matches(stored: str, supplied: str | None) -> bool:
    if not supplied:
        return False
    return hmac.compare_digest(stored.encode(), supplied.encode())


@dataclass(frozen=True)
class SignedLink:
    guest_id: UUID
    expires: int
    signature: str

    @property
    def query(self) -> str:
        return urlencode({"expires": self.expires, "signature": self.signature})


class RsvpLinkSigner:
    """Signs and verifies (guest id, expiry) envelopes."""

    def __init__(self, secret_key: str, salt: str = "rsvp-link") -> None:
        self._signer = Signer(secret_key, salt=salt, digest_method=hashlib.sha256)

    @staticmethod
    def _payload(guest_id: UUID, expires: int) -> str:
        return f"{guest_id}:{expires}"

    def sign(self, guest_id: UUID, expires_at: datetime) -> SignedLink:
        expires = int(expires_at.timestamp())
        signature = self._signer.get_signature(self._payload(guest_id, expires)).decode()
        return SignedLink(guest_id=guest_id, expires=expires, signature=signature)

    def verify(
        self,
        guest_id: UUID,
        expires: int | None,
        signature: str | None,
        now: datetime,
    ) -> None:
        """Raise LinkUnauthorizedError unless the link is authentic and unexpired."""
        if expires is None or not signature:
            raise LinkUnauthorizedError()
        if not self._signer.verify_signature(self._payload(guest_id, expires), signature):
            logger.warning("Rejected RSVP link with a bad signature for guest %s", guest_id)
            raise LinkUnauthorizedError()
        if now.timestamp() > expires:
            logger.info("Rejected expired RSVP link for guest %s", guest_id)
            raise LinkUnauthorizedError("This link has expired. Ask your host for a new one.")


class LinkBuilder:
    """Builds the shareable preview and RSVP URLs of a guest."""

    def __init__(
        self,
        signer: RsvpLinkSigner,
        base_url: str,
        timezone: str = "UTC",
        fallback_days: int = 30,
        grace_days: int = 0,
    ) -> None:
        self.signer = signer
        self._base_url = base_url.rstrip("/")
        self._timezone = timezone
        self._fallback_days = fallback_days
        self._grace_days = grace_days

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "LinkBuilder":
        return cls(
            signer=RsvpLinkSigner(config.secret_key),
            base_url=config.frontend_url,
            timezone=config.event_timezone,
            fallback_days=config.rsvp_link_fallback_days,
            grace_days=config.rsvp_link_grace_days,
        )

    def link_expiry(self, deadline: date | None, now: datetime) -> datetime:
        """End of the deadline day plus the grace days, so the closed RSVP page stays readable."""
        if deadline is not None:
            return deadline_cutoff(deadline, self._timezone) + timedelta(days=self._grace_days)
        return now + timedelta(days=self._fallback_days)

    def preview_url(self, slug: str, guest_id: UUID, public_token: str) -> str:
        query = urlencode({"g": str(guest_id), "s": public_token})
        return f"{self._base_url}/i/{slug}?{query}"

    def rsvp_link(self, guest_id: UUID, deadline: date | None, now: datetime) -> SignedLink:
        return self.signer.sign(guest_id, self.link_expiry(deadline, now))

    def rsvp_url(self, guest_id: UUID, deadline: date | None, now: datetime) -> str:
        link = self.rsvp_link(guest_id, deadline, now)
        return f"{self._base_url}/rsvp/{guest_id}?{link.query}"

    def verify(
        self,
        guest_id: UUID,
        expires: int | None,
        signature: str | None,
        now: datetime,
    ) -> None:
        self.signer.verify(guest_id, expires, signature, now)


def get_link_builder() -> LinkBuilder:
    """Dependency to get the link builder."""
    return LinkBuilder.from_settings()
