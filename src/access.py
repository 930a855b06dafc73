"""Viewer capability passed explicitly into reads that depend on who is asking.

Admin authentication itself is out of scope; the admin surface is guarded by a
shared API key sent in the ``X-Admin-Key`` header.
"""

import hmac
import logging
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status

from src.config.settings import settings

logger = logging.getLogger(__name__)

ADMIN_KEY_HEADER = "X-Admin-Key"


@dataclass(frozen=True)
class Viewer:
    is_admin: bool = False


ANONYMOUS = Viewer(is_admin=False)
ADMIN = Viewer(is_admin=True)


def viewer_for_key(admin_key: str | None, expected_key: str | None = None) -> Viewer:
    expected_key = expected_key if expected_key is not None else settings.admin_api_key
    if admin_key and expected_key and hmac.compare_digest(admin_key.encode(), expected_key.encode()):
        return ADMIN
    return ANONYMOUS


def get_viewer(x_admin_key: str | None = Header(default=None)) -> Viewer:
    """Dependency resolving the viewer; anonymous unless a valid admin key is sent."""
    return viewer_for_key(x_admin_key)


def require_admin(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    if not viewer.is_admin:
        logger.warning("Rejected admin request without a valid %s header", ADMIN_KEY_HEADER)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return viewer
