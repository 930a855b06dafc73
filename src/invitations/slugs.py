import re
import unicodedata

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.invitations.repository.orm_models import Invitation

FALLBACK_SLUG = "invitation"


def slugify(text: str) -> str:
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9]+", "-", ascii_text.lower()).strip("-")


async def unique_slug(session: AsyncSession, event_name: str, host_name: str) -> str:
    """Slug from event and host name, suffixed with -2, -3, ... on collision."""
    base_slug = slugify(f"{event_name}-{host_name}") or FALLBACK_SLUG
    slug = base_slug
    suffix = 2
    while await _slug_exists(session, slug):
        slug = f"{base_slug}-{suffix}"
        suffix += 1
    return slug


async def _slug_exists(session: AsyncSession, slug: str) -> bool:
    result = await session.execute(select(Invitation.uuid).where(Invitation.slug == slug))
    return result.first() is not None
