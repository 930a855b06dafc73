"""Built-in invitation designs. The frontend renders each one by its key."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.invitations.repository.orm_models import Template

logger = logging.getLogger(__name__)

BUILTIN_TEMPLATES = [
    {
        "key": "grad_modern_01",
        "name": "Graduation - Modern Glass",
        "description": "Glassmorphism with a modern layout.",
        "preview_image_url": "/images/templates/grad_modern_01.png",
    },
    {
        "key": "grad_minimal_02",
        "name": "Graduation - Minimal Clean",
        "description": "Minimalist, elegant typography.",
        "preview_image_url": "/images/templates/grad_minimal_02.png",
    },
]


async def seed_templates(session: AsyncSession) -> list[str]:
    """Insert or refresh the built-in templates. Returns the keys that were created."""
    created = []
    for values in BUILTIN_TEMPLATES:
        result = await session.execute(select(Template).where(Template.key == values["key"]))
        template = result.scalar_one_or_none()
        if template is None:
            session.add(Template(**values, is_active=True))
            created.append(values["key"])
        else:
            template.name = values["name"]
            template.description = values["description"]
            template.preview_image_url = values["preview_image_url"]
            template.is_active = True
    await session.flush()
    logger.info("Seeded templates, created: %s", ", ".join(created) or "none")
    return created
