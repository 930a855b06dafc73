from sqlalchemy import select

from src.invitations.repository.orm_models import Template
from src.invitations.templates import BUILTIN_TEMPLATES, seed_templates


async def test_seed_templates_is_repeatable(db_session):
    first = await seed_templates(db_session)
    second = await seed_templates(db_session)

    assert first == [t["key"] for t in BUILTIN_TEMPLATES]
    assert second == []
    keys = (await db_session.execute(select(Template.key).order_by(Template.key))).scalars().all()
    assert keys == ["grad_minimal_02", "grad_modern_01"]


async def test_seed_templates_reactivates(db_session):
    await seed_templates(db_session)
    template = await db_session.scalar(select(Template).where(Template.key == "grad_modern_01"))
    template.is_active = False
    await db_session.flush()

    await seed_templates(db_session)

    assert template.is_active is True
