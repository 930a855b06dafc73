import contextlib
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient

from src.access import ADMIN_KEY_HEADER
from src.config.database import async_session_maker, engine
from src.config.settings import settings
from src.guests.repository.orm_models import Guest  # noqa: F401 - registers the table
from src.invitations.repository.orm_models import Template
from src.invitations.tests.factories import create_template
from src.main import app
from src.models.base import BaseModel


@pytest.fixture(scope="function")
async def db_schema():
    """Create a fresh schema in the test database."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
        await conn.run_sync(BaseModel.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)


@pytest.fixture(scope="function")
async def db_session(db_schema):
    """A session whose work is rolled back after the test."""
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def client_factory():
    """Build a test client with dependency overrides applied."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest.fixture(scope="function")
async def client(client_factory, db_schema):
    """Create a test client backed by the test database."""
    async with client_factory() as ac:
        yield ac


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {ADMIN_KEY_HEADER: settings.admin_api_key}


@pytest.fixture
async def template(db_session) -> Template:
    return await create_template(db_session)


@pytest.fixture
async def committed_template_id(db_schema) -> UUID:
    """A template committed to the database, visible to the app's own sessions."""
    async with async_session_maker() as session:
        template = await create_template(session)
        template_id = template.uuid
        await session.commit()
    return template_id
