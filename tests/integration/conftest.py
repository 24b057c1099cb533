from types import SimpleNamespace
from uuid import uuid4

import pytest
import pytest_asyncio
from fastapi import Depends
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain.entities  # noqa: F401  registers every table on SQLModel.metadata
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.webhook_delivery_channel import WebhookDeliveryChannel
from src.api.utils.jwt import generate_jwt
from src.depends import (
    enable_sqlite_immediate_transactions,
    get_delivery_channel,
    get_unit_of_work,
)
from src.domain.entities import Event, Guest, Household

API = "/api"


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = enable_sqlite_immediate_transactions(
        create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def webhook_urls():
    """Per-channel webhook map; empty means every delivery fails."""
    return {}


@pytest_asyncio.fixture
async def client(db_session, webhook_urls):
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    def override_get_delivery_channel(uow=Depends(get_unit_of_work)):
        return WebhookDeliveryChannel(
            uow, webhook_urls=webhook_urls, public_site_url="https://wedding.test", timeout=2
        )

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_delivery_channel] = override_get_delivery_channel

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def wedding_id():
    return uuid4()


@pytest.fixture
def operator_id():
    return uuid4()


@pytest.fixture
def auth_headers(wedding_id, operator_id):
    return {"Authorization": f"Bearer {generate_jwt(operator_id, wedding_id)}"}


@pytest_asyncio.fixture
async def seeded(db_session, wedding_id):
    """One household with an adult and a child, plus an active event."""
    household = Household(wedding_id=wedding_id, name="Oliveira Family")
    db_session.add(household)
    await db_session.flush()

    adult = Guest(wedding_id=wedding_id, household_id=household.id, name="Marta Oliveira")
    adult.set_contacts("marta@example.com", "+351 912 345 678")
    child = Guest(wedding_id=wedding_id, household_id=household.id, name="Tiago Oliveira", is_child=True)
    event = Event(wedding_id=wedding_id, name="Ceremony", slug="ceremony", is_active=True)
    db_session.add_all([adult, child, event])
    await db_session.commit()

    # Plain ids: a request that rolls back expires every instance in the shared session
    return SimpleNamespace(
        household_id=household.id,
        adult_id=adult.id,
        adult_email=adult.email,
        child_id=child.id,
        event_id=event.id,
    )
