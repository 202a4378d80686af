# tests/conftest.py
from datetime import timedelta
from typing import List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.model_registry  # noqa: F401  registers every model on Base
from app.database.connection import Base, get_db
from app.helpers.time import utcnow
from app.system_models.patient_model.patient_model import Patient
from app.system_services.dependencies import get_text_generator


class FakeTextGenerator:
    """Canned replies in order; records every prompt it was given."""

    def __init__(self, replies: Optional[List[str]] = None, json_replies: Optional[List[dict]] = None,
                 error: Optional[Exception] = None, json_error: Optional[Exception] = None):
        self.replies = list(replies or [])
        self.json_replies = list(json_replies or [])
        self.error = error
        self.json_error = json_error
        self.calls = []
        self.json_calls = []

    async def generate(self, messages, max_tokens):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""

    async def generate_json(self, messages, max_tokens, schema):
        self.json_calls.append(list(messages))
        if self.json_error is not None:
            raise self.json_error
        reply = self.json_replies.pop(0) if self.json_replies else {}
        return schema.model_validate(reply)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def text_generator():
    return FakeTextGenerator()


@pytest.fixture
async def client(session_factory, text_generator):
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_text_generator] = lambda: text_generator
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register_and_login(client, username="residente", role="resident"):
    await client.post(
        "/api/auth/register",
        json={
            "username": username,
            "email": f"{username}@hospital.org",
            "password": "senha-segura-123",
            "name": "Dra. Residente",
            "crm": "123456-SP",
            "role": role,
        },
    )
    response = await client.post(
        "/api/auth/login", json={"username": username, "password": "senha-segura-123"}
    )
    return response.json()


@pytest.fixture
async def auth_headers(client):
    tokens = await register_and_login(client)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest.fixture
def make_patient(db):
    async def _make(**overrides):
        values = {
            "name": "Maria Silva",
            "age": 54,
            "leito": "12A",
            "unidade": "Hemato",
            "dih": utcnow() - timedelta(days=10),
        }
        values.update(overrides)
        patient = Patient(**values)
        db.add(patient)
        await db.commit()
        return patient

    return _make
