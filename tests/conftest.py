"""
Shared fixtures.

Settings are read once at import, so the environment is prepared before any
`app` module is imported.
"""
import base64
import os
import tempfile
import time
import uuid
from datetime import date

_db_dir = tempfile.mkdtemp(prefix="hrms-tests-")

TEST_JWT_KEY = "test-session-signing-key"
TEST_WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"pepl-hrms-test-webhook-secret").decode()

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["CLERK_JWT_KEY"] = TEST_JWT_KEY
os.environ["CLERK_JWT_ALGORITHM"] = "HS256"
os.environ["CLERK_AUTHORIZED_PARTIES"] = "[]"
os.environ["CLERK_WEBHOOK_SECRET"] = TEST_WEBHOOK_SECRET
os.environ["GEMINI_API_KEY"] = ""
os.environ["SUPABASE_URL"] = ""
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["DEBUG"] = "false"
os.environ["DEFAULT_GROUP_ID"] = ""
os.environ["DEFAULT_COMPANY_ID"] = ""

import pytest
from httpx import AsyncClient, ASGITransport
from jose import jwt

from app.database import Base, engine, async_session_factory
from app.main import app
from app import models  # noqa: F401
from app.models.employee import Employee
from app.models.organization import Group, Company


TEST_CLERK_ID = "user_2test0000000000000000000"


def make_token(sub: str = TEST_CLERK_ID, expires_in: int = 3600, **claims) -> str:
    now = int(time.time())
    payload = {"sub": sub, "sid": "sess_test", "iat": now, "exp": now + expires_in, **claims}
    return jwt.encode(payload, TEST_JWT_KEY, algorithm="HS256")


@pytest.fixture(autouse=True)
async def database():
    """Fresh schema per test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
async def db_session():
    async with async_session_factory() as session:
        yield session


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Authorization": f"Bearer {make_token()}"},
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def company(db_session) -> Company:
    group = Group(name="PEPL Group")
    db_session.add(group)
    await db_session.flush()

    company = Company(
        group_id=group.id,
        name="PEPL",
        legal_name="PEPL Private Limited",
        code="PEPL",
        registered_address="12 MG Road, Bengaluru",
    )
    db_session.add(company)
    await db_session.commit()
    return company


@pytest.fixture
def make_employee(db_session, company):
    """Factory for committed employees of the default company."""
    counter = {"n": 0}

    async def _make(**overrides) -> Employee:
        counter["n"] += 1
        n = counter["n"]
        values = {
            "group_id": company.group_id,
            "company_id": company.id,
            "employee_code": f"EMP-{n:04d}",
            "first_name": f"Employee{n}",
            "last_name": "Test",
            "personal_email": f"employee{n}@pepl.co.in",
            "joining_date": date(2024, 1, 15),
        }
        values.update(overrides)
        employee = Employee(**values)
        db_session.add(employee)
        await db_session.commit()
        return employee

    return _make


def new_id() -> str:
    return str(uuid.uuid4())
