import asyncio
import os
import tempfile

_tmp_dir = tempfile.mkdtemp(prefix="attendance-tests-")

# Settings are read at import time, so the environment is prepared first
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir}/test.db"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["RESEND_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "warning"

import pytest
from fastapi.testclient import TestClient

from app.core.database import AsyncSessionLocal, engine
from app.main import app
from app.models import Base

PASSWORD = "secret123"


async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def client():
    asyncio.run(_reset_schema())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def run_db():
    """Run ``fn(session)`` against the test database and return its result"""
    def _run(fn):
        async def _inner():
            async with AsyncSessionLocal() as session:
                return await fn(session)
        return asyncio.run(_inner())
    return _run


def register(client, name, email, password=PASSWORD, role="teacher"):
    return client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )


def login(client, email, password=PASSWORD):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    assert register(client, "Admin", "admin@school.com").status_code == 201
    return login(client, "admin@school.com")


@pytest.fixture
def teacher_headers(client, admin_headers):
    user = register(client, "Tina", "tina@school.com").json()["user"]
    approved = client.post(
        "/api/users/approve", json={"user_id": user["id"], "approved": True}, headers=admin_headers
    )
    assert approved.status_code == 200, approved.text
    return login(client, "tina@school.com")


def create_class(client, headers, **overrides):
    payload = {
        "name": "Math 101",
        "subject": "Math",
        "teacher": "Mr. Karimi",
        "time": "08:00",
        "start_date": "2026-01-10",
    }
    payload.update(overrides)
    response = client.post("/api/classes", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_student(client, headers, class_id, name="Ali"):
    payload = {"name": name, "father_name": "Reza", "gender": "male", "class_id": class_id}
    response = client.post("/api/students", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
