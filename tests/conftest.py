import os
import uuid

# Settings are read at import time, so the environment must be ready first
os.environ["ENV"] = "testing"
os.environ["DATABASE_URL"] = "mongodb://localhost:27017"
os.environ["DATABASE_NAME"] = "gainsly_test"
os.environ["SECRET_KEY"] = "test-secret-key-for-gainsly"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from database import Database
from gainsly.models.mongodb import ExerciseDocument
from main import app


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory MongoDB with Beanie initialized for every test"""
    mongo = AsyncMongoMockClient()
    database = mongo[f"gainsly_test_{uuid.uuid4().hex}"]
    await Database.init_models(database)
    yield database


@pytest_asyncio.fixture
async def client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def register(client):
    """Register a user and return the response body"""

    async def _register(name="Alex Lifter", email=None, password="secret1"):
        email = email or f"{uuid.uuid4().hex[:8]}@gainsly.app"
        response = await client.post(
            "/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def user(register):
    body = await register(name="Alex Lifter", email="alex@gainsly.app")
    body["headers"] = bearer(body["token"])
    return body


@pytest_asyncio.fixture
async def other_user(register):
    body = await register(name="Sam Spotter", email="sam@gainsly.app")
    body["headers"] = bearer(body["token"])
    return body


@pytest_asyncio.fixture
async def exercises(db):
    """A small catalogue inserted straight into the database"""
    docs = [
        ExerciseDocument(name="Bench Press", muscle_group="Chest"),
        ExerciseDocument(name="Barbell Squat", muscle_group="Legs"),
        ExerciseDocument(name="Pull-ups", muscle_group="Back"),
    ]
    for doc in docs:
        await doc.insert()
    return {doc.name: str(doc.id) for doc in docs}
