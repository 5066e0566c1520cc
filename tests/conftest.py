# tests/conftest.py
import os

# Point the app at a private in-memory store before anything imports the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from carebridge import crud, models
from carebridge.database import SessionLocal, create_tables, drop_tables
from carebridge.main import app


@pytest.fixture
def db():
    create_tables()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_tables()


@pytest_asyncio.fixture
async def async_client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def doctor(db):
    return crud.create_user(
        db,
        models.UserRole.doctor,
        {"name": "Dr. Amit Verma", "email": "amit@example.com", "gender": "Male", "age": 42},
        {"specialization": "General Medicine", "rating": 4.8, "reviews": 210, "consultation_fee": 650},
    )


@pytest.fixture
def patient(db):
    return crud.create_user(
        db,
        models.UserRole.patient,
        {"name": "Rahul Sharma", "email": "rahul@example.com", "gender": "Male", "age": 27},
    )


@pytest.fixture
def other_patient(db):
    return crud.create_user(
        db,
        models.UserRole.patient,
        {"name": "Neha Gupta", "gender": "Female"},
    )
