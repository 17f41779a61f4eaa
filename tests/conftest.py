"""Shared fixtures for the Property Tenancy test suite.

Every test gets its own SQLite file under ``tmp_path`` so tests never share
state, plus an in-memory notification center standing in for the OS
notification service.
"""

from __future__ import annotations

from datetime import datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config import Settings
from database import Database
from main import create_app
from schemas import AddressCreate, TenancyCreate
from services import InMemoryNotificationCenter, ReminderScheduler, TenancyStore

# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_dir=str(tmp_path / "data"))


@pytest.fixture
def database(settings):
    db = Database(settings)
    db.open()
    yield db
    db.close()


@pytest.fixture
def store(database) -> TenancyStore:
    return TenancyStore(database)


# ---------------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------------


@pytest.fixture
def center() -> InMemoryNotificationCenter:
    return InMemoryNotificationCenter()


@pytest.fixture
def scheduler(center, store) -> ReminderScheduler:
    return ReminderScheduler(center, store=store)


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


@pytest.fixture
def app(settings, center):
    application = create_app(settings, notifications=center, run_startup_checks=False)
    yield application
    application.state.database.close()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


def make_address(**overrides) -> AddressCreate:
    values = {
        "title": "Unit 2",
        "line1": "456 Street",
        "line2": "Block B",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pin_code": "560001",
    }
    values.update(overrides)
    return AddressCreate(**values)


def make_tenancy(**overrides) -> TenancyCreate:
    values = {
        "name": "A",
        "contact": "98450 00000",
        "lease_start_date": datetime(2024, 1, 1),
        "lease_agreement_signed": True,
        "advance_amount": 50000.0,
        "agreed_rent": 15000.0,
        "monthly_due_date": 5,
        "agreement_signed_date": datetime(2024, 1, 1),
        "comments": "",
    }
    values.update(overrides)
    return TenancyCreate(**values)
