"""Shared fixtures: a fresh file-backed database and media directory per test."""

from __future__ import annotations

import itertools
from datetime import date, time

import pytest_asyncio

from fieldtech.db import crud
from fieldtech.db.engine import Database
from fieldtech.services.auth import hash_password
from fieldtech.services.media_store import MediaStore
from fieldtech.tickets.service import TicketService

TEST_PASSWORD = "testpass123"


@pytest_asyncio.fixture
async def database(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'fieldtech.db'}")
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def media_store(tmp_path):
    return MediaStore(tmp_path / "uploads", "/uploads")


@pytest_asyncio.fixture
async def service(database, media_store):
    return TicketService(database, media_store)


@pytest_asyncio.fixture
async def technicians(database):
    """Two technicians, alice and bob, sharing TEST_PASSWORD."""
    password_hash = hash_password(TEST_PASSWORD)
    async with database.transaction() as db:
        alice = await crud.create_technician(
            db, name="Alice Field", username="alice", password_hash=password_hash,
            email="alice@example.com", role="Senior Technician",
        )
        bob = await crud.create_technician(
            db, name="Bob Wire", username="bob", password_hash=password_hash,
            email="bob@example.com",
        )
    return alice, bob


@pytest_asyncio.fixture
async def make_ticket(service):
    counter = itertools.count(1)

    async def _make(technician, status=None, scheduled_date=date(2024, 11, 25), scheduled_time=time(9, 0)):
        return await service.create_ticket(
            technician_id=technician.id,
            ticket_number=f"T-{next(counter):03d}",
            customer_name="Acme Corporation",
            customer_address="123 Business Ave",
            job_location="Server room",
            work_to_do="Install fiber",
            scheduled_date=scheduled_date,
            scheduled_time=scheduled_time,
            status=status,
        )

    return _make
