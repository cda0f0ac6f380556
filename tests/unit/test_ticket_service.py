"""Lifecycle behaviour of TicketService against a real SQLite file."""

from __future__ import annotations

import asyncio
from datetime import date, time
from pathlib import Path

import pytest

from fieldtech.db import crud
from fieldtech.errors import NotFoundError, ValidationError
from fieldtech.services.media_store import MediaStore
from fieldtech.tickets.models import MediaUpload
from fieldtech.tickets.service import InvalidTicketStatusError, TicketNotFoundError, TicketService
from fieldtech.tickets.state import SignatureSlot, TicketStatus


async def _status(database, ticket_id) -> str:
    async with database.session() as db:
        return (await crud.get_ticket(db, ticket_id)).status


def _upload(name="photo.jpg", content_type="image/jpeg", data=b"\xff\xd8fake"):
    return MediaUpload(filename=name, content_type=content_type, data=data)


# ── Work log ──────────────────────────────────────────────

async def test_work_log_moves_assigned_ticket_to_in_progress(service, database, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice)

    work_log = await service.submit_work_log(ticket.id, alice.id, "inspected panel")

    assert work_log.work_description == "inspected panel"
    assert await _status(database, ticket.id) == "In Progress"


async def test_second_work_log_updates_the_same_row(service, database, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice)

    first = await service.submit_work_log(ticket.id, alice.id, "first")
    await asyncio.sleep(0.01)
    second = await service.submit_work_log(ticket.id, alice.id, "second")

    assert second.id == first.id
    assert second.work_description == "second"
    assert second.updated_at > first.updated_at
    assert await _status(database, ticket.id) == "In Progress"
    async with database.session() as db:
        assert (await crud.count_child_rows(db, ticket.id))["ticket_work_logs"] == 1


@pytest.mark.parametrize("status", [TicketStatus.COMPLETED, TicketStatus.SIGNED])
async def test_work_log_keeps_later_statuses(service, database, technicians, make_ticket, status):
    alice, _ = technicians
    ticket = await make_ticket(alice, status=status)

    await service.submit_work_log(ticket.id, alice.id, "follow-up visit")

    assert await _status(database, ticket.id) == status.value


@pytest.mark.parametrize("description", ["", "   "])
async def test_empty_work_log_is_rejected(service, database, technicians, make_ticket, description):
    alice, _ = technicians
    ticket = await make_ticket(alice)

    with pytest.raises(ValidationError, match="Work description is required"):
        await service.submit_work_log(ticket.id, alice.id, description)

    assert await _status(database, ticket.id) == "Assigned"
    async with database.session() as db:
        assert await crud.get_work_log(db, ticket.id) is None


# ── Ownership ─────────────────────────────────────────────

async def test_foreign_ticket_looks_like_a_missing_one(service, technicians, make_ticket):
    alice, bob = technicians
    ticket = await make_ticket(alice)

    with pytest.raises(TicketNotFoundError) as foreign:
        await service.get_ticket_detail(ticket.id, bob.id)
    with pytest.raises(TicketNotFoundError) as missing:
        await service.get_ticket_detail("01HZZZZZZZZZZZZZZZZZZZZZZZ", bob.id)

    assert foreign.value.message == missing.value.message == "Ticket not found"
    assert foreign.value.status_code == missing.value.status_code == 404


async def test_writes_on_foreign_ticket_change_nothing(service, database, technicians, make_ticket):
    alice, bob = technicians
    ticket = await make_ticket(alice)

    with pytest.raises(TicketNotFoundError):
        await service.submit_work_log(ticket.id, bob.id, "not mine")
    with pytest.raises(TicketNotFoundError):
        await service.capture_signature(ticket.id, bob.id, "Jane", "img")
    with pytest.raises(TicketNotFoundError):
        await service.set_status(ticket.id, bob.id, "Completed")
    with pytest.raises(TicketNotFoundError):
        await service.attach_media(ticket.id, bob.id, [_upload()])

    assert await _status(database, ticket.id) == "Assigned"
    async with database.session() as db:
        assert set((await crud.count_child_rows(db, ticket.id)).values()) == {0}


async def test_list_my_tickets_only_returns_own_tickets(service, technicians, make_ticket):
    alice, bob = technicians
    mine = [await make_ticket(alice), await make_ticket(alice)]
    await make_ticket(bob)

    listed = await service.list_my_tickets(alice.id)

    assert {t.id for t in listed} == {t.id for t in mine}
    assert all(t.technician_id == alice.id for t in listed)


async def test_ticket_detail_assembles_every_child(service, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice)
    await service.submit_work_log(ticket.id, alice.id, "notes")
    await service.attach_media(ticket.id, alice.id, [_upload("a.jpg"), _upload("b.mp4", "video/mp4")])
    await service.capture_signature(ticket.id, alice.id, "Jane", "img-start", SignatureSlot.START)

    detail = await service.get_ticket_detail(ticket.id, alice.id)

    assert detail.ticket.id == ticket.id
    assert detail.technician.id == alice.id
    assert detail.work_log.work_description == "notes"
    assert [m.original_name for m in detail.media] == ["a.jpg", "b.mp4"]
    assert detail.start_signature.signed_by_name == "Jane"
    assert detail.completion_signature is None


# ── Signatures ────────────────────────────────────────────

@pytest.mark.parametrize("prior", list(TicketStatus))
async def test_start_signature_forces_in_progress(service, database, technicians, make_ticket, prior):
    alice, _ = technicians
    ticket = await make_ticket(alice, status=prior)

    capture = await service.capture_signature(ticket.id, alice.id, "Jane", "img", "start")

    assert capture.slot is SignatureSlot.START
    assert capture.new_status is TicketStatus.IN_PROGRESS
    assert await _status(database, ticket.id) == "In Progress"


@pytest.mark.parametrize("prior", list(TicketStatus))
async def test_completion_signature_forces_signed(service, database, technicians, make_ticket, prior):
    alice, _ = technicians
    ticket = await make_ticket(alice, status=prior)

    capture = await service.capture_signature(ticket.id, alice.id, "Jane", "img")

    assert capture.slot is SignatureSlot.COMPLETION
    assert capture.new_status is TicketStatus.SIGNED
    assert await _status(database, ticket.id) == "Signed"


async def test_completion_signature_leaves_start_slot_untouched(service, database, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice, status=TicketStatus.IN_PROGRESS)
    await service.capture_signature(ticket.id, alice.id, "Site Manager", "img-start", "start")

    capture = await service.capture_signature(ticket.id, alice.id, "Jane Doe", "<blob>", "completion")

    assert capture.signature.signed_by_name == "Jane Doe"
    assert await _status(database, ticket.id) == "Signed"
    detail = await service.get_ticket_detail(ticket.id, alice.id)
    assert detail.completion_signature.signed_by_name == "Jane Doe"
    assert detail.start_signature.signed_by_name == "Site Manager"
    assert detail.start_signature.signature_image == "img-start"


async def test_repeated_signature_replaces_the_slot(service, database, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice)

    first = await service.capture_signature(ticket.id, alice.id, "Jane", "img-1")
    await asyncio.sleep(0.01)
    second = await service.capture_signature(ticket.id, alice.id, "John", "img-2")

    assert second.signature.id == first.signature.id
    async with database.session() as db:
        stored = await crud.get_signature(db, ticket.id, SignatureSlot.COMPLETION)
        counts = await crud.count_child_rows(db, ticket.id)
    assert stored.signed_by_name == "John"
    assert stored.signature_image == "img-2"
    assert stored.signed_at > first.signature.signed_at
    assert counts["ticket_signatures"] == 1


@pytest.mark.parametrize("name,image", [("", "img"), ("Jane", ""), ("", "")])
async def test_signature_requires_name_and_image(service, technicians, make_ticket, name, image):
    alice, _ = technicians
    ticket = await make_ticket(alice)

    with pytest.raises(ValidationError, match="Customer name and signature are required"):
        await service.capture_signature(ticket.id, alice.id, name, image)


async def test_unknown_signature_slot_is_rejected(service, database, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice)

    with pytest.raises(ValidationError, match="Invalid signature type"):
        await service.capture_signature(ticket.id, alice.id, "Jane", "img", "middle")

    assert await _status(database, ticket.id) == "Assigned"


# ── Status override ───────────────────────────────────────

@pytest.mark.parametrize("value", ["Assigned", "In Progress", "Completed", "Signed"])
async def test_set_status_accepts_every_known_value(service, database, technicians, make_ticket, value):
    alice, _ = technicians
    ticket = await make_ticket(alice, status=TicketStatus.SIGNED)

    change = await service.set_status(ticket.id, alice.id, value)

    assert change.status.value == value
    assert change.previous_status is TicketStatus.SIGNED
    assert await _status(database, ticket.id) == value


@pytest.mark.parametrize("value", ["Done", "assigned", "In progress"])
async def test_set_status_rejects_unknown_values(service, database, technicians, make_ticket, value):
    alice, _ = technicians
    ticket = await make_ticket(alice)

    with pytest.raises(InvalidTicketStatusError, match="Invalid status"):
        await service.set_status(ticket.id, alice.id, value)

    assert await _status(database, ticket.id) == "Assigned"


async def test_set_status_requires_a_value(service, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice)

    with pytest.raises(InvalidTicketStatusError, match="Status is required"):
        await service.set_status(ticket.id, alice.id, "")


async def test_status_write_refreshes_updated_at(service, database, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice, status=TicketStatus.IN_PROGRESS)
    async with database.session() as db:
        before = (await crud.get_ticket(db, ticket.id)).updated_at

    await asyncio.sleep(0.01)
    await service.submit_work_log(ticket.id, alice.id, "more notes")

    async with database.session() as db:
        after = (await crud.get_ticket(db, ticket.id)).updated_at
    assert after > before


# ── Media ─────────────────────────────────────────────────

async def test_attach_media_records_each_file_in_order(service, database, media_store, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice)
    uploads = [
        _upload("front.jpg", "image/jpeg"),
        _upload("site-tour.mp4", "video/mp4", b"\x00\x00\x00\x18ftyp"),
        _upload("meter.png", "image/png", b"\x89PNG"),
    ]

    records = await service.attach_media(ticket.id, alice.id, uploads)

    assert len(records) == 3
    assert [r.media_type for r in records] == ["photo", "video", "photo"]
    assert [r.seq for r in records] == [1, 2, 3]
    for record, upload in zip(records, uploads):
        assert record.file_url.startswith("/uploads/")
        assert Path(record.file_path).read_bytes() == upload.data
        assert record.file_size == len(upload.data)

    # A second batch continues the sequence
    more = await service.attach_media(ticket.id, alice.id, [_upload("later.gif", "image/gif")])
    assert more[0].seq == 4
    async with database.session() as db:
        assert len(await crud.list_media_for_ticket(db, ticket.id)) == 4


async def test_attach_media_requires_files(service, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice)

    with pytest.raises(ValidationError, match="No files uploaded"):
        await service.attach_media(ticket.id, alice.id, [])


class FailingMediaStore(MediaStore):
    """Writes the first `fail_after` files, then raises."""

    def __init__(self, base_dir, fail_after: int):
        super().__init__(base_dir, "/uploads")
        self.fail_after = fail_after
        self.saved = []

    async def save(self, data, original_name=None):
        if len(self.saved) >= self.fail_after:
            raise OSError("disk full")
        stored = await super().save(data, original_name)
        self.saved.append(stored)
        return stored


async def test_attach_media_is_all_or_nothing(database, technicians, tmp_path):
    alice, _ = technicians
    store = FailingMediaStore(tmp_path / "failing", fail_after=2)
    service = TicketService(database, store)
    ticket = await service.create_ticket(
        technician_id=alice.id, ticket_number="FT-9", customer_name="Acme",
        customer_address="1 Main St", job_location="1 Main St", work_to_do="Fix it",
        scheduled_date=date(2024, 11, 25),
        scheduled_time=time(9, 0),
    )

    with pytest.raises(OSError, match="disk full"):
        await service.attach_media(ticket.id, alice.id, [_upload(f"{i}.jpg") for i in range(5)])

    assert len(store.saved) == 2
    assert not any(Path(s.file_path).exists() for s in store.saved)
    async with database.session() as db:
        assert await crud.list_media_for_ticket(db, ticket.id) == []


# ── Provisioning ──────────────────────────────────────────

async def test_create_ticket_for_unknown_technician(service):

    with pytest.raises(NotFoundError, match="Technician not found"):
        await service.create_ticket(
            technician_id="missing", ticket_number="FT-1", customer_name="Acme",
            customer_address="1 Main St", job_location="1 Main St", work_to_do="Fix it",
            scheduled_date=date(2024, 11, 25), scheduled_time=time(9, 0),
        )


async def test_duplicate_ticket_number_is_a_validation_error(service, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice)

    with pytest.raises(ValidationError, match="already exists"):
        await service.create_ticket(
            technician_id=alice.id, ticket_number=ticket.ticket_number, customer_name="Acme",
            customer_address="1 Main St", job_location="1 Main St", work_to_do="Fix it",
            scheduled_date=date(2024, 11, 25), scheduled_time=time(9, 0),
        )


async def test_delete_ticket_removes_every_child_and_file(service, database, technicians, make_ticket):
    alice, _ = technicians
    ticket = await make_ticket(alice)
    await service.submit_work_log(ticket.id, alice.id, "notes")
    media = await service.attach_media(ticket.id, alice.id, [_upload("a.jpg"), _upload("b.jpg")])
    await service.capture_signature(ticket.id, alice.id, "Jane", "img", "start")
    await service.capture_signature(ticket.id, alice.id, "Jane", "img", "completion")

    async with database.session() as db:
        before = await crud.count_child_rows(db, ticket.id)
    assert sum(before.values()) == 5

    await service.delete_ticket(ticket.id)

    async with database.session() as db:
        assert await crud.get_ticket(db, ticket.id) is None
        after = await crud.count_child_rows(db, ticket.id)
    assert set(after.values()) == {0}
    assert not any(Path(m.file_path).exists() for m in media)

    with pytest.raises(TicketNotFoundError):
        await service.delete_ticket(ticket.id)
