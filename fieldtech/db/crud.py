"""Data-access functions for technicians, tickets and their child records.

These flush but never commit; the caller's transaction decides.
"""

from __future__ import annotations

from datetime import date, time

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fieldtech.models import (
    Technician, Ticket, WorkLog, MediaAttachment,
    StartSignature, CompletionSignature,
)
from fieldtech.models.base import utcnow
from fieldtech.tickets.state import SignatureSlot, TicketStatus


SIGNATURE_MODELS: dict[SignatureSlot, type[StartSignature] | type[CompletionSignature]] = {
    SignatureSlot.START: StartSignature,
    SignatureSlot.COMPLETION: CompletionSignature,
}


def _insert(db: AsyncSession, model):
    """Dialect insert construct so ON CONFLICT is available."""
    if db.get_bind().dialect.name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        from sqlalchemy.dialects.sqlite import insert
    return insert(model)


# ── Technician ────────────────────────────────────────────

async def create_technician(
    db: AsyncSession,
    name: str,
    username: str,
    password_hash: str,
    email: str,
    phone: str | None = None,
    photo_url: str | None = None,
    role: str = "technician",
) -> Technician:
    tech = Technician(
        name=name, username=username, password_hash=password_hash,
        email=email, phone=phone, photo_url=photo_url, role=role,
    )
    db.add(tech)
    await db.flush()
    return tech


async def get_technician(db: AsyncSession, technician_id: str) -> Technician | None:
    return await db.get(Technician, technician_id)


async def get_technician_by_username(db: AsyncSession, username: str) -> Technician | None:
    result = await db.execute(select(Technician).where(Technician.username == username))
    return result.scalars().first()


async def list_technicians(db: AsyncSession) -> list[Technician]:
    result = await db.execute(select(Technician).order_by(Technician.name))
    return list(result.scalars().all())


# ── Ticket ────────────────────────────────────────────────

async def create_ticket(
    db: AsyncSession,
    ticket_number: str,
    technician_id: str,
    customer_name: str,
    customer_address: str,
    job_location: str,
    work_to_do: str,
    scheduled_date: date,
    scheduled_time: time,
    customer_phone: str | None = None,
    status: TicketStatus = TicketStatus.ASSIGNED,
) -> Ticket:
    ticket = Ticket(
        ticket_number=ticket_number, technician_id=technician_id,
        customer_name=customer_name, customer_address=customer_address,
        customer_phone=customer_phone, job_location=job_location,
        work_to_do=work_to_do, scheduled_date=scheduled_date,
        scheduled_time=scheduled_time, status=TicketStatus(status).value,
    )
    db.add(ticket)
    await db.flush()
    return ticket


async def get_ticket(db: AsyncSession, ticket_id: str) -> Ticket | None:
    return await db.get(Ticket, ticket_id)


async def get_ticket_by_number(db: AsyncSession, ticket_number: str) -> Ticket | None:
    result = await db.execute(select(Ticket).where(Ticket.ticket_number == ticket_number))
    return result.scalars().first()


async def get_owned_ticket(db: AsyncSession, ticket_id: str, technician_id: str) -> Ticket | None:
    """Ownership-scoped lookup: a foreign ticket looks exactly like a missing one."""
    result = await db.execute(
        select(Ticket).where(Ticket.id == ticket_id, Ticket.technician_id == technician_id)
    )
    return result.scalars().first()


async def list_tickets_for_technician(db: AsyncSession, technician_id: str) -> list[Ticket]:
    result = await db.execute(
        select(Ticket)
        .where(Ticket.technician_id == technician_id)
        .order_by(Ticket.scheduled_date, Ticket.scheduled_time, Ticket.ticket_number)
    )
    return list(result.scalars().all())


async def set_ticket_status(db: AsyncSession, ticket: Ticket, status: TicketStatus) -> Ticket:
    ticket.status = status.value
    ticket.updated_at = utcnow()
    await db.flush()
    return ticket


async def delete_ticket(db: AsyncSession, ticket_id: str) -> bool:
    """Delete a ticket; the foreign keys cascade to every child table."""
    result = await db.execute(delete(Ticket).where(Ticket.id == ticket_id))
    return result.rowcount > 0


# ── WorkLog ───────────────────────────────────────────────

async def get_work_log(db: AsyncSession, ticket_id: str) -> WorkLog | None:
    result = await db.execute(
        select(WorkLog)
        .where(WorkLog.ticket_id == ticket_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def upsert_work_log(db: AsyncSession, ticket_id: str, work_description: str) -> WorkLog:
    """Insert the ticket's work log, or update it in place if one exists."""
    stmt = _insert(db, WorkLog).values(ticket_id=ticket_id, work_description=work_description)
    stmt = stmt.on_conflict_do_update(
        index_elements=[WorkLog.ticket_id],
        set_={"work_description": work_description, "updated_at": utcnow()},
    )
    await db.execute(stmt)
    return await get_work_log(db, ticket_id)


# ── MediaAttachment ───────────────────────────────────────

async def next_media_seq(db: AsyncSession, ticket_id: str) -> int:
    result = await db.execute(
        select(func.coalesce(func.max(MediaAttachment.seq), 0))
        .where(MediaAttachment.ticket_id == ticket_id)
    )
    return int(result.scalar_one()) + 1


async def create_media(
    db: AsyncSession,
    ticket_id: str,
    seq: int,
    media_type: str,
    file_url: str,
    file_path: str,
    original_name: str | None = None,
    file_size: int | None = None,
) -> MediaAttachment:
    media = MediaAttachment(
        ticket_id=ticket_id, seq=seq, media_type=media_type,
        file_url=file_url, file_path=file_path,
        original_name=original_name, file_size=file_size,
    )
    db.add(media)
    await db.flush()
    return media


async def list_media_for_ticket(db: AsyncSession, ticket_id: str) -> list[MediaAttachment]:
    result = await db.execute(
        select(MediaAttachment)
        .where(MediaAttachment.ticket_id == ticket_id)
        .order_by(MediaAttachment.seq)
    )
    return list(result.scalars().all())


# ── Signatures ────────────────────────────────────────────

async def get_signature(db: AsyncSession, ticket_id: str, slot: SignatureSlot):
    model = SIGNATURE_MODELS[slot]
    result = await db.execute(
        select(model)
        .where(model.ticket_id == ticket_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def upsert_signature(
    db: AsyncSession,
    ticket_id: str,
    slot: SignatureSlot,
    signed_by_name: str,
    signature_image: str,
):
    """Insert-or-replace the signature in one slot; the other slot is untouched."""
    model = SIGNATURE_MODELS[slot]
    signed_at = utcnow()
    stmt = _insert(db, model).values(
        ticket_id=ticket_id, signed_by_name=signed_by_name,
        signature_image=signature_image, signed_at=signed_at,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[model.ticket_id],
        set_={
            "signed_by_name": signed_by_name,
            "signature_image": signature_image,
            "signed_at": signed_at,
        },
    )
    await db.execute(stmt)
    return await get_signature(db, ticket_id, slot)


# ── Counts ────────────────────────────────────────────────

async def count_child_rows(db: AsyncSession, ticket_id: str) -> dict[str, int]:
    """Row counts per child table for one ticket."""
    counts: dict[str, int] = {}
    for model in (WorkLog, MediaAttachment, StartSignature, CompletionSignature):
        result = await db.execute(
            select(func.count()).select_from(model).where(model.ticket_id == ticket_id)
        )
        counts[model.__tablename__] = int(result.scalar_one())
    return counts
