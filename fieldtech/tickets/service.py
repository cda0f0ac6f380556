"""Ticket lifecycle operations.

Each operation runs in one transaction, so a child-record write and the
status write it triggers are committed together or not at all. Every
lookup is ownership-scoped: a ticket that belongs to someone else is
reported exactly like one that does not exist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fieldtech.db import crud
from fieldtech.db.engine import Database
from fieldtech.errors import NotFoundError, ValidationError
from fieldtech.models import MediaAttachment, Ticket, WorkLog
from fieldtech.services.media_store import MediaStore, StoredFile, classify
from fieldtech.tickets.models import MediaUpload, SignatureCapture, StatusChange, TicketDetail
from fieldtech.tickets.state import SignatureSlot, TicketLifecycle, TicketStatus

logger = logging.getLogger(__name__)


class TicketNotFoundError(NotFoundError):
    """Raised when a ticket is missing or not owned by the requester."""

    def __init__(self, message: str = "Ticket not found"):
        super().__init__(message)


class InvalidTicketStatusError(ValidationError):
    """Raised when a status value is outside the four known states."""


@dataclass(slots=True)
class TicketService:
    """High level orchestration for ticket lifecycle operations."""

    database: Database
    media_store: MediaStore

    async def _owned_ticket(self, db: AsyncSession, ticket_id: str, technician_id: str) -> Ticket:
        ticket = await crud.get_owned_ticket(db, ticket_id, technician_id)
        if ticket is None:
            raise TicketNotFoundError()
        return ticket

    async def _apply_status(
        self, db: AsyncSession, ticket: Ticket, new_status: TicketStatus, cause: str,
    ) -> TicketStatus:
        previous = TicketStatus(ticket.status)
        await crud.set_ticket_status(db, ticket, new_status)
        if previous != new_status:
            logger.info(
                "Ticket %s status %s -> %s (%s)",
                ticket.ticket_number, previous.value, new_status.value, cause,
            )
        return previous

    # ── Reads ─────────────────────────────────────────────

    async def list_my_tickets(self, technician_id: str) -> list[Ticket]:
        async with self.database.session() as db:
            return await crud.list_tickets_for_technician(db, technician_id)

    async def get_ticket_detail(self, ticket_id: str, technician_id: str) -> TicketDetail:
        async with self.database.session() as db:
            ticket = await self._owned_ticket(db, ticket_id, technician_id)
            technician = await crud.get_technician(db, ticket.technician_id)
            return TicketDetail(
                ticket=ticket,
                technician=technician,
                work_log=await crud.get_work_log(db, ticket.id),
                media=await crud.list_media_for_ticket(db, ticket.id),
                start_signature=await crud.get_signature(db, ticket.id, SignatureSlot.START),
                completion_signature=await crud.get_signature(db, ticket.id, SignatureSlot.COMPLETION),
            )

    # ── Lifecycle writes ──────────────────────────────────

    async def submit_work_log(self, ticket_id: str, technician_id: str, work_description: str) -> WorkLog:
        """Create or update the ticket's single work log.

        An Assigned ticket moves to In Progress; any other status is kept.
        """
        if not work_description or not work_description.strip():
            raise ValidationError("Work description is required")

        async with self.database.transaction() as db:
            ticket = await self._owned_ticket(db, ticket_id, technician_id)
            work_log = await crud.upsert_work_log(db, ticket.id, work_description)
            new_status = TicketLifecycle.after_work_log(TicketStatus(ticket.status))
            await self._apply_status(db, ticket, new_status, "work log")
        return work_log

    async def attach_media(
        self, ticket_id: str, technician_id: str, uploads: Sequence[MediaUpload],
    ) -> list[MediaAttachment]:
        """Store each upload and record it, in submission order.

        All or nothing: if any file or row fails, the rows are rolled back
        and every file written by this call is removed.
        """
        if not uploads:
            raise ValidationError("No files uploaded")

        written: list[StoredFile] = []
        try:
            async with self.database.transaction() as db:
                ticket = await self._owned_ticket(db, ticket_id, technician_id)
                seq = await crud.next_media_seq(db, ticket.id)
                records: list[MediaAttachment] = []
                for offset, upload in enumerate(uploads):
                    stored = await self.media_store.save(upload.data, upload.filename)
                    written.append(stored)
                    records.append(await crud.create_media(
                        db,
                        ticket_id=ticket.id,
                        seq=seq + offset,
                        media_type=classify(upload.content_type),
                        file_url=stored.file_url,
                        file_path=stored.file_path,
                        original_name=upload.filename,
                        file_size=stored.size,
                    ))
        except Exception:
            if written:
                logger.warning(
                    "Media upload for ticket %s failed; removing %d stored file(s)",
                    ticket_id, len(written),
                )
            for stored in written:
                await self.media_store.delete(stored.file_path)
            raise

        logger.info("Attached %d media file(s) to ticket %s", len(records), ticket_id)
        return records

    async def capture_signature(
        self,
        ticket_id: str,
        technician_id: str,
        signed_by_name: str,
        signature_image: str,
        slot: SignatureSlot | str | None = None,
    ) -> SignatureCapture:
        """Insert-or-replace a signature slot and force the matching status."""
        if not signed_by_name or not signature_image:
            raise ValidationError("Customer name and signature are required")
        try:
            slot = SignatureSlot(slot) if slot else SignatureSlot.COMPLETION
        except ValueError:
            raise ValidationError("Invalid signature type") from None

        async with self.database.transaction() as db:
            ticket = await self._owned_ticket(db, ticket_id, technician_id)
            signature = await crud.upsert_signature(db, ticket.id, slot, signed_by_name, signature_image)
            new_status = TicketLifecycle.after_signature(slot)
            await self._apply_status(db, ticket, new_status, f"{slot.value} signature")
        return SignatureCapture(signature=signature, slot=slot, new_status=new_status)

    async def set_status(
        self, ticket_id: str, technician_id: str, new_status: TicketStatus | str,
    ) -> StatusChange:
        """Overwrite the status with any of the four values; no transition rules apply."""
        if not new_status:
            raise InvalidTicketStatusError("Status is required")
        try:
            status = TicketLifecycle.parse_status(new_status)
        except ValueError:
            raise InvalidTicketStatusError("Invalid status") from None

        async with self.database.transaction() as db:
            ticket = await self._owned_ticket(db, ticket_id, technician_id)
            previous = await self._apply_status(db, ticket, status, "status update")
        return StatusChange(ticket_id=ticket.id, previous_status=previous, status=status)

    # ── Provisioning ──────────────────────────────────────

    async def create_ticket(
        self,
        *,
        technician_id: str,
        ticket_number: str,
        customer_name: str,
        customer_address: str,
        job_location: str,
        work_to_do: str,
        scheduled_date: date,
        scheduled_time: time,
        customer_phone: str | None = None,
        status: TicketStatus | None = None,
    ) -> Ticket:
        try:
            async with self.database.transaction() as db:
                if await crud.get_technician(db, technician_id) is None:
                    raise NotFoundError("Technician not found")
                ticket = await crud.create_ticket(
                    db,
                    ticket_number=ticket_number,
                    technician_id=technician_id,
                    customer_name=customer_name,
                    customer_address=customer_address,
                    customer_phone=customer_phone,
                    job_location=job_location,
                    work_to_do=work_to_do,
                    scheduled_date=scheduled_date,
                    scheduled_time=scheduled_time,
                    status=status or TicketLifecycle.initial_state(),
                )
        except IntegrityError as exc:
            raise ValidationError(f"Ticket number {ticket_number} already exists") from exc
        return ticket

    async def delete_ticket(self, ticket_id: str) -> None:
        """Remove a ticket together with its work log, media and signatures."""
        async with self.database.transaction() as db:
            media = await crud.list_media_for_ticket(db, ticket_id)
            deleted = await crud.delete_ticket(db, ticket_id)
        if not deleted:
            raise TicketNotFoundError()
        for item in media:
            await self.media_store.delete(item.file_path)
        logger.info("Deleted ticket %s and its child records", ticket_id)
