from __future__ import annotations

from dataclasses import dataclass, field

from fieldtech.models import (
    CompletionSignature, MediaAttachment, StartSignature,
    Technician, Ticket, WorkLog,
)
from fieldtech.tickets.state import SignatureSlot, TicketStatus


@dataclass(slots=True)
class MediaUpload:
    """One uploaded file as received at the API boundary."""

    filename: str | None
    content_type: str
    data: bytes


@dataclass(slots=True)
class TicketDetail:
    """A ticket joined with its technician and every child record."""

    ticket: Ticket
    technician: Technician
    work_log: WorkLog | None = None
    media: list[MediaAttachment] = field(default_factory=list)
    start_signature: StartSignature | None = None
    completion_signature: CompletionSignature | None = None


@dataclass(slots=True)
class SignatureCapture:
    signature: StartSignature | CompletionSignature
    slot: SignatureSlot
    new_status: TicketStatus


@dataclass(slots=True)
class StatusChange:
    ticket_id: str
    previous_status: TicketStatus
    status: TicketStatus
