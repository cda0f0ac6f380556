from __future__ import annotations
from datetime import date, datetime, time
from pydantic import BaseModel
from fieldtech.schemas.technician import TechnicianSummary
from fieldtech.tickets.models import SignatureCapture, StatusChange, TicketDetail
from fieldtech.tickets.state import SignatureSlot, TicketStatus


class TicketRead(BaseModel):
    id: str
    ticket_number: str
    technician_id: str
    customer_name: str
    customer_address: str
    customer_phone: str | None = None
    job_location: str
    work_to_do: str
    scheduled_date: date
    scheduled_time: time
    status: TicketStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class WorkLogRead(BaseModel):
    id: str
    ticket_id: str
    work_description: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MediaRead(BaseModel):
    id: str
    ticket_id: str
    seq: int
    media_type: str
    file_url: str
    original_name: str | None = None
    file_size: int | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class SignatureRead(BaseModel):
    id: str
    ticket_id: str
    signed_by_name: str
    signature_image: str
    signed_at: datetime

    model_config = {"from_attributes": True}


class SignatureCaptureRead(SignatureRead):
    signature_type: SignatureSlot
    new_status: TicketStatus

    @classmethod
    def from_capture(cls, capture: SignatureCapture) -> "SignatureCaptureRead":
        sig = capture.signature
        return cls(
            id=sig.id,
            ticket_id=sig.ticket_id,
            signed_by_name=sig.signed_by_name,
            signature_image=sig.signature_image,
            signed_at=sig.signed_at,
            signature_type=capture.slot,
            new_status=capture.new_status,
        )


class TicketDetailRead(TicketRead):
    technician: TechnicianSummary
    work_log: WorkLogRead | None = None
    media: list[MediaRead] = []
    signature: SignatureRead | None = None  # completion slot
    start_signature: SignatureRead | None = None

    @classmethod
    def from_detail(cls, detail: TicketDetail) -> "TicketDetailRead":
        t = detail.ticket
        return cls(
            id=t.id,
            ticket_number=t.ticket_number,
            technician_id=t.technician_id,
            customer_name=t.customer_name,
            customer_address=t.customer_address,
            customer_phone=t.customer_phone,
            job_location=t.job_location,
            work_to_do=t.work_to_do,
            scheduled_date=t.scheduled_date,
            scheduled_time=t.scheduled_time,
            status=t.status,
            created_at=t.created_at,
            updated_at=t.updated_at,
            technician=TechnicianSummary.model_validate(detail.technician),
            work_log=WorkLogRead.model_validate(detail.work_log) if detail.work_log else None,
            media=[MediaRead.model_validate(m) for m in detail.media],
            signature=(
                SignatureRead.model_validate(detail.completion_signature)
                if detail.completion_signature else None
            ),
            start_signature=(
                SignatureRead.model_validate(detail.start_signature)
                if detail.start_signature else None
            ),
        )


class StatusChangeRead(BaseModel):
    id: str
    status: TicketStatus
    previous_status: TicketStatus

    @classmethod
    def from_change(cls, change: StatusChange) -> "StatusChangeRead":
        return cls(id=change.ticket_id, status=change.status, previous_status=change.previous_status)


class WorkLogRequest(BaseModel):
    work_description: str = ""


class SignatureRequest(BaseModel):
    signed_by_name: str = ""
    signature_image: str = ""
    signature_type: str | None = None  # "start" or "completion"


class StatusUpdateRequest(BaseModel):
    status: str = ""
