"""Ticket API: the technician's own jobs and their lifecycle actions."""

from __future__ import annotations

from fastapi import APIRouter, File, UploadFile

from fieldtech.config import Settings
from fieldtech.dependencies import CurrentTechnician, SettingsDep, TicketServiceDep
from fieldtech.errors import ValidationError
from fieldtech.schemas import (
    ApiResponse, MediaRead, SignatureCaptureRead, StatusChangeRead,
    TicketDetailRead, TicketRead, WorkLogRead,
    SignatureRequest, StatusUpdateRequest, WorkLogRequest,
)
from fieldtech.tickets.models import MediaUpload

router = APIRouter(prefix="/api/tickets", tags=["tickets"])


async def _read_uploads(files: list[UploadFile], settings: Settings) -> list[MediaUpload]:
    """Apply the type allow-list and size cap before anything is stored."""
    if not files:
        raise ValidationError("No files uploaded")

    allowed = set(settings.media.allowed_types)
    limit = settings.media.max_file_size
    uploads: list[MediaUpload] = []
    for f in files:
        if f.content_type not in allowed:
            raise ValidationError("Invalid file type. Only images and videos are allowed.")
        data = await f.read(limit + 1)
        if len(data) > limit:
            raise ValidationError("File too large")
        uploads.append(MediaUpload(filename=f.filename, content_type=f.content_type, data=data))
    return uploads


@router.get("/my-tickets", response_model=ApiResponse[list[TicketRead]])
async def my_tickets(tech: CurrentTechnician, service: TicketServiceDep):
    tickets = await service.list_my_tickets(tech.id)
    return ApiResponse[list[TicketRead]](data=[TicketRead.model_validate(t) for t in tickets])


@router.get("/{ticket_id}", response_model=ApiResponse[TicketDetailRead])
async def get_ticket(ticket_id: str, tech: CurrentTechnician, service: TicketServiceDep):
    detail = await service.get_ticket_detail(ticket_id, tech.id)
    return ApiResponse[TicketDetailRead](data=TicketDetailRead.from_detail(detail))


@router.post("/{ticket_id}/work-log", response_model=ApiResponse[WorkLogRead])
async def save_work_log(
    ticket_id: str,
    body: WorkLogRequest,
    tech: CurrentTechnician,
    service: TicketServiceDep,
):
    work_log = await service.submit_work_log(ticket_id, tech.id, body.work_description)
    return ApiResponse[WorkLogRead](
        data=WorkLogRead.model_validate(work_log),
        message="Work log saved successfully",
    )


@router.post("/{ticket_id}/media", response_model=ApiResponse[list[MediaRead]])
async def upload_media(
    ticket_id: str,
    tech: CurrentTechnician,
    service: TicketServiceDep,
    settings: SettingsDep,
    files: list[UploadFile] | None = File(default=None),
):
    uploads = await _read_uploads(files or [], settings)
    records = await service.attach_media(ticket_id, tech.id, uploads)
    return ApiResponse[list[MediaRead]](
        data=[MediaRead.model_validate(m) for m in records],
        message=f"{len(records)} file(s) uploaded successfully",
    )


@router.post("/{ticket_id}/signature", response_model=ApiResponse[SignatureCaptureRead])
async def save_signature(
    ticket_id: str,
    body: SignatureRequest,
    tech: CurrentTechnician,
    service: TicketServiceDep,
):
    capture = await service.capture_signature(
        ticket_id,
        tech.id,
        signed_by_name=body.signed_by_name,
        signature_image=body.signature_image,
        slot=body.signature_type,
    )
    return ApiResponse[SignatureCaptureRead](
        data=SignatureCaptureRead.from_capture(capture),
        message=f"Customer {capture.slot.value} signature saved successfully",
    )


@router.put("/{ticket_id}/status", response_model=ApiResponse[StatusChangeRead])
async def update_status(
    ticket_id: str,
    body: StatusUpdateRequest,
    tech: CurrentTechnician,
    service: TicketServiceDep,
):
    change = await service.set_status(ticket_id, tech.id, body.status)
    return ApiResponse[StatusChangeRead](
        data=StatusChangeRead.from_change(change),
        message="Ticket status updated successfully",
    )
