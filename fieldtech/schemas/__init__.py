"""Pydantic request/response schemas."""

from fieldtech.schemas.common import ApiResponse
from fieldtech.schemas.auth import LoginRequest, LoginResult
from fieldtech.schemas.technician import TechnicianRead, TechnicianSummary
from fieldtech.schemas.ticket import (
    TicketRead, TicketDetailRead, WorkLogRead, MediaRead,
    SignatureRead, SignatureCaptureRead, StatusChangeRead,
    WorkLogRequest, SignatureRequest, StatusUpdateRequest,
)
from fieldtech.schemas.qr import ReviewQRCode

__all__ = [
    "ApiResponse",
    "LoginRequest", "LoginResult",
    "TechnicianRead", "TechnicianSummary",
    "TicketRead", "TicketDetailRead", "WorkLogRead", "MediaRead",
    "SignatureRead", "SignatureCaptureRead", "StatusChangeRead",
    "WorkLogRequest", "SignatureRequest", "StatusUpdateRequest",
    "ReviewQRCode",
]
