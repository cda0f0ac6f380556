"""SQLAlchemy ORM models."""

from fieldtech.models.base import Base
from fieldtech.models.technician import Technician
from fieldtech.models.ticket import Ticket
from fieldtech.models.work_log import WorkLog
from fieldtech.models.media import MediaAttachment
from fieldtech.models.signature import StartSignature, CompletionSignature

__all__ = [
    "Base", "Technician", "Ticket", "WorkLog", "MediaAttachment",
    "StartSignature", "CompletionSignature",
]
