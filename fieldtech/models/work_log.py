from __future__ import annotations

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fieldtech.models.base import Base, ULIDMixin, UpdatedAtMixin


class WorkLog(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "ticket_work_logs"

    # One log per ticket; resubmissions update this row in place
    ticket_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tickets.id", ondelete="CASCADE"), unique=True
    )
    work_description: Mapped[str] = mapped_column(Text)
