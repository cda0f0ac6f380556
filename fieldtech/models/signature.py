"""Customer signature slots.

Start and completion signatures live in separate tables so the two slots
can never be merged; each table allows one row per ticket.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fieldtech.models.base import Base, ULIDMixin, utcnow


class _SignatureColumns:
    ticket_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tickets.id", ondelete="CASCADE"), unique=True
    )
    signed_by_name: Mapped[str] = mapped_column(String(200))
    signature_image: Mapped[str] = mapped_column(Text)  # data URL from the signature pad
    signed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class StartSignature(Base, ULIDMixin, _SignatureColumns):
    __tablename__ = "ticket_start_signatures"


class CompletionSignature(Base, ULIDMixin, _SignatureColumns):
    __tablename__ = "ticket_signatures"
