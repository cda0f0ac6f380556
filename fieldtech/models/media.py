from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fieldtech.models.base import Base, ULIDMixin


class MediaAttachment(Base, ULIDMixin):
    __tablename__ = "ticket_media"
    __table_args__ = (
        CheckConstraint("media_type IN ('photo', 'video')", name="ck_ticket_media_type"),
    )

    ticket_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("tickets.id", ondelete="CASCADE"), index=True
    )
    seq: Mapped[int] = mapped_column(Integer)
    media_type: Mapped[str] = mapped_column(String(10))  # photo | video
    file_url: Mapped[str] = mapped_column(String(500))
    file_path: Mapped[str] = mapped_column(String(500))
    original_name: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
