"""Technician model: the credential record and profile of a field tech."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldtech.models.base import Base, ULIDMixin, UpdatedAtMixin


class Technician(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "technicians"

    name: Mapped[str] = mapped_column(String(200))
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True, default=None)
    photo_url: Mapped[str | None] = mapped_column(String(500), nullable=True, default=None)
    role: Mapped[str] = mapped_column(String(100), default="technician")

    tickets = relationship(
        "Ticket", back_populates="technician",
        cascade="all, delete-orphan", passive_deletes=True,
    )
