"""Ticket model: one unit of field work owned by a single technician."""

from __future__ import annotations

from datetime import date, time

from sqlalchemy import CheckConstraint, Date, ForeignKey, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldtech.models.base import Base, ULIDMixin, UpdatedAtMixin
from fieldtech.tickets.state import TicketStatus

_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in TicketStatus)


class Ticket(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "tickets"
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_tickets_status"),
    )

    ticket_number: Mapped[str] = mapped_column(String(50), unique=True)
    technician_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("technicians.id", ondelete="CASCADE"), index=True
    )
    customer_name: Mapped[str] = mapped_column(String(200))
    customer_address: Mapped[str] = mapped_column(String(500))
    customer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True, default=None)
    job_location: Mapped[str] = mapped_column(String(500))
    work_to_do: Mapped[str] = mapped_column(Text)
    scheduled_date: Mapped[date] = mapped_column(Date, index=True)
    scheduled_time: Mapped[time] = mapped_column(Time)
    status: Mapped[str] = mapped_column(String(20), default=TicketStatus.ASSIGNED.value, index=True)

    technician = relationship("Technician", back_populates="tickets")
    work_log = relationship(
        "WorkLog", uselist=False, cascade="all, delete-orphan", passive_deletes=True,
    )
    media = relationship(
        "MediaAttachment", order_by="MediaAttachment.seq",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    start_signature = relationship(
        "StartSignature", uselist=False, cascade="all, delete-orphan", passive_deletes=True,
    )
    completion_signature = relationship(
        "CompletionSignature", uselist=False, cascade="all, delete-orphan", passive_deletes=True,
    )
