from __future__ import annotations

from enum import Enum


class TicketStatus(str, Enum):
    """Supported states for a ticket's lifecycle."""

    ASSIGNED = "Assigned"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    SIGNED = "Signed"


class SignatureSlot(str, Enum):
    """The two independent capture points for a customer signature."""

    START = "start"
    COMPLETION = "completion"


class TicketLifecycle:
    """Status rules applied by lifecycle operations.

    Completed is never produced here; it is only reachable through a
    direct status update.
    """

    _SIGNATURE_STATUS: dict[SignatureSlot, TicketStatus] = {
        SignatureSlot.START: TicketStatus.IN_PROGRESS,
        SignatureSlot.COMPLETION: TicketStatus.SIGNED,
    }

    @classmethod
    def initial_state(cls) -> TicketStatus:
        return TicketStatus.ASSIGNED

    @classmethod
    def after_work_log(cls, current: TicketStatus) -> TicketStatus:
        """A work log moves an Assigned ticket into progress and leaves others alone."""
        if current == TicketStatus.ASSIGNED:
            return TicketStatus.IN_PROGRESS
        return current

    @classmethod
    def after_signature(cls, slot: SignatureSlot) -> TicketStatus:
        # Forced set, independent of the current status
        return cls._SIGNATURE_STATUS[slot]

    @classmethod
    def parse_status(cls, value: str | TicketStatus) -> TicketStatus:
        """Coerce a literal status value, raising ValueError for anything else."""
        if isinstance(value, TicketStatus):
            return value
        try:
            return TicketStatus(value)
        except ValueError:
            raise ValueError(f"Invalid ticket status: {value!r}") from None
