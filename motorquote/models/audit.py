"""AuditLog model — immutable audit trail for every system event.

Every quotation mutation emits a SystemEvent which is persisted here.
This table is append-only — no updates or deletes.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from motorquote.models.base import Base, JSONType, TimestampMixin


class AuditLog(TimestampMixin, Base):
    """Immutable audit trail entry."""

    __tablename__ = "audit_log"

    # Event classification
    event_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Context (all nullable: not every event relates to a quotation or actor)
    quotation_id: Mapped[int | None] = mapped_column(Integer, index=True)
    actor_id: Mapped[str | None] = mapped_column(String(100), comment="Staff user ID or 'system'")

    # Event data: flexible JSON payload
    data: Mapped[dict[str, Any] | None] = mapped_column(JSONType)

    def __repr__(self) -> str:
        return f"<AuditLog event={self.event_type} quotation={self.quotation_id}>"
