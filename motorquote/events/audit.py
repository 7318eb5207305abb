"""Audit trail — one audit_log row per published event.

Subscribed to every event at startup. A failed write is logged and dropped:
the quotation it describes is already committed, so there is nothing to undo.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from motorquote.db.engine import async_session_factory
from motorquote.models.audit import AuditLog
from motorquote.schemas.events import SystemEvent

logger = logging.getLogger(__name__)


class AuditTrail:
    """Event subscriber writing AuditLog rows in its own short session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory or async_session_factory

    async def __call__(self, event: SystemEvent) -> None:
        entry = AuditLog(
            event_type=event.event_type.value,
            quotation_id=event.quotation_id,
            actor_id=event.actor_id,
            data={**event.data, "event_id": str(event.id), "source_module": event.source_module},
        )
        try:
            async with self._session_factory() as db:
                db.add(entry)
                await db.commit()
        except Exception:
            logger.exception(
                "Audit write failed: %s (quotation=%s)",
                event.event_type.value,
                event.quotation_id,
            )
