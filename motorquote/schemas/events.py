"""SystemEvent schema — what the quotation engine publishes after a commit.

Quotation events carry a small summary of the aggregate (customer, quote
count, recommended quote number) so subscribers such as the audit trail or a
PDF / WhatsApp sender never have to reload the quotation to decide what to do.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """All event types emitted by the system."""

    # Quotation lifecycle
    QUOTATION_GENERATED = "quotation.generated"
    QUOTATION_UPDATED = "quotation.updated"
    QUOTATION_DELETED = "quotation.deleted"

    # System
    SYSTEM_STARTUP = "system.startup"
    SYSTEM_SHUTDOWN = "system.shutdown"


class SystemEvent(BaseModel):
    """Immutable event record handed to every matching subscriber."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Startup / shutdown events carry no quotation
    quotation_id: int | None = None
    actor_id: str | None = None

    data: dict[str, Any] = Field(default_factory=dict)
    source_module: str | None = Field(default=None, description="Module that emitted this event")

    model_config = {"frozen": True}

    @classmethod
    def for_quotation(
        cls,
        event_type: EventType,
        quotation: Any,
        actor_id: str | None = None,
        **extra: Any,
    ) -> SystemEvent:
        """Build a quotation event from a committed Quotation (or lookalike).

        `extra` keys are merged into `data`, e.g. source="manual".
        """
        quotes = list(getattr(quotation, "company_quotes", None) or ())
        recommended = next((q for q in quotes if q.is_recommended), None)
        return cls(
            event_type=event_type,
            quotation_id=quotation.id,
            actor_id=actor_id,
            data={
                "customer_id": quotation.customer_id,
                "quote_count": len(quotes),
                "recommended_quote": recommended.quote_number if recommended else None,
                **extra,
            },
            source_module="quotation.service",
        )
