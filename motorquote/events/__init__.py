"""Post-commit event bus and its built-in subscribers."""

from motorquote.events.bus import (
    EventBus,
    emit,
    event_bus,
    start_event_system,
    stop_event_system,
    subscribe,
)

__all__ = [
    "EventBus",
    "event_bus",
    "emit",
    "subscribe",
    "start_event_system",
    "stop_event_system",
]
