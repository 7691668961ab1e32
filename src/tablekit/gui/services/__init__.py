"""Service layer exports.

Responsibilities:
 - EventBus publish/subscribe core connecting the table components
"""

from .event_bus import Event, EventBus, Subscription, TableEvent  # noqa: F401

__all__ = [
    "Event",
    "EventBus",
    "Subscription",
    "TableEvent",
]
