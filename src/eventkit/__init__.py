"""eventkit: typed synchronous events with scoped subscriptions."""
from __future__ import annotations

from eventkit.config import EventkitConfig
from eventkit.errors import (
    ArgumentMismatchError,
    EventClosedError,
    EventError,
    SelfCheckError,
)
from eventkit.event import ArgMode, Event, Subscription

__version__ = "0.1.0"

__all__ = [
    "ArgMode",
    "ArgumentMismatchError",
    "Event",
    "EventClosedError",
    "EventError",
    "EventkitConfig",
    "SelfCheckError",
    "Subscription",
]
