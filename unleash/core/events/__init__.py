"""Event system for publisher-subscriber communication.

This package contains the event-driven plumbing used for diagnostics:
- event_manager.py: Publisher-subscriber event routing
- events.py: Event definitions
"""

from .event_manager import EventManager, EventPriority, QueuedEvent
from .events import (
    GameEvent,
    EventType,
    UnleashSource,
    UnleashTriggered,
    LogMessage,
    DebugMessage,
    ConfigLoaded,
    LogSaveRequested,
)

__all__ = [
    "EventManager",
    "EventPriority",
    "QueuedEvent",
    "GameEvent",
    "EventType",
    "UnleashSource",
    "UnleashTriggered",
    "LogMessage",
    "DebugMessage",
    "ConfigLoaded",
    "LogSaveRequested",
]
