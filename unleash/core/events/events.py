"""Event-driven system events.

This module defines the events the unleash engine and its collaborators
publish on the event bus.

Event Design Principles:
- Events are immutable dataclasses
- All events include the timeline_time at which they happened
- Events use proper enums instead of magic strings for their type
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING
from abc import ABC
from enum import Enum, auto

if TYPE_CHECKING:
    from ...game.managers.log_manager import LogLevel


class EventType(Enum):
    """Types of events that managers can subscribe to."""
    # Unleash Events
    UNLEASH_TRIGGERED = auto()

    # Logging Events
    LOG_MESSAGE = auto()
    DEBUG_MESSAGE = auto()

    # System Events
    CONFIG_LOADED = auto()
    LOG_SAVE_REQUESTED = auto()


class UnleashSource(Enum):
    """Where the unleash declaration that fired came from."""
    WEAPON = auto()
    SKILL = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all events."""
    timeline_time: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class UnleashTriggered(GameEvent):
    """Event emitted when a substitute skill replaces the requested one."""
    actor_name: str
    source: UnleashSource
    original_skill_id: int
    skill_id: int

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.UNLEASH_TRIGGERED)


@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: "LogLevel"
    source: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class DebugMessage(GameEvent):
    """Event emitted for debug-specific messages."""
    message: str
    source: str
    context: Optional[dict] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DEBUG_MESSAGE)


@dataclass(frozen=True)
class ConfigLoaded(GameEvent):
    """Event emitted once the unleash configuration has been loaded."""
    path: str
    debug_logging: bool
    has_luck_formula: bool

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.CONFIG_LOADED)


@dataclass(frozen=True)
class LogSaveRequested(GameEvent):
    """Event emitted when the log buffer should be written to disk."""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_SAVE_REQUESTED)
