"""
Event management system for decoupled communication.

The unleash resolver and combat actions publish triggers and diagnostics here;
log sinks subscribe without the publishers knowing about them. Events are
queued and delivered in priority order when ``process_events`` is called.
"""

import threading
from collections import defaultdict, deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import GameEvent, EventType


class EventPriority(Enum):
    """Event processing priorities, most urgent first."""
    CRITICAL = auto()
    HIGH = auto()
    NORMAL = auto()
    LOW = auto()


@dataclass
class QueuedEvent:
    """An event waiting for delivery."""
    event: "GameEvent"
    priority: EventPriority = EventPriority.NORMAL
    sequence: int = 0
    source: Optional[str] = None

    def __lt__(self, other: "QueuedEvent") -> bool:
        if self.priority.value != other.priority.value:
            return self.priority.value < other.priority.value
        # Same priority keeps publish order
        return self.sequence < other.sequence


EventSubscriber = Callable[["GameEvent"], None]


class EventManager:
    """Central event bus for unleash triggers and diagnostics."""

    def __init__(self, max_recorded_errors: int = 50):
        """Initialize the event manager.

        Args:
            max_recorded_errors: How many subscriber failures to keep for inspection
        """
        self._subscribers: dict["EventType", list[tuple[str, EventSubscriber]]] = defaultdict(list)
        self._event_queue: deque[QueuedEvent] = deque()

        self._events_published = 0
        self._events_processed = 0
        self.subscriber_errors: deque[str] = deque(maxlen=max_recorded_errors)

        self._lock = threading.RLock()

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: The type of events to subscribe to
            subscriber: Callback function to handle events
            subscriber_name: Optional name reported if the callback fails
        """
        name = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
        with self._lock:
            self._subscribers[event_type].append((name, subscriber))

    def publish(
        self,
        event: "GameEvent",
        priority: EventPriority = EventPriority.NORMAL,
        source: Optional[str] = None
    ) -> None:
        """Queue an event for processing.

        Args:
            event: The event to publish
            priority: Processing priority for the event
            source: Optional publisher name, reported with subscriber failures
        """
        with self._lock:
            self._event_queue.append(
                QueuedEvent(
                    event=event,
                    priority=priority,
                    sequence=self._events_published,
                    source=source or "unknown"
                )
            )
            self._events_published += 1

    def process_events(self, max_events: Optional[int] = None) -> int:
        """Deliver queued events.

        Args:
            max_events: Maximum number of events to deliver (None for all)

        Returns:
            Number of events delivered
        """
        with self._lock:
            sorted_events = sorted(self._event_queue)
            self._event_queue.clear()

        processed_count = 0
        for queued_event in sorted_events:
            if max_events is not None and processed_count >= max_events:
                with self._lock:
                    self._event_queue.extendleft(reversed(sorted_events[processed_count:]))
                break

            self._process_event(queued_event)
            processed_count += 1

        return processed_count

    def _process_event(self, queued_event: QueuedEvent) -> None:
        event = queued_event.event

        with self._lock:
            self._events_processed += 1
            subscribers = list(self._subscribers.get(event.event_type, []))

        # A failing subscriber must not starve the others
        for name, subscriber in subscribers:
            try:
                subscriber(event)
            except Exception as e:
                self.subscriber_errors.append(
                    f"{name} failed on "
                    f"{event.__class__.__name__} from {queued_event.source}: {e}"
                )

    def has_queued_events(self) -> bool:
        """Check if there are events waiting to be processed."""
        with self._lock:
            return len(self._event_queue) > 0

    def get_statistics(self) -> dict[str, Any]:
        """Get event processing statistics."""
        with self._lock:
            return {
                'events_published': self._events_published,
                'events_processed': self._events_processed,
                'events_queued': len(self._event_queue),
                'subscribers_count': sum(len(subs) for subs in self._subscribers.values()),
                'subscriber_errors': len(self.subscriber_errors),
            }
