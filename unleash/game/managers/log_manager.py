"""
Log management system for combat messages and unleash diagnostics.

This module provides centralized logging with categorization, filtering,
and bounded storage. It listens on the event bus so that the resolver and
combat actions never write to a log sink directly.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ...core.events import EventManager


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()     # System messages (initialization, loading, etc.)
    BATTLE = auto()     # Combat-related messages
    UNLEASH = auto()    # Unleash triggers
    CONFIG = auto()     # Configuration messages
    DEBUG = auto()      # Debug messages
    WARNING = auto()    # Warning messages
    ERROR = auto()      # Error messages


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.UNLEASH: "UNL",
    LogCategory.CONFIG: "CFG",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


@dataclass
class LogEntry:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the message for display."""
        parts = []

        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        parts.append(self.text)
        return " ".join(parts)


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


class LogManager:
    """Manages logging with categorization and filtering."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO,
        log_dir: str = "logs"
    ):
        """Initialize the log manager.

        Args:
            event_manager: Event manager for event-driven logging (required)
            max_messages: Maximum number of messages to store in the buffer
            default_level: Default log level for filtering
            log_dir: Directory that saved log files are written to
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)
        self.event_manager = event_manager
        self.log_dir = log_dir

        self.category_levels = {
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,
            # SYSTEM, BATTLE, UNLEASH, CONFIG default to INFO
        }

        self._setup_event_subscriptions()

    def _setup_event_subscriptions(self) -> None:
        """Set up event subscriptions for centralized logging."""
        from ...core.events import EventType

        self.event_manager.subscribe(
            EventType.LOG_MESSAGE,
            self._handle_log_message_event,
            subscriber_name="LogManager.log_message"
        )
        self.event_manager.subscribe(
            EventType.DEBUG_MESSAGE,
            self._handle_debug_message_event,
            subscriber_name="LogManager.debug_message"
        )
        self.event_manager.subscribe(
            EventType.UNLEASH_TRIGGERED,
            self._handle_unleash_triggered_event,
            subscriber_name="LogManager.unleash_triggered"
        )
        self.event_manager.subscribe(
            EventType.CONFIG_LOADED,
            self._handle_config_loaded_event,
            subscriber_name="LogManager.config_loaded"
        )
        self.event_manager.subscribe(
            EventType.LOG_SAVE_REQUESTED,
            self._handle_log_save_request,
            subscriber_name="LogManager.log_save_request"
        )

    def _handle_log_message_event(self, event) -> None:
        """Handle log message events from the event system."""
        from ...core.events import LogMessage
        if not isinstance(event, LogMessage):
            return

        # Warnings and errors keep their severity whatever category they name
        if event.level == LogLevel.ERROR:
            category = LogCategory.ERROR
        elif event.level == LogLevel.WARNING:
            category = LogCategory.WARNING
        else:
            try:
                category = LogCategory[event.category.upper()]
            except (KeyError, AttributeError):
                category = LogCategory.SYSTEM

        self.log(f"[{event.source}] {event.message}", category)

    def _handle_debug_message_event(self, event) -> None:
        """Handle debug message events from the event system."""
        from ...core.events import DebugMessage
        if isinstance(event, DebugMessage):
            self.log(f"[{event.source}] {event.message}", LogCategory.DEBUG)

    def _handle_unleash_triggered_event(self, event) -> None:
        """Handle unleash trigger events from the event system."""
        from ...core.events import UnleashTriggered
        if isinstance(event, UnleashTriggered):
            self.log(
                f"{event.actor_name} unleashed skill {event.skill_id} "
                f"(instead of {event.original_skill_id}, from {event.source.name.lower()})",
                LogCategory.UNLEASH
            )

    def _handle_config_loaded_event(self, event) -> None:
        """Handle configuration load events from the event system."""
        from ...core.events import ConfigLoaded
        if isinstance(event, ConfigLoaded):
            formula = "custom" if event.has_luck_formula else "default"
            self.log(
                f"Loaded unleash config from {event.path} "
                f"(debug: {event.debug_logging}, luck formula: {formula})",
                LogCategory.CONFIG
            )

    def _handle_log_save_request(self, event) -> None:
        """Handle log save request events from the event system."""
        from ...core.events import LogSaveRequested
        if isinstance(event, LogSaveRequested):
            self.save_log_to_file()

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM) -> None:
        """Add a message to the log.

        Args:
            text: The message text
            category: The category of the message
        """
        # Always store messages, filtering happens on read
        self.messages.append(LogEntry(text=text, category=category))

    # Convenience methods for common categories
    def system(self, text: str) -> None:
        """Log a system message."""
        self.log(text, LogCategory.SYSTEM)

    def battle(self, text: str) -> None:
        """Log a battle message."""
        self.log(text, LogCategory.BATTLE)

    def debug(self, text: str) -> None:
        """Log a debug message."""
        self.log(text, LogCategory.DEBUG)

    def warning(self, text: str) -> None:
        """Log a warning message."""
        self.log(text, LogCategory.WARNING)

    def error(self, text: str) -> None:
        """Log an error message."""
        self.log(text, LogCategory.ERROR)

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[set[LogCategory]] = None) -> list[LogEntry]:
        """Get recent messages, optionally filtered by category.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Set of categories to include (None for all enabled)

        Returns:
            List of recent messages
        """
        if categories:
            filtered = [msg for msg in self.messages
                        if msg.category in categories and msg.category in self.enabled_categories]
        else:
            filtered = []
            for msg in self.messages:
                if msg.category not in self.enabled_categories:
                    continue

                message_level = self.category_levels.get(msg.category, LogLevel.INFO)
                if message_level.value < self.log_level.value:
                    continue

                filtered.append(msg)

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def clear(self) -> None:
        """Clear all messages from the log."""
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        """Enable a log category."""
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        """Disable a log category."""
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        """Set the minimum log level."""
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        """Check if debug messages are currently enabled."""
        return (LogCategory.DEBUG in self.enabled_categories and
                self.log_level == LogLevel.DEBUG)

    def toggle_debug(self) -> None:
        """Toggle debug message visibility."""
        if self.is_debug_enabled():
            self.disable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

    def save_log_to_file(self) -> Optional[str]:
        """Save all messages to a timestamped log file.

        Returns:
            Path of the written file, or None if the save failed
        """
        try:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            os.makedirs(self.log_dir, exist_ok=True)
            filepath = os.path.join(self.log_dir, f"unleash_{timestamp}.log")

            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Unleash - Combat Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                else:
                    # Save everything in the buffer, ignoring current filters
                    for msg in self.messages:
                        timestamp_str = msg.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
                        f.write(f"[{timestamp_str}] [{msg.category.name}] {msg.text}\n")

        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return None

        self.system(f"Log saved to {filepath}")
        return filepath
