"""Managers that consume events from the event bus."""

from .log_manager import LogCategory, LogEntry, LogLevel, LogManager

__all__ = ["LogCategory", "LogEntry", "LogLevel", "LogManager"]
