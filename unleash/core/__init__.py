"""Core engine systems: events, configuration and formula evaluation."""
