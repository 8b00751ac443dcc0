"""Unleash skills: weapons and skills that randomly activate a different skill."""

__version__ = "1.0.0"
