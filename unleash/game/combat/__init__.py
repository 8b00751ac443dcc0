"""Combat action setup."""

from .combat_action import CombatAction

__all__ = ["CombatAction"]
