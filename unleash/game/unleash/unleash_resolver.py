"""
Unleash resolution.

This module decides whether an attack or skill is replaced by an unleash skill.
Candidates are checked one at a time in the order they are written; each gets
its own random draw and the first one that triggers wins. Nothing is cached
between calls: tags are parsed and luck is read fresh every time.
"""
import random
from typing import Any, Callable, Optional, TYPE_CHECKING

from ...core.config import UnleashConfig
from ...core.events import DebugMessage
from .chance_evaluator import ChanceEvaluator
from .tag_parser import UnleashCandidate, parse_unleash_tags

if TYPE_CHECKING:
    from ...core.events import EventManager
    from ..entities.actor import Actor


# Uniform draws in [0.0, 1.0)
RandomSource = Callable[[], float]


def candidate_triggers(candidate: UnleashCandidate, effective_chance: float, roll: float) -> bool:
    """Check one candidate against a random draw.

    A draw at or below the effective chance triggers, except that a chance of
    zero or less never does and skill id 0 is never a valid replacement.
    """
    return candidate.is_valid and effective_chance > 0 and roll <= effective_chance


class UnleashResolver:
    """Resolves unleash tags into replacement skill ids."""

    def __init__(
        self,
        config: Optional[UnleashConfig] = None,
        event_manager: Optional["EventManager"] = None,
        rng: RandomSource = random.random
    ):
        """Initialize the resolver.

        Args:
            config: Unleash configuration (defaults apply when omitted)
            event_manager: Event bus for diagnostics, optional
            rng: Source of uniform draws in [0, 1)
        """
        self.config = config or UnleashConfig()
        self.event_manager = event_manager
        self.rng = rng
        self.chance_evaluator = ChanceEvaluator(self.config.formula, event_manager)

    def resolve(self, user: Any, notes: Optional[str], timeline_time: int = 0) -> Optional[int]:
        """
        Resolve the unleash tags in a block of note text.

        Args:
            user: The acting character (must expose ``luk``)
            notes: Note text of the weapon or skill being used
            timeline_time: Time stamp for emitted diagnostics

        Returns:
            The replacement skill id, or None if nothing triggered
        """
        for candidate in parse_unleash_tags(notes):
            effective = self.chance_evaluator.effective_chance(
                user, candidate.base_chance, candidate.difficulty
            )
            roll = self.rng()
            triggered = candidate_triggers(candidate, effective, roll)

            if self.config.debug_logging:
                self._emit_debug(user, candidate, effective, roll, triggered, timeline_time)

            if triggered:
                return candidate.skill_id

        return None

    def resolve_attack_unleash(self, actor: "Actor", timeline_time: int = 0) -> int:
        """Get the skill a basic attack should use.

        Each equipped weapon is checked in equipment order.

        Returns:
            The first triggered unleash skill id, or the actor's attack skill id
        """
        for weapon in actor.weapons():
            skill_id = self.resolve(actor, weapon.note, timeline_time)
            if skill_id is not None:
                return skill_id
        return actor.attack_skill_id()

    def resolve_skill_unleash(
        self,
        actor: "Actor",
        skill_metadata: Optional[str],
        timeline_time: int = 0
    ) -> Optional[int]:
        """Get the replacement for a skill, or None to use the skill as requested."""
        return self.resolve(actor, skill_metadata, timeline_time)

    def _emit_debug(
        self,
        user: Any,
        candidate: UnleashCandidate,
        effective: float,
        roll: float,
        triggered: bool,
        timeline_time: int
    ) -> None:
        if self.event_manager is None:
            return
        self.event_manager.publish(
            DebugMessage(
                timeline_time=timeline_time,
                message=(
                    f"Unleash Skill: {candidate.skill_id}, Base Chance: {candidate.base_chance}, "
                    f"Modified Chance: {effective}"
                ),
                source="UnleashResolver",
                context={
                    'skill_id': candidate.skill_id,
                    'base_chance': candidate.base_chance,
                    'effective_chance': effective,
                    'difficulty': candidate.difficulty,
                    'luck': getattr(user, 'luk', None),
                    'roll': roll,
                    'triggered': triggered,
                }
            ),
            source="UnleashResolver"
        )
