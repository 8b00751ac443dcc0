"""
Unleash forecasting.

This module predicts unleash odds without drawing any random numbers, so
a UI can show what a weapon or skill is likely to do before it is used.
"""
from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

import numpy as np

from .chance_evaluator import ChanceEvaluator
from .tag_parser import parse_unleash_tags

if TYPE_CHECKING:
    from ..entities.actor import Actor


@dataclass
class CandidateForecast:
    """Odds for one unleash candidate."""
    skill_id: int
    base_chance: float
    effective_chance: float
    fire_probability: float  # chance that this candidate is the one that fires


@dataclass
class UnleashForecastData:
    """Odds for a whole resolution."""
    candidates: list[CandidateForecast] = field(default_factory=list)
    no_unleash_probability: float = 1.0

    def skill_probabilities(self) -> dict[int, float]:
        """Total probability per replacement skill id (repeated ids are summed)."""
        totals: dict[int, float] = {}
        for candidate in self.candidates:
            if candidate.fire_probability > 0:
                totals[candidate.skill_id] = totals.get(candidate.skill_id, 0.0) + candidate.fire_probability
        return totals


class UnleashForecast:
    """Calculates unleash odds for note text, weapons and attacks."""

    def __init__(self, chance_evaluator: Optional[ChanceEvaluator] = None):
        self.chance_evaluator = chance_evaluator or ChanceEvaluator()

    def calculate(self, user: Any, notes: Optional[str]) -> UnleashForecastData:
        """
        Calculate the odds for the unleash tags in one block of note text.

        Candidate i fires with probability p_i * prod(1 - p_j for j < i),
        where each p is the effective chance clipped to [0, 1].

        Args:
            user: The acting character
            notes: Note text holding unleash tags

        Returns:
            UnleashForecastData with per-candidate odds
        """
        candidates = parse_unleash_tags(notes)
        if not candidates:
            return UnleashForecastData()

        effective = np.array(
            [
                self.chance_evaluator.effective_chance(user, c.base_chance, c.difficulty)
                for c in candidates
            ],
            dtype=np.float64,
        )
        valid = np.array([c.is_valid for c in candidates], dtype=bool)

        odds = np.where(valid, np.clip(effective, 0.0, 1.0), 0.0)
        survival = np.concatenate(([1.0], np.cumprod(1.0 - odds)[:-1]))
        fire = odds * survival

        return UnleashForecastData(
            candidates=[
                CandidateForecast(
                    skill_id=c.skill_id,
                    base_chance=c.base_chance,
                    effective_chance=float(effective[i]),
                    fire_probability=float(fire[i]),
                )
                for i, c in enumerate(candidates)
            ],
            no_unleash_probability=float(np.prod(1.0 - odds)),
        )

    def forecast_attack(self, actor: "Actor") -> UnleashForecastData:
        """Calculate the odds for a basic attack across all equipped weapons.

        Weapons are checked in equipment order, so each weapon's odds are
        scaled by the chance that every earlier weapon failed to unleash.
        """
        combined = UnleashForecastData()
        for weapon in actor.weapons():
            weapon_forecast = self.calculate(actor, weapon.note)
            scale = combined.no_unleash_probability
            for candidate in weapon_forecast.candidates:
                candidate.fire_probability *= scale
                combined.candidates.append(candidate)
            combined.no_unleash_probability = scale * weapon_forecast.no_unleash_probability
        return combined
