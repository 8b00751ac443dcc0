"""
Effective unleash chance calculation.

The default formula scales the base chance by how far the user's luck is from
the candidate's difficulty::

    chance * (1 + (luck - difficulty) / (luck + difficulty))

A configured luck formula replaces this entirely. Results are never clamped:
anything above 1 always triggers and anything at or below 0 never does.
"""
import math
from typing import Any, Optional, TYPE_CHECKING

from ...core.config import FormulaError, LuckFormulaFn
from ...core.events import LogMessage
from ..managers.log_manager import LogLevel

if TYPE_CHECKING:
    from ...core.events import EventManager


def default_luck_formula(luck: int, difficulty: int, base_chance: float) -> float:
    """Apply the default luck scaling.

    A difficulty of 0 disables luck scaling. Luck and difficulty summing to 0
    would divide by zero and is treated the same way.
    """
    if difficulty == 0 or luck + difficulty == 0:
        return base_chance
    return base_chance * (1 + (luck - difficulty) / (luck + difficulty))


class ChanceEvaluator:
    """Computes the effective chance of one unleash candidate."""

    def __init__(
        self,
        luck_formula: Optional[LuckFormulaFn] = None,
        event_manager: Optional["EventManager"] = None
    ):
        self.luck_formula = luck_formula
        self.event_manager = event_manager

    def effective_chance(self, user: Any, base_chance: float, difficulty: int) -> float:
        """Get the trigger probability for a candidate.

        A failing custom formula falls back to the default formula so that
        combat always gets a usable chance; the failure is logged as a warning.
        """
        if self.luck_formula is None:
            return default_luck_formula(user.luk, difficulty, base_chance)

        try:
            result = self.luck_formula(user, difficulty, base_chance)
            if isinstance(result, bool) or not isinstance(result, (int, float)) or math.isnan(result):
                raise FormulaError(f"Luck formula returned non-numeric result {result!r}")
            return float(result)
        except Exception as e:
            self._emit_log(
                f"Luck formula failed ({e}); using default formula",
                LogLevel.WARNING
            )
            return default_luck_formula(user.luk, difficulty, base_chance)

    def _emit_log(self, message: str, level: LogLevel) -> None:
        if self.event_manager is None:
            return
        self.event_manager.publish(
            LogMessage(
                timeline_time=0,
                message=message,
                category="UNLEASH",
                level=level,
                source="ChanceEvaluator"
            ),
            source="ChanceEvaluator"
        )
