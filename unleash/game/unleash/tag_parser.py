"""
Unleash tag parsing.

Weapons and skills declare unleash candidates in their note text::

    <unleash: skillId>
    <unleash: skillId, chance>
    <unleash: skillId, chance, difficulty>

``chance`` is a whole percentage (default 50) and ``difficulty`` the luck at
which the chance applies unmodified (default 0, luck has no effect). Any number
of tags may appear among unrelated text; they are returned in the order written.
"""
import re
from dataclasses import dataclass
from typing import Optional


DEFAULT_CHANCE_PERCENT = 50
DEFAULT_DIFFICULTY = 0

UNLEASH_TAG_PATTERN = re.compile(
    r"<unleash:\s*(\d{1,9})\s*(?:,\s*(\d{1,9})\s*)?(?:,\s*(\d{1,9})\s*)?>",
    re.IGNORECASE | re.ASCII,
)


@dataclass(frozen=True)
class UnleashCandidate:
    """One declared substitution rule."""
    skill_id: int
    base_chance: float = DEFAULT_CHANCE_PERCENT / 100
    difficulty: int = DEFAULT_DIFFICULTY

    @property
    def is_valid(self) -> bool:
        """Skill id 0 marks an empty candidate that can never trigger."""
        return self.skill_id != 0


def parse_unleash_tags(notes: Optional[str]) -> list[UnleashCandidate]:
    """Extract unleash candidates from note text, in textual order.

    Never raises: missing or malformed text simply yields fewer candidates.
    """
    if not notes or not isinstance(notes, str):
        return []

    candidates = []
    for match in UNLEASH_TAG_PATTERN.finditer(notes):
        skill_id, chance, difficulty = match.groups()
        candidates.append(
            UnleashCandidate(
                skill_id=int(skill_id),
                base_chance=int(chance if chance is not None else DEFAULT_CHANCE_PERCENT) / 100,
                difficulty=int(difficulty if difficulty is not None else DEFAULT_DIFFICULTY),
            )
        )
    return candidates
