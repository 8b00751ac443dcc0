"""
Actors, weapons and skills as seen by the unleash engine.

These are deliberately thin: the engine only needs a luck value, an ordered
list of equipped weapons, a default attack skill and the note text that
carries unleash tags.
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Skill:
    """A skill definition with its note text."""
    skill_id: int
    name: str
    note: str = ""


@dataclass(frozen=True)
class Weapon:
    """A weapon definition with its note text."""
    weapon_id: int
    name: str
    note: str = ""


@dataclass
class Actor:
    """A combatant that can attack and use skills.

    Attributes:
        name: Display name
        luk: Current luck value, read at resolution time
        level: Character level, available to custom luck formulas
        equipped: Equipped weapons in slot order; empty slots are None
        default_attack_skill_id: Skill used for a plain attack
    """
    name: str
    luk: int = 0
    level: int = 1
    equipped: list[Optional[Weapon]] = field(default_factory=list)
    default_attack_skill_id: int = 1

    @property
    def luck(self) -> int:
        return self.luk

    def weapons(self) -> list[Weapon]:
        """Equipped weapons in equipment order, skipping empty slots."""
        return [weapon for weapon in self.equipped if weapon is not None]

    def has_no_weapons(self) -> bool:
        return not self.weapons()

    def attack_skill_id(self) -> int:
        return self.default_attack_skill_id
