"""Skill and weapon data loading.

Skills and weapons are loaded from a YAML data file and looked up by id.
The file layout is::

    skills:
      - id: 1
        name: Attack
        note: ""
    weapons:
      - id: 1
        name: Flame Sword
        note: "<unleash: 10, 25>"
"""

import os
from typing import Iterable, Iterator, Optional

import yaml

from .actor import Skill, Weapon


DEFAULT_DATA_PATH = os.path.join("assets", "data", "skills.yaml")


class SkillCatalogError(KeyError):
    """Raised when a skill id is not present in the catalog."""


class SkillCatalog:
    """Lookup table of skill definitions by id."""

    def __init__(self, skills: Iterable[Skill] = ()):
        self._skills: dict[int, Skill] = {}
        for skill in skills:
            self.add(skill)

    def add(self, skill: Skill) -> None:
        if skill.skill_id in self._skills:
            raise ValueError(f"Duplicate skill id: {skill.skill_id}")
        self._skills[skill.skill_id] = skill

    def get(self, skill_id: int) -> Skill:
        """Get the skill with the given id.

        Raises:
            SkillCatalogError: If no skill has that id
        """
        try:
            return self._skills[skill_id]
        except KeyError:
            raise SkillCatalogError(f"Unknown skill id: {skill_id}") from None

    def find(self, skill_id: int) -> Optional[Skill]:
        return self._skills.get(skill_id)

    def __contains__(self, skill_id: object) -> bool:
        return skill_id in self._skills

    def __iter__(self) -> Iterator[Skill]:
        return iter(self._skills.values())

    def __len__(self) -> int:
        return len(self._skills)


def _data_path(path: Optional[str]) -> str:
    if path and os.path.isabs(path):
        return path
    # Project root is three levels up from this file
    current_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(current_dir)))
    return os.path.join(project_root, path or DEFAULT_DATA_PATH)


def load_skill_data(path: Optional[str] = None) -> tuple[SkillCatalog, dict[int, Weapon]]:
    """Load skills and weapons from a YAML data file.

    Args:
        path: Path to the data file (absolute or relative to project root)

    Returns:
        The skill catalog and a mapping of weapon id to Weapon

    Raises:
        FileNotFoundError: If the data file does not exist
        ValueError: If the file structure is invalid
    """
    yaml_path = _data_path(path)

    try:
        with open(yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise FileNotFoundError(f"Skill data file not found: {yaml_path}")

    try:
        catalog = SkillCatalog(
            Skill(
                skill_id=int(entry["id"]),
                name=str(entry["name"]),
                note=str(entry.get("note") or ""),
            )
            for entry in data.get("skills", [])
        )
        weapons = {}
        for entry in data.get("weapons", []):
            weapon = Weapon(
                weapon_id=int(entry["id"]),
                name=str(entry["name"]),
                note=str(entry.get("note") or ""),
            )
            weapons[weapon.weapon_id] = weapon
    except KeyError as e:
        raise ValueError(f"Invalid skill data structure in {yaml_path}: missing {e}")
    except (TypeError, AttributeError) as e:
        raise ValueError(f"Invalid skill data structure in {yaml_path}: {e}")

    return catalog, weapons
