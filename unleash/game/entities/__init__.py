"""Combatants, weapons and skills."""

from .actor import Actor, Skill, Weapon
from .skill_catalog import SkillCatalog, SkillCatalogError, load_skill_data

__all__ = [
    "Actor",
    "Skill",
    "Weapon",
    "SkillCatalog",
    "SkillCatalogError",
    "load_skill_data",
]
