"""
Combat actions with unleash support.

A CombatAction records which skill an actor will use this turn. Setting up an
attack or a skill runs unleash resolution first, so the action may end up
holding a different skill than the one requested.
"""
from typing import Optional, TYPE_CHECKING

from ...core.events import LogMessage, UnleashSource, UnleashTriggered
from ..managers.log_manager import LogLevel

if TYPE_CHECKING:
    from ...core.events import EventManager
    from ..entities.actor import Actor, Skill
    from ..entities.skill_catalog import SkillCatalog
    from ..unleash.unleash_resolver import UnleashResolver


class CombatAction:
    """The skill an actor is about to use."""

    def __init__(
        self,
        subject: "Actor",
        catalog: "SkillCatalog",
        resolver: "UnleashResolver",
        event_manager: Optional["EventManager"] = None,
        timeline_time: int = 0
    ):
        self.subject = subject
        self.catalog = catalog
        self.resolver = resolver
        self.event_manager = event_manager
        self.timeline_time = timeline_time

        self.item: Optional["Skill"] = None
        self.unleashed = False

    def set_attack(self) -> "Skill":
        """Set up a basic attack, letting equipped weapons unleash.

        The skill's own unleash tags are not checked for the resulting skill,
        so weapon unleashes never chain into skill unleashes.
        """
        normal_id = self.subject.attack_skill_id()
        if self.subject.has_no_weapons():
            skill_id = normal_id
        else:
            skill_id = self.resolver.resolve_attack_unleash(self.subject, self.timeline_time)

        return self._set_item(normal_id, skill_id, UnleashSource.WEAPON)

    def set_skill(self, skill_id: int) -> "Skill":
        """Set up a skill, letting its own unleash tags replace it.

        Raises:
            SkillCatalogError: If the requested skill does not exist
        """
        skill = self.catalog.get(skill_id)
        replacement = self.resolver.resolve_skill_unleash(
            self.subject, skill.note, self.timeline_time
        )
        return self._set_item(skill_id, replacement or skill_id, UnleashSource.SKILL)

    def _set_item(self, original_id: int, skill_id: int, source: UnleashSource) -> "Skill":
        if skill_id != original_id and skill_id not in self.catalog:
            # Unleash ids are not validated when tags are parsed
            self._emit_log(
                f"{self.subject.name} unleashed unknown skill {skill_id}; using skill {original_id}",
                LogLevel.WARNING
            )
            skill_id = original_id

        self.item = self.catalog.get(skill_id)
        self.unleashed = skill_id != original_id

        if self.unleashed and self.event_manager is not None:
            self.event_manager.publish(
                UnleashTriggered(
                    timeline_time=self.timeline_time,
                    actor_name=self.subject.name,
                    source=source,
                    original_skill_id=original_id,
                    skill_id=skill_id,
                ),
                source="CombatAction"
            )

        return self.item

    def _emit_log(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        if self.event_manager is None:
            return
        self.event_manager.publish(
            LogMessage(
                timeline_time=self.timeline_time,
                message=message,
                category="BATTLE",
                level=level,
                source="CombatAction"
            ),
            source="CombatAction"
        )
