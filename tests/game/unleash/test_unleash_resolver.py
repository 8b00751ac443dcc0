"""
Unit tests for UnleashResolver.

Tests ordered evaluation, short-circuiting, trigger thresholds, weapon order
for attacks, custom luck formulas and debug diagnostics.
"""

import random

import pytest

from unleash.core.config import UnleashConfig
from unleash.core.events import DebugMessage, EventType
from unleash.game.entities import Actor, Weapon
from unleash.game.unleash import UnleashResolver, candidate_triggers, UnleashCandidate
from tests.test_utils import DrawSequence, StubUser


class TestCandidateTriggers:
    """Test the single-draw trigger test."""

    def test_draw_at_chance_triggers(self):
        assert candidate_triggers(UnleashCandidate(5), 0.5, 0.5)

    def test_draw_above_chance_fails(self):
        assert not candidate_triggers(UnleashCandidate(5), 0.5, 0.51)

    def test_zero_chance_never_triggers(self):
        assert not candidate_triggers(UnleashCandidate(5), 0.0, 0.0)

    def test_negative_chance_never_triggers(self):
        assert not candidate_triggers(UnleashCandidate(5), -0.3, 0.0)

    def test_chance_above_one_always_triggers(self):
        assert candidate_triggers(UnleashCandidate(5), 1.7, 0.999999)

    def test_zero_id_never_triggers(self):
        assert not candidate_triggers(UnleashCandidate(0), 1.0, 0.0)


class TestResolve:
    """Test resolution of a single block of note text."""

    def test_full_chance_triggers(self):
        resolver = UnleashResolver(rng=DrawSequence(0.0))
        assert resolver.resolve(StubUser(luk=3), "<unleash: 15, 100>") == 15

    @pytest.mark.parametrize("roll", [0.0, 0.25, 0.5, 0.999999])
    def test_zero_chance_never_triggers(self, roll):
        resolver = UnleashResolver(rng=DrawSequence(roll))
        assert resolver.resolve(StubUser(luk=50), "<unleash: 15, 0>") is None

    @pytest.mark.parametrize("notes", [None, "", "just a plain sword"])
    def test_no_candidates(self, notes):
        rng = DrawSequence()
        resolver = UnleashResolver(rng=rng)

        assert resolver.resolve(StubUser(), notes) is None
        assert rng.calls == 0

    def test_first_triggering_candidate_wins(self):
        """A and B would both trigger; A is written first so A wins."""
        rng = DrawSequence(0.1, 0.1, 0.1)
        resolver = UnleashResolver(rng=rng)

        result = resolver.resolve(StubUser(), "<unleash: 1, 50><unleash: 2, 50><unleash: 3, 50>")

        assert result == 1
        assert rng.calls == 1

    def test_later_candidate_when_earlier_misses(self):
        rng = DrawSequence(0.9, 0.1, 0.1)
        resolver = UnleashResolver(rng=rng)

        assert resolver.resolve(StubUser(), "<unleash: 1, 50><unleash: 2, 50><unleash: 3, 50>") == 2
        assert rng.calls == 2

    def test_exhausted_returns_none(self):
        rng = DrawSequence(0.9, 0.9)
        resolver = UnleashResolver(rng=rng)

        assert resolver.resolve(StubUser(), "<unleash: 1, 50><unleash: 2, 50>") is None
        assert rng.calls == 2

    def test_zero_id_candidate_consumes_draw_but_never_triggers(self):
        rng = DrawSequence(0.0, 0.0)
        resolver = UnleashResolver(rng=rng)

        assert resolver.resolve(StubUser(), "<unleash: 0, 100><unleash: 6, 100>") == 6
        assert rng.calls == 2

    def test_unknown_ids_pass_through(self):
        resolver = UnleashResolver(rng=DrawSequence(0.0))
        assert resolver.resolve(StubUser(), "<unleash: 9999, 100>") == 9999

    def test_luck_affects_outcome(self):
        """0.5 base, difficulty 10: luck 20 gives ~0.667, luck 0 gives 0."""
        notes = "<unleash: 4, 50, 10>"
        assert UnleashResolver(rng=DrawSequence(0.6)).resolve(StubUser(luk=20), notes) == 4
        assert UnleashResolver(rng=DrawSequence(0.6)).resolve(StubUser(luk=10), notes) is None
        assert UnleashResolver(rng=DrawSequence(0.0)).resolve(StubUser(luk=0), notes) is None

    def test_tags_are_parsed_on_every_call(self):
        resolver = UnleashResolver(rng=DrawSequence(default=0.0))
        user = StubUser()

        assert resolver.resolve(user, "<unleash: 1, 100>") == 1
        assert resolver.resolve(user, "<unleash: 2, 100>") == 2

    def test_default_rng_is_random(self):
        assert UnleashResolver().rng is random.random


class TestResolveWithLuckFormula:
    """Test that a configured luck formula decides the outcome."""

    def test_override_can_force_trigger(self):
        config = UnleashConfig(luck_formula="1")
        resolver = UnleashResolver(config, rng=DrawSequence(0.99))

        # Default formula would give 0 here (luck 0, difficulty 10)
        assert resolver.resolve(StubUser(luk=0), "<unleash: 4, 50, 10>") == 4

    def test_override_can_prevent_trigger(self):
        config = UnleashConfig(luck_formula="0")
        resolver = UnleashResolver(config, rng=DrawSequence(0.0))

        assert resolver.resolve(StubUser(luk=999), "<unleash: 4, 100>") is None

    def test_override_uses_bindings(self):
        config = UnleashConfig(luck_formula="chance + user.luk * 0.01 - diff * 0.01")
        user = StubUser(luk=30)

        assert UnleashResolver(config, rng=DrawSequence(0.69)).resolve(user, "<unleash: 4, 50, 10>") == 4
        assert UnleashResolver(config, rng=DrawSequence(0.71)).resolve(user, "<unleash: 4, 50, 10>") is None

    def test_callable_key_error_uses_default_formula(self):
        config = UnleashConfig(luck_formula=lambda user, diff, chance: {10: 0.5}[diff])
        resolver = UnleashResolver(config, rng=DrawSequence(0.0))

        assert resolver.resolve(StubUser(luk=5), "<unleash: 4, 100, 7>") == 4

    def test_nan_after_load_uses_default_formula(self):
        calls = []

        def formula(user, diff, chance):
            calls.append(diff)
            return 0.5 if len(calls) == 1 else float("nan")

        resolver = UnleashResolver(UnleashConfig(luck_formula=formula), rng=DrawSequence(0.0))

        assert resolver.resolve(StubUser(luk=5), "<unleash: 4, 100>") == 4


class TestAttackUnleash:
    """Test basic attack resolution across equipped weapons."""

    def test_no_weapons_returns_attack_skill(self):
        rng = DrawSequence()
        actor = Actor(name="Brawler", luk=10, default_attack_skill_id=1)

        assert UnleashResolver(rng=rng).resolve_attack_unleash(actor) == 1
        assert rng.calls == 0

    def test_weapons_without_tags_return_attack_skill(self):
        actor = Actor(name="Hero", equipped=[Weapon(1, "Bronze Sword")], default_attack_skill_id=1)
        assert UnleashResolver(rng=DrawSequence()).resolve_attack_unleash(actor) == 1

    def test_custom_attack_skill_fallback(self):
        actor = Actor(name="Hero", equipped=[Weapon(1, "Stick", "<unleash: 5, 0>")], default_attack_skill_id=7)
        assert UnleashResolver(rng=DrawSequence(0.5)).resolve_attack_unleash(actor) == 7

    def test_weapons_checked_in_equipment_order(self):
        first = Weapon(1, "Main Hand", "<unleash: 20, 50>")
        second = Weapon(2, "Off Hand", "<unleash: 30, 50>")
        actor = Actor(name="Dual", equipped=[first, second])

        assert UnleashResolver(rng=DrawSequence(0.1)).resolve_attack_unleash(actor) == 20
        assert UnleashResolver(rng=DrawSequence(0.9, 0.1)).resolve_attack_unleash(actor) == 30

    def test_empty_slots_skipped(self):
        weapon = Weapon(2, "Off Hand", "<unleash: 30, 100>")
        actor = Actor(name="OneHand", equipped=[None, weapon])

        assert UnleashResolver(rng=DrawSequence(0.0)).resolve_attack_unleash(actor) == 30


class TestSkillUnleash:
    """Test skill resolution."""

    def test_replacement(self, hero):
        resolver = UnleashResolver(rng=DrawSequence(0.0))
        assert resolver.resolve_skill_unleash(hero, "<unleash: 11, 100>") == 11

    def test_no_replacement(self, hero):
        resolver = UnleashResolver(rng=DrawSequence(0.5))
        assert resolver.resolve_skill_unleash(hero, "<unleash: 11, 20>") is None


class TestDebugDiagnostics:
    """Test per-candidate debug records."""

    def test_records_only_evaluated_candidates(self, event_manager, debug_config):
        records = []
        event_manager.subscribe(EventType.DEBUG_MESSAGE, records.append)
        resolver = UnleashResolver(debug_config, event_manager, rng=DrawSequence(0.9, 0.1, 0.1))

        resolver.resolve(StubUser(luk=20), "<unleash: 1, 50><unleash: 2, 50, 10><unleash: 3, 50>")
        event_manager.process_events()

        assert len(records) == 2
        assert all(isinstance(record, DebugMessage) for record in records)
        assert [r.context['skill_id'] for r in records] == [1, 2]
        assert [r.context['triggered'] for r in records] == [False, True]
        assert records[1].context['base_chance'] == 0.5
        assert records[1].context['effective_chance'] == pytest.approx(2 / 3)
        assert records[1].context['luck'] == 20
        assert "Unleash Skill: 2" in records[1].message

    def test_no_records_when_debug_disabled(self, event_manager):
        resolver = UnleashResolver(UnleashConfig(), event_manager, rng=DrawSequence(0.0))

        resolver.resolve(StubUser(), "<unleash: 1, 100>")

        assert not event_manager.has_queued_events()

    def test_debug_without_event_manager(self, debug_config):
        resolver = UnleashResolver(debug_config, rng=DrawSequence(0.0))
        assert resolver.resolve(StubUser(), "<unleash: 1, 100>") == 1

    def test_records_reach_log_manager(self, event_manager, log_manager, debug_config):
        resolver = UnleashResolver(debug_config, event_manager, rng=DrawSequence(0.0))

        resolver.resolve(StubUser(), "<unleash: 1, 100>")
        event_manager.process_events()

        assert any("Unleash Skill: 1" in message.text for message in log_manager.messages)
