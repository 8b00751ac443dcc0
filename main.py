#!/usr/bin/env python3
"""Simulate attacks and show how often equipped weapons unleash."""

import argparse
import random
from collections import Counter

from unleash.core.config import ConfigError, load_unleash_config
from unleash.core.events import EventManager
from unleash.game.combat import CombatAction
from unleash.game.entities import Actor, load_skill_data
from unleash.game.managers import LogLevel, LogManager
from unleash.game.unleash import UnleashForecast, UnleashResolver


def main():
    parser = argparse.ArgumentParser(description="Unleash skill simulator")
    parser.add_argument("--config", help="Path to unleash config YAML")
    parser.add_argument("--data", help="Path to skill/weapon data YAML")
    parser.add_argument("--luck", type=int, default=10, help="Luck of the attacking actor")
    parser.add_argument(
        "--weapon", type=int, action="append", dest="weapons",
        help="Equipped weapon id (repeat for dual wielding)"
    )
    parser.add_argument("--attacks", type=int, default=1000, help="Number of attacks to simulate")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")
    parser.add_argument("--debug", action="store_true", help="Show debug log messages")
    args = parser.parse_args()

    event_manager = EventManager()
    log_manager = LogManager(event_manager, default_level=LogLevel.DEBUG if args.debug else LogLevel.INFO)

    try:
        config = load_unleash_config(args.config, event_manager)
    except ConfigError as e:
        parser.error(str(e))

    catalog, weapons = load_skill_data(args.data)
    weapon_ids = args.weapons or [2]
    unknown = [weapon_id for weapon_id in weapon_ids if weapon_id not in weapons]
    if unknown:
        parser.error(f"Unknown weapon id(s): {', '.join(map(str, unknown))}")

    actor = Actor(name="Hero", luk=args.luck, equipped=[weapons[weapon_id] for weapon_id in weapon_ids])
    resolver = UnleashResolver(config, event_manager, rng=random.Random(args.seed).random)

    results = Counter()
    for turn in range(args.attacks):
        action = CombatAction(actor, catalog, resolver, event_manager, timeline_time=turn)
        results[action.set_attack().name] += 1
        event_manager.process_events()

    print(f"{actor.name} (luck {actor.luk}) with {', '.join(w.name for w in actor.weapons())}")
    print(f"{args.attacks} attacks:")
    for name, count in results.most_common():
        print(f"  {name:<16} {count:>6}  ({count / args.attacks:.1%})")

    forecast = UnleashForecast(resolver.chance_evaluator).forecast_attack(actor)
    print("Expected:")
    for skill_id, probability in forecast.skill_probabilities().items():
        print(f"  {catalog.get(skill_id).name:<16} {probability:>14.1%}")
    print(f"  {catalog.get(actor.attack_skill_id()).name:<16} {forecast.no_unleash_probability:>14.1%}")

    if args.debug:
        for message in log_manager.get_messages(count=20):
            print(message.format())

    stats = event_manager.get_statistics()
    if stats['subscriber_errors']:
        print(f"{stats['subscriber_errors']} log subscriber error(s):")
        for error in event_manager.subscriber_errors:
            print(f"  {error}")


if __name__ == "__main__":
    main()
