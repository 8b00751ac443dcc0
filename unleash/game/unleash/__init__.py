"""Unleash resolution engine.

This package contains:
- tag_parser.py: Extraction of unleash candidates from note text
- chance_evaluator.py: Luck-adjusted trigger chances
- unleash_resolver.py: Ordered candidate evaluation with random draws
- unleash_forecast.py: Draw-free odds for display
"""

from .tag_parser import UnleashCandidate, parse_unleash_tags
from .chance_evaluator import ChanceEvaluator, default_luck_formula
from .unleash_resolver import RandomSource, UnleashResolver, candidate_triggers
from .unleash_forecast import CandidateForecast, UnleashForecast, UnleashForecastData

__all__ = [
    "UnleashCandidate",
    "parse_unleash_tags",
    "ChanceEvaluator",
    "default_luck_formula",
    "RandomSource",
    "UnleashResolver",
    "candidate_triggers",
    "CandidateForecast",
    "UnleashForecast",
    "UnleashForecastData",
]
