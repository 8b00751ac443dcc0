"""Configuration for the unleash engine.

This package contains:
- unleash_config.py: Immutable, validated configuration loaded from YAML
- formula.py: Safe evaluation of custom luck formulas
"""

from .formula import FormulaError, LuckFormula, LuckFormulaFn, validate_formula
from .unleash_config import ConfigError, UnleashConfig, load_unleash_config

__all__ = [
    "FormulaError",
    "LuckFormula",
    "LuckFormulaFn",
    "validate_formula",
    "ConfigError",
    "UnleashConfig",
    "load_unleash_config",
]
