"""
Configuration loader for the unleash engine.

This module handles loading and validating the YAML configuration file that
controls debug diagnostics and the optional custom luck formula. The loaded
configuration is immutable and is passed explicitly to the resolver.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Union, TYPE_CHECKING

import yaml

from .formula import FormulaError, LuckFormula, LuckFormulaFn, validate_formula
from ..events import ConfigLoaded

if TYPE_CHECKING:
    from ..events import EventManager


DEFAULT_CONFIG_PATH = "assets/config/unleash.yaml"
CONFIG_SECTION = "unleash"
KNOWN_KEYS = frozenset({"debug", "luck_formula"})


class ConfigError(ValueError):
    """Raised when the unleash configuration is invalid."""


@dataclass(frozen=True)
class UnleashConfig:
    """Process-wide unleash settings.

    Attributes:
        debug_logging: Publish a diagnostic record for every evaluated candidate
        luck_formula: Optional override for the default luck scaling, either an
            expression string or a callable ``(user, diff, chance) -> float``
    """
    debug_logging: bool = False
    luck_formula: Optional[Union[str, Callable[..., float]]] = None
    formula: Optional[LuckFormulaFn] = field(init=False, default=None, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.debug_logging, bool):
            raise ConfigError(
                f"debug must be a boolean, got {type(self.debug_logging).__name__}: {self.debug_logging!r}"
            )

        compiled: Optional[LuckFormulaFn] = None
        if isinstance(self.luck_formula, str):
            if self.luck_formula.strip():
                try:
                    compiled = LuckFormula(self.luck_formula)
                except FormulaError as e:
                    raise ConfigError(str(e)) from e
        elif callable(self.luck_formula):
            compiled = self.luck_formula
        elif self.luck_formula is not None:
            raise ConfigError(
                f"luck_formula must be a string or callable, got {type(self.luck_formula).__name__}"
            )

        if compiled is not None:
            try:
                validate_formula(compiled)
            except FormulaError as e:
                raise ConfigError(str(e)) from e

        # Set formula since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'formula', compiled)

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "UnleashConfig":
        """Build a configuration from the ``unleash`` section of a config file.

        Raises:
            ConfigError: If the section has unknown keys or wrongly typed values
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"'{CONFIG_SECTION}' section must be a mapping")

        unknown = sorted(set(data) - KNOWN_KEYS)
        if unknown:
            raise ConfigError(f"Unknown unleash config keys: {', '.join(unknown)}")

        luck_formula = data.get('luck_formula')
        if luck_formula is not None and not isinstance(luck_formula, str):
            raise ConfigError("luck_formula must be a string")

        return cls(
            debug_logging=data.get('debug', False),
            luck_formula=luck_formula,
        )

    @property
    def has_luck_formula(self) -> bool:
        return self.formula is not None

    def validate(self) -> dict[str, Any]:
        """
        Validate the configuration.

        Returns:
            Dict: Validation results including errors and warnings
        """
        errors = []
        warnings = []

        if self.formula is not None:
            try:
                probe = validate_formula(self.formula)
            except FormulaError as e:
                errors.append(str(e))
            else:
                if not 0.0 <= probe <= 1.0:
                    warnings.append(
                        f"Luck formula returns {probe:.3f} for luck 10, difficulty 10, chance 50%; "
                        "chances outside 0-1 always or never trigger"
                    )

        return {
            'valid': len(errors) == 0,
            'errors': errors,
            'warnings': warnings,
            'debug_logging': self.debug_logging,
            'luck_formula': self.luck_formula if isinstance(self.luck_formula, str) else None,
        }


def resolve_config_path(config_path: Optional[str] = None) -> Path:
    """Resolve a config path, treating relative paths as relative to the project root."""
    config_path = config_path or DEFAULT_CONFIG_PATH
    if os.path.isabs(config_path):
        return Path(config_path)
    project_root = Path(__file__).parent.parent.parent.parent
    return project_root / config_path


def load_unleash_config(
    config_path: Optional[str] = None,
    event_manager: Optional["EventManager"] = None
) -> UnleashConfig:
    """
    Load the unleash configuration from a YAML file.

    A missing file yields the default configuration.

    Args:
        config_path: Path to the YAML file (absolute or relative to project root)
        event_manager: Optional event bus notified once the config is loaded

    Returns:
        UnleashConfig: The validated configuration

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    config_file = resolve_config_path(config_path)

    if not config_file.exists():
        config = UnleashConfig()
    else:
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Invalid config structure in {config_file}: expected a mapping")

        try:
            config = UnleashConfig.from_dict(data.get(CONFIG_SECTION))
        except ConfigError as e:
            raise ConfigError(f"{config_file}: {e}") from e

    if event_manager is not None:
        event_manager.publish(
            ConfigLoaded(
                timeline_time=0,
                path=str(config_file),
                debug_logging=config.debug_logging,
                has_luck_formula=config.has_luck_formula,
            ),
            source="UnleashConfig"
        )

    return config
