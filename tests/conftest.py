"""
Basic test fixtures for the unleash test suite.

Provides fixtures for actors, skill catalogs, configuration and the
event bus.
"""

import sys
import os
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from unleash.core.config import UnleashConfig
from unleash.core.events import EventManager
from unleash.game.entities import Actor, Skill, SkillCatalog, Weapon
from unleash.game.managers import LogManager


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager()


@pytest.fixture
def log_manager(event_manager):
    """Create a log manager listening on the test event manager."""
    return LogManager(event_manager)


@pytest.fixture
def debug_config():
    """Configuration with per-candidate diagnostics turned on."""
    return UnleashConfig(debug_logging=True)


@pytest.fixture
def sample_catalog():
    """Create a small skill catalog."""
    return SkillCatalog([
        Skill(1, "Attack"),
        Skill(2, "Guard"),
        Skill(3, "Fire Slash", "<unleash: 11, 100>"),
        Skill(10, "Heat Wave"),
        Skill(11, "Inferno"),
        Skill(12, "Frost Bite"),
    ])


@pytest.fixture
def flame_sword():
    return Weapon(2, "Flame Sword", "A blade wreathed in fire.\n<unleash: 10, 25>\n<unleash: 11, 10>")


@pytest.fixture
def hero(flame_sword):
    """Create an actor with one unleash weapon equipped."""
    return Actor(name="Hero", luk=10, equipped=[flame_sword])
