"""Game-side systems: entities, unleash resolution and combat actions."""
