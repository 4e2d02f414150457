from __future__ import annotations


class ConfigError(ValueError):
    """Raised when a GameConfig cannot describe a playable game."""
