"""Configuration system for illinkrepro."""

from .models import ReproConfig, get_config, reset_config

__all__ = ["ReproConfig", "get_config", "reset_config"]
