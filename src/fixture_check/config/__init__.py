"""Configuration management: connection profiles, TOML loading, and config models.

Usage:
    >>> from fixture_check.config import load_config, CheckConfig, ConnectionProfile
"""

from fixture_check.config.loader import load_config
from fixture_check.config.models import CheckConfig, ConnectionProfile

__all__ = ["load_config", "CheckConfig", "ConnectionProfile"]
