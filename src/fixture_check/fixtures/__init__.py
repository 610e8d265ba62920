"""Fixture discovery and lookup.

Usage:
    from fixture_check.fixtures import FixtureRegistry, discover_fixtures
"""

from fixture_check.fixtures.registry import (
    FixtureLoadError,
    FixtureNotFoundError,
    FixtureRegistry,
    ResolutionError,
    discover_fixtures,
    fixture_name,
    load_fixture_file,
    qualify,
    table_name_for,
)

__all__ = [
    "FixtureRegistry",
    "discover_fixtures",
    "load_fixture_file",
    "fixture_name",
    "qualify",
    "table_name_for",
    "ResolutionError",
    "FixtureNotFoundError",
    "FixtureLoadError",
]
