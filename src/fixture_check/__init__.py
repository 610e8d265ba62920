"""fixture-check: Compare declared fixture schemas against live database tables.

Loads hand-authored fixture definitions, introspects the tables they mirror,
and reports columns and column attributes that have drifted apart.

Usage:
    from fixture_check import FixtureChecker, FixtureRegistry, SchemaIntrospector
    from fixture_check import normalize, diff_presence, compare_columns
    from fixture_check import load_config, CheckConfig
"""

__version__ = "0.1.0"

# Orchestration
from fixture_check.checker import FixtureChecker, LiveSchemaSource, compare_schemas

# Config
from fixture_check.config.loader import load_config
from fixture_check.config.models import CheckConfig, ConnectionProfile

# Factory
from fixture_check.factory import (
    PluginNotFoundError,
    ProfileNotFoundError,
    get_connection,
    resolve_url,
)

# Fixtures
from fixture_check.fixtures.registry import (
    FixtureLoadError,
    FixtureNotFoundError,
    FixtureRegistry,
    ResolutionError,
    discover_fixtures,
)

# Schema
from fixture_check.schema.comparator import compare_columns, diff_presence
from fixture_check.schema.introspector import SchemaIntrospector
from fixture_check.schema.models import (
    ColumnDescriptor,
    MismatchReport,
    RunSummary,
)
from fixture_check.schema.normalizer import normalize

__all__ = [
    # Orchestration
    "FixtureChecker",
    "LiveSchemaSource",
    "compare_schemas",
    # Config
    "load_config",
    "CheckConfig",
    "ConnectionProfile",
    # Factory
    "get_connection",
    "resolve_url",
    "ProfileNotFoundError",
    "PluginNotFoundError",
    # Fixtures
    "FixtureRegistry",
    "discover_fixtures",
    "ResolutionError",
    "FixtureNotFoundError",
    "FixtureLoadError",
    # Schema
    "normalize",
    "diff_presence",
    "compare_columns",
    "SchemaIntrospector",
    "ColumnDescriptor",
    "MismatchReport",
    "RunSummary",
]
