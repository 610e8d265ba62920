"""Schema normalization, comparison, and live introspection.

Provides normalization (``normalize``), column presence and attribute
comparison (``diff_presence``, ``compare_columns``), and live table
introspection (``SchemaIntrospector``).

Usage:
    from fixture_check.schema import normalize, diff_presence, compare_columns
    from fixture_check.schema import SchemaIntrospector
"""

from fixture_check.schema.comparator import (
    COMPARABLE_ATTRIBUTES,
    compare_columns,
    diff_presence,
)
from fixture_check.schema.introspector import SchemaIntrospector
from fixture_check.schema.models import (
    AttributeDiscrepancy,
    ColumnDescriptor,
    Direction,
    DiscrepancyKind,
    FixtureDefinition,
    FixtureSchema,
    IntrospectionErrorKind,
    IntrospectionResult,
    MismatchReport,
    PairResult,
    PairStatus,
    RunSummary,
    SchemaOrigin,
)
from fixture_check.schema.normalizer import RESERVED_KEYS, normalize, stringify_default

__all__ = [
    "normalize",
    "stringify_default",
    "RESERVED_KEYS",
    "diff_presence",
    "compare_columns",
    "COMPARABLE_ATTRIBUTES",
    "SchemaIntrospector",
    "ColumnDescriptor",
    "FixtureDefinition",
    "FixtureSchema",
    "AttributeDiscrepancy",
    "MismatchReport",
    "IntrospectionResult",
    "PairResult",
    "RunSummary",
    "SchemaOrigin",
    "DiscrepancyKind",
    "IntrospectionErrorKind",
    "PairStatus",
    "Direction",
]
