"""Normalization of raw column mappings into comparable descriptors.

Both sides of a comparison go through ``normalize()`` before any diffing:

- Fixture-origin mappings lose their ``_options``, ``_constraints`` and
  ``_indexes`` metadata entries, and their ``default`` values are turned
  into strings, since live introspection always reports defaults as text.
  Boolean defaults become ``"true"`` / ``"false"``, the literals PostgreSQL
  reports. SQLite and MySQL report ``"1"`` / ``"0"``, so fixtures checked
  against those engines should spell boolean defaults as those strings.
- Column names come back sorted so comparison output is deterministic.

Pure logic -- no I/O.

Usage:
    from fixture_check.schema.models import SchemaOrigin
    from fixture_check.schema.normalizer import normalize

    fixture_columns = normalize(definition.fields, SchemaOrigin.FIXTURE)
    live_columns = normalize(result.columns, SchemaOrigin.LIVE)
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from fixture_check.schema.models import ColumnDescriptor, SchemaOrigin

# Fixture metadata entries that are not columns
RESERVED_KEYS = frozenset({"_options", "_constraints", "_indexes"})


def stringify_default(value: Any) -> Any:
    """Render a fixture default the way live introspection reports it.

    ``None`` stays ``None``. Booleans become SQL literals (``"true"`` /
    ``"false"``), everything else goes through ``str()``.

    Examples:
        >>> stringify_default(0)
        '0'
        >>> stringify_default(False)
        'false'
        >>> stringify_default(None) is None
        True
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def _to_descriptor(raw: Mapping[str, Any] | ColumnDescriptor) -> ColumnDescriptor:
    if isinstance(raw, ColumnDescriptor):
        return raw
    return ColumnDescriptor.model_validate(dict(raw))


def normalize(
    raw_columns: Mapping[str, Mapping[str, Any] | ColumnDescriptor],
    origin: SchemaOrigin,
) -> dict[str, ColumnDescriptor]:
    """Convert a raw column mapping into sorted ``ColumnDescriptor`` values.

    Args:
        raw_columns: Dict mapping column name to its raw attribute dict (or an
            already-built ``ColumnDescriptor``).
        origin: ``SchemaOrigin.FIXTURE`` strips metadata keys and coerces
            defaults to strings; ``SchemaOrigin.LIVE`` only sorts and wraps.

    Returns:
        Dict of column name to ``ColumnDescriptor``, in ascending name order.

    Raises:
        pydantic.ValidationError: If an attribute has the wrong type
            (e.g. ``length = "255"``).

    Examples:
        >>> normalize({}, SchemaOrigin.FIXTURE)
        {}
        >>> cols = normalize(
        ...     {"b": {"type": "integer", "default": 0}, "_indexes": {}, "a": {}},
        ...     SchemaOrigin.FIXTURE,
        ... )
        >>> list(cols)
        ['a', 'b']
        >>> cols["b"].default
        '0'
    """
    columns: dict[str, ColumnDescriptor] = {}

    for name in sorted(raw_columns):
        if origin is SchemaOrigin.FIXTURE and name in RESERVED_KEYS:
            continue

        descriptor = _to_descriptor(raw_columns[name])

        if origin is SchemaOrigin.FIXTURE and descriptor.default is not None:
            descriptor = descriptor.model_copy(
                update={"default": stringify_default(descriptor.default)}
            )

        columns[name] = descriptor

    return columns
