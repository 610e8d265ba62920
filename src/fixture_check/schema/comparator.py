"""Schema comparison between a fixture and a live table.

Compares normalized column sets in two steps:
- ``diff_presence``: columns present on one side only (set difference by key)
- ``compare_columns``: allow-listed attributes of columns present on both sides

Pure logic -- no I/O, no database connections.

Usage:
    from fixture_check.schema.comparator import compare_columns, diff_presence

    missing_from_live = diff_presence(fixture_columns, live_columns)
    missing_from_fixture = diff_presence(live_columns, fixture_columns)
    discrepancies = compare_columns(fixture_columns, live_columns)
"""

import logging
from collections.abc import Mapping
from typing import Any

from fixture_check.schema.models import (
    AttributeDiscrepancy,
    ColumnDescriptor,
    DiscrepancyKind,
)

logger = logging.getLogger(__name__)

# Attributes worth warning about; everything else has no fixture-level analog
COMPARABLE_ATTRIBUTES: tuple[str, ...] = (
    "autoIncrement",
    "default",
    "length",
    "null",
    "precision",
    "type",
    "unsigned",
)

# Not comparable across engines, presence included
SKIPPED_ATTRIBUTES = frozenset({"autoIncrement"})


def diff_presence(left: Mapping[str, Any], right: Mapping[str, Any]) -> set[str]:
    """Return the keys of *left* that are absent from *right*.

    Examples:
        >>> diff_presence({"id": {}, "email": {}}, {"id": {}})
        {'email'}
        >>> diff_presence({"id": {}}, {"id": {}})
        set()
    """
    return set(left.keys()) - set(right.keys())


def _strictly_equal(left: Any, right: Any) -> bool:
    """Equality that also requires matching types (``0`` is not ``False``)."""
    return type(left) is type(right) and left == right


def compare_columns(
    fixture_columns: Mapping[str, ColumnDescriptor],
    live_columns: Mapping[str, ColumnDescriptor],
) -> list[AttributeDiscrepancy]:
    """Compare allow-listed attributes of columns present on both sides.

    For every fixture column that also exists live, each allow-listed
    attribute the fixture declares is checked:

    - ``autoIncrement`` is never compared.
    - Live attribute absent (or ``None``) while the fixture value is not
      ``None``: a ``MISSING`` discrepancy.
    - Both present but not strictly equal: a ``DIFFERS`` discrepancy.

    Fixture columns missing from the live side are skipped here; they are
    reported by ``diff_presence``.

    Args:
        fixture_columns: Normalized fixture columns (defaults already strings).
        live_columns: Normalized live columns.

    Returns:
        Discrepancies in column order, then allow-list order per column.

    Examples:
        >>> from fixture_check.schema.models import ColumnDescriptor as C
        >>> compare_columns(
        ...     {"name": C(type="string", length=255)},
        ...     {"name": C(type="string", length=100)},
        ... )[0].attribute
        'length'
    """
    discrepancies: list[AttributeDiscrepancy] = []

    for column_name, fixture_column in fixture_columns.items():
        live_column = live_columns.get(column_name)
        if live_column is None:
            logger.debug(f"Field {column_name} is missing from the live DB")
            continue

        fixture_attributes = fixture_column.attributes()
        live_attributes = live_column.attributes()

        for attribute in COMPARABLE_ATTRIBUTES:
            if attribute not in fixture_attributes or attribute in SKIPPED_ATTRIBUTES:
                continue

            fixture_value = fixture_attributes[attribute]
            live_value = live_attributes.get(attribute)

            if live_value is None:
                if fixture_value is not None:
                    discrepancies.append(
                        AttributeDiscrepancy(
                            column=column_name,
                            attribute=attribute,
                            kind=DiscrepancyKind.MISSING,
                            fixture_value=fixture_value,
                        )
                    )
                continue

            if not _strictly_equal(fixture_value, live_value):
                discrepancies.append(
                    AttributeDiscrepancy(
                        column=column_name,
                        attribute=attribute,
                        kind=DiscrepancyKind.DIFFERS,
                        fixture_value=fixture_value,
                        live_value=live_value,
                    )
                )

    return discrepancies
