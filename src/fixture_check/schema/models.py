"""Pydantic models for fixture and live schema comparison.

This module contains schema-domain models:
- Column models: ColumnDescriptor
- Fixture models: FixtureDefinition, FixtureSchema
- Comparison models: AttributeDiscrepancy, MismatchReport
- Introspection result: IntrospectionResult
- Run models: PairResult, RunSummary

Configuration models (CheckConfig, ConnectionProfile) live in
fixture_check.config.models.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Enums
# ============================================================================


class SchemaOrigin(str, Enum):
    """Where a raw column mapping came from."""

    FIXTURE = "fixture"
    LIVE = "live"


class DiscrepancyKind(str, Enum):
    """Kind of attribute-level discrepancy."""

    MISSING = "missing"  # Attribute declared in fixture, absent on live column
    DIFFERS = "differs"


class IntrospectionErrorKind(str, Enum):
    """Why a live table could not be described."""

    NOT_FOUND = "not_found"
    CONNECTION_FAILURE = "connection_failure"
    OTHER = "other"


class PairStatus(str, Enum):
    """Terminal state of one fixture/table pair."""

    IGNORED = "ignored"
    RESOLUTION_FAILED = "resolution_failed"
    INTROSPECTION_FAILED = "introspection_failed"
    COMPARED = "compared"


class Direction(str, Enum):
    """Which presence differences get reported."""

    BOTH = "both"
    FIXTURE = "fixture"  # Fixture columns missing from the live table
    DB = "db"  # Live columns missing from the fixture


# ============================================================================
# Column Models
# ============================================================================


class ColumnDescriptor(BaseModel):
    """Attributes of a single column, from a fixture or a live table.

    Typed fields cover the comparable attributes; anything else (comment,
    collation, ...) is kept in ``model_extra`` and never compared.
    Validation is strict so ``0`` and ``False`` never collapse into each
    other.

    Example:
        >>> col = ColumnDescriptor.model_validate({"type": "integer", "null": False})
        >>> col.attributes()
        {'type': 'integer', 'null': False}
    """

    model_config = ConfigDict(
        strict=True,
        extra="allow",
        frozen=True,
        populate_by_name=True,
    )

    type: str | None = None
    length: int | None = None
    precision: int | None = None
    null: bool | None = None
    default: Any = None
    unsigned: bool | None = None
    auto_increment: bool | None = Field(default=None, alias="autoIncrement")

    def attributes(self) -> dict[str, Any]:
        """Attributes that were explicitly given, keyed by their public name.

        An attribute explicitly set to ``None`` is included; one that was never
        given is not.
        """
        return self.model_dump(by_alias=True, exclude_unset=True)


# ============================================================================
# Fixture Models
# ============================================================================


class FixtureDefinition(BaseModel):
    """A fixture as loaded from its source, before normalization.

    ``fields`` is the raw column mapping and may still hold the
    ``_options``, ``_constraints`` and ``_indexes`` metadata entries.
    """

    name: str
    table: str
    fields: dict[str, dict[str, Any]] = Field(default_factory=dict)


class FixtureSchema(BaseModel):
    """A fixture's declared schema, normalized and ready to compare."""

    model_config = ConfigDict(frozen=True)

    name: str
    table: str
    columns: dict[str, ColumnDescriptor] = Field(default_factory=dict)


# ============================================================================
# Comparison Models
# ============================================================================


class AttributeDiscrepancy(BaseModel):
    """A single compared attribute that does not match the live column."""

    column: str
    attribute: str
    kind: DiscrepancyKind
    fixture_value: Any = None
    live_value: Any = None

    @property
    def message(self) -> str:
        """Human-readable description of the discrepancy."""
        if self.kind is DiscrepancyKind.MISSING:
            return (
                f"Field attribute `{self.column}:{self.attribute}` "
                f"is missing from the live DB!"
            )
        return (
            f"Field `{self.column}` attribute `{self.attribute}` differs from "
            f"live DB! (`{self.fixture_value!r}` vs `{self.live_value!r}` live)"
        )


class MismatchReport(BaseModel):
    """Result of comparing one fixture against one live table.

    Example:
        >>> report = MismatchReport(fixture="UsersFixture", table="users")
        >>> report.has_issues
        False
        >>> report.difference_count
        0
    """

    fixture: str
    table: str
    missing_from_live: list[str] = Field(default_factory=list)
    missing_from_fixture: list[str] = Field(default_factory=list)
    discrepancies: list[AttributeDiscrepancy] = Field(default_factory=list)

    @property
    def has_presence_issues(self) -> bool:
        return bool(self.missing_from_live or self.missing_from_fixture)

    @property
    def has_issues(self) -> bool:
        return self.has_presence_issues or bool(self.discrepancies)

    @property
    def difference_count(self) -> int:
        """Presence differences (one per column) plus attribute discrepancies."""
        return (
            len(self.missing_from_live)
            + len(self.missing_from_fixture)
            + len(self.discrepancies)
        )


# ============================================================================
# Introspection Result
# ============================================================================


class IntrospectionResult(BaseModel):
    """Result of describing one live table.

    Example:
        >>> result = IntrospectionResult(success=True, table="users")
        >>> result.error_kind is None
        True
    """

    success: bool
    table: str
    columns: dict[str, dict[str, Any]] = Field(default_factory=dict)
    error_kind: IntrospectionErrorKind | None = None
    error: str | None = None


# ============================================================================
# Run Models
# ============================================================================


class PairResult(BaseModel):
    """Outcome of processing one fixture/table pair."""

    fixture: str
    status: PairStatus
    table: str | None = None
    report: MismatchReport | None = None
    error: str | None = None


class RunSummary(BaseModel):
    """Aggregated outcome of one invocation over many fixture/table pairs.

    Example:
        >>> summary = RunSummary()
        >>> summary.issues_found
        False
    """

    pairs: list[PairResult] = Field(default_factory=list)
    ignored: list[str] = Field(default_factory=list)
    total_differences: int = 0
    issues_found: bool = False

    def record(self, pair: PairResult) -> None:
        """Append a pair result and fold its differences into the totals."""
        self.pairs.append(pair)
        if pair.report is not None and pair.report.has_issues:
            self.total_differences += pair.report.difference_count
            self.issues_found = True

    @property
    def errors(self) -> list[PairResult]:
        """Pairs that could not be resolved or introspected."""
        return [
            pair
            for pair in self.pairs
            if pair.status
            in (PairStatus.RESOLUTION_FAILED, PairStatus.INTROSPECTION_FAILED)
        ]

    @property
    def compared(self) -> list[PairResult]:
        return [pair for pair in self.pairs if pair.status is PairStatus.COMPARED]
