"""Fixture-against-live-table comparison runs.

``FixtureChecker`` walks a list of fixture identifiers one at a time:

1. Skip identifiers on the ignore list (never resolved, never introspected).
2. Resolve the fixture definition from the registry.
3. Describe the fixture's table through the live schema source.
4. Normalize both sides, diff column presence in both directions, compare
   allow-listed attributes.

Resolution and introspection failures only end processing of their own
pair; the run always attempts every pair. The run's ``RunSummary`` reports
issues only for differences found, so skipped pairs alone never fail it.

Usage:
    from fixture_check.checker import FixtureChecker
    from fixture_check.schema.introspector import SchemaIntrospector

    with SchemaIntrospector(url) as introspector:
        checker = FixtureChecker(registry, introspector, ignore=["LegacyFixture"])
        summary = checker.run(registry.names)

    if summary.issues_found:
        print(f"{summary.total_differences} differences detected")
"""

import logging
from collections.abc import Iterable
from typing import Protocol

from pydantic import ValidationError

from fixture_check.fixtures.registry import (
    FixtureLoadError,
    FixtureRegistry,
    ResolutionError,
)
from fixture_check.schema.comparator import compare_columns, diff_presence
from fixture_check.schema.models import (
    Direction,
    FixtureSchema,
    IntrospectionResult,
    MismatchReport,
    PairResult,
    PairStatus,
    RunSummary,
    SchemaOrigin,
)
from fixture_check.schema.normalizer import normalize

logger = logging.getLogger(__name__)


class LiveSchemaSource(Protocol):
    """Anything that can describe a live table (``SchemaIntrospector``)."""

    def describe_table(self, table: str) -> IntrospectionResult: ...


def compare_schemas(
    fixture: FixtureSchema,
    live: IntrospectionResult,
    direction: Direction = Direction.BOTH,
) -> MismatchReport:
    """Compare a normalized fixture against a successfully described table.

    Args:
        fixture: Normalized fixture schema.
        live: Successful introspection result for ``fixture.table``.
        direction: Which presence differences to report.

    Returns:
        MismatchReport for the pair.
    """
    live_columns = normalize(live.columns, SchemaOrigin.LIVE)

    missing_from_live: list[str] = []
    missing_from_fixture: list[str] = []

    if direction in (Direction.BOTH, Direction.FIXTURE):
        missing_from_live = sorted(diff_presence(fixture.columns, live_columns))
    if direction in (Direction.BOTH, Direction.DB):
        missing_from_fixture = sorted(diff_presence(live_columns, fixture.columns))

    return MismatchReport(
        fixture=fixture.name,
        table=fixture.table,
        missing_from_live=missing_from_live,
        missing_from_fixture=missing_from_fixture,
        discrepancies=compare_columns(fixture.columns, live_columns),
    )


class FixtureChecker:
    """Runs fixture comparisons and accumulates a ``RunSummary``.

    Args:
        registry: Registry resolving fixture identifiers to definitions.
        live_source: Describes live tables; shared across all pairs.
        ignore: Fixture identifiers to skip (exact, case-sensitive match).
        direction: Which presence differences to report.
    """

    def __init__(
        self,
        registry: FixtureRegistry,
        live_source: LiveSchemaSource,
        ignore: Iterable[str] = (),
        direction: Direction = Direction.BOTH,
    ) -> None:
        self._registry = registry
        self._live_source = live_source
        self._ignore: list[str] = list(ignore)
        self._direction = direction

    def load_fixture(self, name: str) -> FixtureSchema:
        """Resolve and normalize a fixture.

        Raises:
            ResolutionError: If the fixture is unknown or its definition is
                invalid.
        """
        definition = self._registry.resolve(name)
        try:
            columns = normalize(definition.fields, SchemaOrigin.FIXTURE)
        except ValidationError as e:
            raise FixtureLoadError(f"Fixture {name} has invalid fields: {e}") from e

        return FixtureSchema(name=name, table=definition.table, columns=columns)

    def check(self, name: str) -> PairResult:
        """Process one fixture/table pair through to a terminal state."""
        if name in self._ignore:
            logger.debug(f"Ignoring fixture {name}")
            return PairResult(fixture=name, status=PairStatus.IGNORED)

        try:
            fixture = self.load_fixture(name)
        except ResolutionError as e:
            logger.info(str(e))
            return PairResult(
                fixture=name, status=PairStatus.RESOLUTION_FAILED, error=str(e)
            )

        logger.debug(f"Comparing `{name}` with table `{fixture.table}`")
        live = self._live_source.describe_table(fixture.table)
        if not live.success:
            return PairResult(
                fixture=name,
                status=PairStatus.INTROSPECTION_FAILED,
                table=fixture.table,
                error=live.error,
            )

        report = compare_schemas(fixture, live, self._direction)
        logger.debug(f"{name}: {report.difference_count} differences")

        return PairResult(
            fixture=name,
            status=PairStatus.COMPARED,
            table=fixture.table,
            report=report,
        )

    def run(self, names: Iterable[str]) -> RunSummary:
        """Check every fixture in order and summarize the run.

        Args:
            names: Fixture identifiers, processed sequentially.

        Returns:
            RunSummary with one PairResult per identifier, the configured
            ignore list, and the aggregate difference count.
        """
        summary = RunSummary(ignored=list(self._ignore))

        for name in names:
            summary.record(self.check(name))

        return summary
