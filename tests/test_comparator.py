"""Tests for column presence diffing and attribute comparison."""

from fixture_check.schema.comparator import (
    COMPARABLE_ATTRIBUTES,
    compare_columns,
    diff_presence,
)
from fixture_check.schema.models import DiscrepancyKind, SchemaOrigin
from fixture_check.schema.normalizer import normalize


def _fixture(raw: dict) -> dict:
    return normalize(raw, SchemaOrigin.FIXTURE)


def _live(raw: dict) -> dict:
    return normalize(raw, SchemaOrigin.LIVE)


class TestDiffPresence:
    """diff_presence() is a pure set difference by key."""

    def test_self_diff_is_empty(self) -> None:
        columns = {"id": {}, "name": {}}
        assert diff_presence(columns, columns) == set()

    def test_both_empty(self) -> None:
        assert diff_presence({}, {}) == set()

    def test_left_empty(self) -> None:
        assert diff_presence({}, {"id": {}}) == set()

    def test_right_empty(self) -> None:
        assert diff_presence({"id": {}, "name": {}}, {}) == {"id", "name"}

    def test_subset_is_empty(self) -> None:
        """Empty iff every key of left exists in right."""
        assert diff_presence({"id": {}}, {"id": {}, "email": {}}) == set()

    def test_both_directions(self) -> None:
        fixture = {"id": {}, "legacy": {}}
        live = {"id": {}, "email": {}}

        assert diff_presence(fixture, live) == {"legacy"}
        assert diff_presence(live, fixture) == {"email"}


class TestNoDifferences:
    """Identical allow-listed attributes yield no discrepancies."""

    def test_identical_columns(self) -> None:
        raw = {
            "id": {"type": "integer", "null": False},
            "name": {"type": "string", "length": 255, "null": True},
        }
        assert compare_columns(_fixture(raw), _live(raw)) == []

    def test_both_empty(self) -> None:
        assert compare_columns({}, {}) == []

    def test_integer_default_matches_string_default(self) -> None:
        """Fixture default 0 equals live default "0" after coercion."""
        fixture = _fixture({"count": {"type": "integer", "default": 0}})
        live = _live({"count": {"type": "integer", "default": "0"}})

        assert compare_columns(fixture, live) == []

    def test_unlisted_attributes_ignored(self) -> None:
        """comment/collation are never compared."""
        fixture = _fixture({"name": {"type": "string", "comment": "a", "collate": "x"}})
        live = _live({"name": {"type": "string", "comment": "b", "collate": "y"}})

        assert compare_columns(fixture, live) == []

    def test_null_fixture_value_missing_live(self) -> None:
        """A fixture attribute set to None is fine when the live side lacks it."""
        fixture = _fixture({"name": {"type": "string", "default": None}})
        live = _live({"name": {"type": "string"}})

        assert compare_columns(fixture, live) == []

    def test_live_only_attribute_ignored(self) -> None:
        """Only attributes the fixture declares are checked."""
        fixture = _fixture({"name": {"type": "string"}})
        live = _live({"name": {"type": "string", "length": 255, "null": True}})

        assert compare_columns(fixture, live) == []


class TestAutoIncrement:
    """autoIncrement never produces a discrepancy."""

    def test_fixture_true_live_absent(self) -> None:
        fixture = _fixture({"id": {"type": "integer", "autoIncrement": True}})
        live = _live({"id": {"type": "integer"}})

        assert compare_columns(fixture, live) == []

    def test_values_disagree(self) -> None:
        fixture = _fixture({"id": {"type": "integer", "autoIncrement": True}})
        live = _live({"id": {"type": "integer", "autoIncrement": False}})

        assert compare_columns(fixture, live) == []


class TestDiscrepancies:
    """Mismatched attributes are reported."""

    def test_type_differs(self) -> None:
        fixture = _fixture({"bio": {"type": "string"}})
        live = _live({"bio": {"type": "text"}})

        discrepancies = compare_columns(fixture, live)

        assert len(discrepancies) == 1
        assert discrepancies[0].column == "bio"
        assert discrepancies[0].attribute == "type"
        assert discrepancies[0].kind is DiscrepancyKind.DIFFERS
        assert discrepancies[0].fixture_value == "string"
        assert discrepancies[0].live_value == "text"

    def test_missing_live_attribute(self) -> None:
        fixture = _fixture({"name": {"type": "string", "length": 255}})
        live = _live({"name": {"type": "string"}})

        discrepancies = compare_columns(fixture, live)

        assert len(discrepancies) == 1
        assert discrepancies[0].kind is DiscrepancyKind.MISSING
        assert discrepancies[0].attribute == "length"
        assert "`name:length` is missing from the live DB" in discrepancies[0].message

    def test_live_none_counts_as_missing(self) -> None:
        fixture = _fixture({"name": {"type": "string", "default": "x"}})
        live = _live({"name": {"type": "string", "default": None}})

        discrepancies = compare_columns(fixture, live)

        assert [d.kind for d in discrepancies] == [DiscrepancyKind.MISSING]

    def test_null_fixture_default_against_live_default(self) -> None:
        fixture = _fixture({"name": {"default": None}})
        live = _live({"name": {"default": "anon"}})

        discrepancies = compare_columns(fixture, live)

        assert len(discrepancies) == 1
        assert discrepancies[0].kind is DiscrepancyKind.DIFFERS
        assert discrepancies[0].live_value == "anon"

    def test_strict_equality_on_string_and_int(self) -> None:
        """Live default "0" differs from an un-coerced integer 0."""
        live = _live({"count": {"default": "0"}})
        fixture = _live({"count": {"default": 0}})  # LIVE origin: no coercion

        discrepancies = compare_columns(fixture, live)

        assert len(discrepancies) == 1
        assert discrepancies[0].attribute == "default"

    def test_message_shows_repr_values(self) -> None:
        fixture = _fixture({"name": {"length": 255}})
        live = _live({"name": {"length": 100}})

        message = compare_columns(fixture, live)[0].message

        assert message == (
            "Field `name` attribute `length` differs from live DB! "
            "(`255` vs `100` live)"
        )

    def test_columns_missing_live_skipped(self) -> None:
        """Columns absent from the live side belong to diff_presence."""
        fixture = _fixture({"legacy": {"type": "string", "length": 10}})
        assert compare_columns(fixture, _live({})) == []

    def test_order_follows_columns_then_allow_list(self) -> None:
        fixture = _fixture(
            {
                "b": {"type": "string", "null": False, "length": 10},
                "a": {"unsigned": True, "default": 1},
            }
        )
        live = _live(
            {
                "a": {"unsigned": False, "default": "2"},
                "b": {"type": "text", "null": True, "length": 20},
            }
        )

        discrepancies = compare_columns(fixture, live)

        assert [(d.column, d.attribute) for d in discrepancies] == [
            ("a", "default"),
            ("a", "unsigned"),
            ("b", "length"),
            ("b", "null"),
            ("b", "type"),
        ]

    def test_allow_list(self) -> None:
        assert set(COMPARABLE_ATTRIBUTES) == {
            "autoIncrement",
            "default",
            "length",
            "null",
            "precision",
            "type",
            "unsigned",
        }
