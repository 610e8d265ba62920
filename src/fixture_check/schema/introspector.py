"""Live table introspection via SQLAlchemy's generic Inspector.

This module reads the columns of live tables and describes them in the
same attribute vocabulary fixtures use:
- Abstract type (string, integer, decimal, ...), length, precision
- Nullability, server default, unsigned, auto-increment
- Column comment (kept, never compared)

PostgreSQL URLs are routed through psycopg (v3); any other SQLAlchemy URL
(sqlite, mysql, ...) is used as given.
"""

import logging
import re
from typing import Any

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Connection, Engine, Inspector
from sqlalchemy.exc import (
    DBAPIError,
    InterfaceError,
    NoSuchTableError,
    OperationalError,
    PendingRollbackError,
    SQLAlchemyError,
)
from sqlalchemy.sql import sqltypes

from fixture_check.schema.models import IntrospectionErrorKind, IntrospectionResult

logger = logging.getLogger(__name__)

# Checked in order: subclasses before their bases (Text before String, ...)
_TYPE_MAP: tuple[tuple[type, str], ...] = (
    (sqltypes.Boolean, "boolean"),
    (sqltypes.BigInteger, "biginteger"),
    (sqltypes.SmallInteger, "smallinteger"),
    (sqltypes.Integer, "integer"),
    (sqltypes.Float, "float"),
    (sqltypes.Numeric, "decimal"),
    (sqltypes.DateTime, "datetime"),
    (sqltypes.Date, "date"),
    (sqltypes.Time, "time"),
    (sqltypes.Uuid, "uuid"),
    (sqltypes.Text, "text"),
    (sqltypes.String, "string"),
    (sqltypes.LargeBinary, "binary"),
    (sqltypes.JSON, "json"),
)

# 'value'::character varying, 0::integer, '{}'::text[]
_CAST_PATTERN = re.compile(
    r"^(?P<value>.*)::[a-z_ \"]+(?:\(\d+(?:,\s*\d+)?\))?(?:\[\])?$",
    re.IGNORECASE | re.DOTALL,
)


def _prepare_url(database_url: str) -> str:
    """Route PostgreSQL URLs through psycopg and add a connect timeout."""
    url = database_url
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        url = "postgresql+psycopg://" + url[len("postgresql://"):]

    if url.startswith("postgresql+") and "connect_timeout" not in url:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}connect_timeout=10"

    return url


class SchemaIntrospector:
    """Describes live table columns for fixture comparison.

    Uses SQLAlchemy's ``Inspector`` so every dialect SQLAlchemy supports
    reports columns in one normalized shape. A single read-only connection
    is opened lazily and shared by every ``describe_table()`` call.

    Usage:
        with SchemaIntrospector(database_url) as introspector:
            result = introspector.describe_table("users")
            if result.success:
                print(result.columns["id"])
    """

    def __init__(self, database_url: str, schema_name: str | None = None):
        """Initialize with database connection URL.

        Args:
            database_url: SQLAlchemy connection URL
            schema_name: Database schema to read tables from (default: the
                connection's default schema)
        """
        self._database_url = _prepare_url(database_url)
        self._schema_name = schema_name
        self._engine: Engine | None = None
        self._conn: Connection | None = None
        self._inspector: Inspector | None = None

    def __enter__(self) -> "SchemaIntrospector":
        """Context manager entry - creates the engine (no connection yet)."""
        self._engine = create_engine(self._database_url, pool_pre_ping=True)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes connection and engine."""
        self._reset()
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None

    def _get_inspector(self) -> Inspector:
        if self._engine is None:
            raise RuntimeError("Introspector not connected. Use with statement.")
        if self._conn is not None and self._conn.invalidated:
            self._reset()
        if self._inspector is None:
            logger.debug("Opening live schema connection")
            self._conn = self._engine.connect()
            self._inspector = inspect(self._conn)
        return self._inspector

    def _reset(self) -> None:
        """Drop the shared connection so the next table opens a fresh one."""
        conn, self._conn, self._inspector = self._conn, None, None
        if conn is None:
            return
        try:
            conn.close()
        except SQLAlchemyError as e:
            logger.debug(f"Discarding broken live schema connection: {e}")

    def describe_table(self, table: str) -> IntrospectionResult:
        """Describe the columns of one live table.

        Database problems are reported in the result rather than raised.
        After a database error the shared connection is discarded, so one
        failed table never poisons the tables described after it.

        Args:
            table: Table name

        Returns:
            IntrospectionResult with a raw column mapping on success, or an
            ``error_kind`` and message on failure
        """
        try:
            inspector = self._get_inspector()
            if not inspector.has_table(table, schema=self._schema_name):
                return self._failure(
                    table,
                    IntrospectionErrorKind.NOT_FOUND,
                    f"Table `{table}` does not exist",
                )
            raw_columns = inspector.get_columns(table, schema=self._schema_name)
        except NoSuchTableError:
            return self._failure(
                table,
                IntrospectionErrorKind.NOT_FOUND,
                f"Table `{table}` does not exist",
            )
        except (OperationalError, InterfaceError, PendingRollbackError) as e:
            self._reset()
            return self._failure(
                table, IntrospectionErrorKind.CONNECTION_FAILURE, str(e)
            )
        except DBAPIError as e:
            self._reset()
            kind = (
                IntrospectionErrorKind.CONNECTION_FAILURE
                if e.connection_invalidated
                else IntrospectionErrorKind.OTHER
            )
            return self._failure(table, kind, str(e))
        except SQLAlchemyError as e:
            self._reset()
            return self._failure(table, IntrospectionErrorKind.OTHER, str(e))

        columns = {raw["name"]: self._describe_column(raw) for raw in raw_columns}
        logger.debug(f"Introspected {len(columns)} columns from `{table}`")

        return IntrospectionResult(success=True, table=table, columns=columns)

    def _failure(
        self, table: str, kind: IntrospectionErrorKind, message: str
    ) -> IntrospectionResult:
        logger.info(f"Introspection of `{table}` failed ({kind.value}): {message}")
        return IntrospectionResult(
            success=False, table=table, error_kind=kind, error=message
        )

    def _describe_column(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Convert one ``Inspector.get_columns()`` entry to column attributes."""
        column_type = raw["type"]
        abstract_type = self._normalize_data_type(column_type)

        attributes: dict[str, Any] = {
            "type": abstract_type,
            "null": bool(raw.get("nullable", True)),
        }

        if abstract_type in ("decimal", "float"):
            # Numeric precision/scale are reported as length/precision
            attributes["length"] = getattr(column_type, "precision", None)
            attributes["precision"] = getattr(column_type, "scale", None)
        else:
            attributes["length"] = getattr(column_type, "length", None)

        default, is_sequence = self._normalize_default(raw.get("default"))
        attributes["default"] = default

        auto_increment = raw.get("autoincrement")
        if is_sequence or raw.get("identity"):
            auto_increment = True
        if isinstance(auto_increment, bool):
            attributes["autoIncrement"] = auto_increment

        unsigned = getattr(column_type, "unsigned", None)
        if isinstance(unsigned, bool):
            attributes["unsigned"] = unsigned

        if raw.get("comment") is not None:
            attributes["comment"] = raw["comment"]

        return {key: value for key, value in attributes.items() if value is not None}

    def _normalize_data_type(self, column_type: sqltypes.TypeEngine) -> str:
        """Map a reflected SQLAlchemy type to its abstract type name."""
        for type_class, name in _TYPE_MAP:
            if isinstance(column_type, type_class):
                return name
        return column_type.__class__.__name__.lower()

    def _normalize_default(self, default: str | None) -> tuple[str | None, bool]:
        """Strip SQL casts and quoting from a server default.

        Returns:
            Tuple of (default as plain string or None, whether the default is
            a sequence, i.e. the column auto-increments)
        """
        if default is None:
            return None, False

        value = default.strip()
        if value.lower().startswith("nextval("):
            return None, True

        match = _CAST_PATTERN.match(value)
        if match:
            value = match.group("value").strip()

        if value.upper() == "NULL":
            return None, False

        if len(value) >= 2 and value[0] == value[-1] == "'":
            value = value[1:-1].replace("''", "'")

        return value, False
