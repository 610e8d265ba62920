"""Fixture discovery, loading, and lookup.

Fixtures are TOML files named ``<Name>Fixture.toml``::

    table = "users"              # optional, derived from the name otherwise

    [fields.id]
    type = "integer"
    null = false
    autoIncrement = true

    [fields.name]
    type = "string"
    length = 255

    [fields._constraints.primary]
    type = "primary"
    columns = ["id"]

A ``FixtureRegistry`` maps fixture identifiers to factories. Identifiers are
the file stem, qualified with the plugin name when a plugin scope is used
(``Users.UsersFixture``). Lookups of unknown identifiers raise
``FixtureNotFoundError``.

Usage:
    registry = FixtureRegistry()
    registry.populate(Path("tests/Fixture"))
    definition = registry.resolve("UsersFixture")
"""

import logging
import re
import tomllib
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from fixture_check.schema.models import FixtureDefinition

logger = logging.getLogger(__name__)

FIXTURE_SUFFIX = "Fixture"
FIXTURE_EXTENSION = ".toml"

FixtureFactory = Callable[[], FixtureDefinition]


# ============================================================================
# Errors
# ============================================================================


class ResolutionError(Exception):
    """Raised when a fixture cannot be resolved to a loadable definition."""

    pass


class FixtureNotFoundError(ResolutionError):
    """Raised when no fixture is registered under the requested identifier."""

    pass


class FixtureLoadError(ResolutionError):
    """Raised when a fixture file exists but cannot be read or validated."""

    pass


# ============================================================================
# Naming helpers
# ============================================================================


def fixture_name(name: str) -> str:
    """Append the ``Fixture`` suffix unless already present.

    Examples:
        >>> fixture_name("Users")
        'UsersFixture'
        >>> fixture_name("UsersFixture")
        'UsersFixture'
    """
    name = name.strip()
    if name.endswith(FIXTURE_SUFFIX):
        return name
    return name + FIXTURE_SUFFIX


def qualify(name: str, plugin: str | None = None) -> str:
    """Scope a fixture identifier to a plugin.

    Examples:
        >>> qualify("UsersFixture", "Users")
        'Users.UsersFixture'
        >>> qualify("UsersFixture")
        'UsersFixture'
    """
    if plugin:
        return f"{plugin}.{name}"
    return name


def table_name_for(name: str) -> str:
    """Derive a table name from a fixture identifier.

    Examples:
        >>> table_name_for("BlogPostsFixture")
        'blog_posts'
        >>> table_name_for("Users.UsersFixture")
        'users'
    """
    base = name.rsplit(".", 1)[-1]
    if base.endswith(FIXTURE_SUFFIX):
        base = base[: -len(FIXTURE_SUFFIX)]
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])", "_", base).lower()


# ============================================================================
# Discovery and loading
# ============================================================================


def discover_fixtures(directory: Path) -> list[str]:
    """List fixture identifiers available in a directory.

    Only files named ``*Fixture.toml`` count. A missing directory yields an
    empty list.

    Args:
        directory: Directory holding fixture files.

    Returns:
        Sorted list of identifiers (file stems).
    """
    if not directory.is_dir():
        logger.debug(f"Fixture directory {directory} does not exist")
        return []

    return sorted(
        path.stem
        for path in directory.iterdir()
        if path.is_file()
        and path.suffix == FIXTURE_EXTENSION
        and path.stem.endswith(FIXTURE_SUFFIX)
    )


def load_fixture_file(path: Path, name: str | None = None) -> FixtureDefinition:
    """Load one fixture file.

    Args:
        path: Path to a ``*Fixture.toml`` file.
        name: Identifier to give the fixture (default: the file stem).

    Returns:
        FixtureDefinition with the raw field mapping.

    Raises:
        FixtureNotFoundError: If the file does not exist.
        FixtureLoadError: If the file is not valid TOML or has the wrong shape.
    """
    name = name or path.stem

    if not path.is_file():
        raise FixtureNotFoundError(f"Fixture {name} does not exist ({path})")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise FixtureLoadError(f"Fixture {name} could not be read: {e}") from e

    try:
        return FixtureDefinition(
            name=name,
            table=data.get("table") or table_name_for(name),
            fields=data.get("fields", {}),
        )
    except ValidationError as e:
        raise FixtureLoadError(f"Fixture {name} is invalid: {e}") from e


# ============================================================================
# Registry
# ============================================================================


class FixtureRegistry:
    """Maps fixture identifiers to factories producing their definitions.

    Example:
        >>> registry = FixtureRegistry()
        >>> registry.register(
        ...     "UsersFixture",
        ...     lambda: FixtureDefinition(name="UsersFixture", table="users"),
        ... )
        >>> registry.resolve("UsersFixture").table
        'users'
    """

    def __init__(self) -> None:
        self._factories: dict[str, FixtureFactory] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    @property
    def names(self) -> list[str]:
        """Registered identifiers, sorted."""
        return sorted(self._factories)

    def register(self, name: str, factory: FixtureFactory) -> None:
        """Register (or replace) the factory for an identifier."""
        self._factories[name] = factory

    def populate(self, directory: Path, plugin: str | None = None) -> list[str]:
        """Register a file loader for every fixture found in a directory.

        Args:
            directory: Directory holding ``*Fixture.toml`` files.
            plugin: Optional plugin scope used to qualify identifiers.

        Returns:
            The identifiers registered, sorted.
        """
        registered: list[str] = []
        for stem in discover_fixtures(directory):
            name = qualify(stem, plugin)
            path = directory / f"{stem}{FIXTURE_EXTENSION}"
            self.register(name, lambda path=path, name=name: load_fixture_file(path, name))
            registered.append(name)

        logger.debug(f"Registered {len(registered)} fixtures from {directory}")
        return registered

    def resolve(self, name: str) -> FixtureDefinition:
        """Build the definition registered under *name*.

        Raises:
            FixtureNotFoundError: If *name* is not registered.
            FixtureLoadError: If the factory fails to produce a valid definition.
        """
        factory = self._factories.get(name)
        if factory is None:
            raise FixtureNotFoundError(f"Fixture {name} does not exist.")
        return factory()
