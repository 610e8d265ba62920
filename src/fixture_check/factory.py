"""Connection profile and fixture scope resolution.

Turns configuration plus CLI choices into the things a run needs:
- A connection URL for the named profile (with password substitution)
- The fixture directory for the optional plugin scope
- A populated ``FixtureRegistry`` and the ordered list of fixtures to check
"""

from pathlib import Path
from urllib.parse import quote

from fixture_check.config.models import CheckConfig, ConnectionProfile
from fixture_check.fixtures.registry import FixtureRegistry, fixture_name, qualify


class ProfileNotFoundError(Exception):
    """Raised when the requested connection profile is not configured."""

    pass


class PluginNotFoundError(Exception):
    """Raised when the requested plugin has no configured path."""

    pass


def get_connection(config: CheckConfig, name: str = "default") -> ConnectionProfile:
    """Get a connection profile by name.

    Raises:
        ProfileNotFoundError: If no profile has that name
    """
    if name not in config.connections:
        available = ", ".join(config.connections.keys()) or "(none)"
        raise ProfileNotFoundError(
            f"Connection '{name}' not found. Available: {available}"
        )
    return config.connections[name]


def resolve_url(profile: ConnectionProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Connection profile from config

    Returns:
        Connection URL with password substituted

    Example:
        >>> resolve_url(ConnectionProfile(
        ...     url="postgresql://app:[YOUR-PASSWORD]@db/app", db_password="p@ss"
        ... ))
        'postgresql://app:p%40ss@db/app'
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


def get_fixture_dir(config: CheckConfig, plugin: str | None = None) -> Path:
    """Directory holding the fixtures for the app or a plugin.

    Raises:
        PluginNotFoundError: If *plugin* is given but not configured
    """
    if not plugin:
        return Path(config.fixture_dir)

    if plugin not in config.plugins:
        available = ", ".join(config.plugins.keys()) or "(none)"
        raise PluginNotFoundError(
            f"Plugin '{plugin}' not found. Available: {available}"
        )
    return Path(config.plugins[plugin]) / "tests" / "Fixture"


def build_registry(
    config: CheckConfig, plugin: str | None = None
) -> tuple[FixtureRegistry, list[str]]:
    """Populate a registry for the app or plugin scope.

    Returns:
        Tuple of (registry, identifiers discovered on disk)
    """
    registry = FixtureRegistry()
    discovered = registry.populate(get_fixture_dir(config, plugin), plugin=plugin)
    return registry, discovered


def select_fixtures(
    discovered: list[str],
    requested: str | None = None,
    plugin: str | None = None,
) -> list[str]:
    """Fixture identifiers to check, in order.

    An explicit comma-separated list (``"Users,Roles"``) wins over the
    discovered fixtures; each entry gets the ``Fixture`` suffix and the
    plugin scope.

    Examples:
        >>> select_fixtures(["RolesFixture"], "Users, Roles")
        ['UsersFixture', 'RolesFixture']
        >>> select_fixtures(["RolesFixture"])
        ['RolesFixture']
    """
    if requested:
        names = [part for part in (p.strip() for p in requested.split(",")) if part]
        if names:
            return [qualify(fixture_name(name), plugin) for name in names]
    return list(discovered)
