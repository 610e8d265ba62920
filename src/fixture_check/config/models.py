"""Pydantic models for fixture-check configuration."""

from pydantic import BaseModel, Field


# ============================================================================
# Configuration Models
# ============================================================================


class ConnectionProfile(BaseModel):
    """Database connection profile from fixture-check.toml."""

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    schema_name: str | None = None  # Database schema holding the tables


class CheckConfig(BaseModel):
    """Complete configuration from fixture-check.toml."""

    connections: dict[str, ConnectionProfile] = Field(default_factory=dict)
    fixture_dir: str = "tests/Fixture"
    ignore_classes: list[str] = Field(default_factory=list)
    plugins: dict[str, str] = Field(default_factory=dict)  # Plugin name -> root path
