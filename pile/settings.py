"""CLI configuration loaded from PILE_* environment variables.

Only the CLI reads settings.  The project store itself takes the workspace
root as an explicit constructor argument.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PileSettings(BaseSettings):
    """Pile settings.

    All fields are read from environment variables with the ``PILE_`` prefix.
    For example, ``PILE_LOG_LEVEL=DEBUG`` maps to ``log_level``.  The
    workspace also honours ``HYLLA_WORKSPACE``, the variable earlier releases
    of the tool used.
    """

    model_config = SettingsConfigDict(
        env_prefix="PILE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "WARNING"

    # -- Workspace -------------------------------------------------------------
    workspace: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("PILE_WORKSPACE", "HYLLA_WORKSPACE"),
    )
    """Root directory holding every project.  Required by all commands but ``doc``."""

    metadata_filename: str = ".pile-tags"
    """Name of the hidden tag record inside each project directory."""

    # -- Misc ------------------------------------------------------------------
    docs_url: str = "https://github.com/adelhult/pile"

    @field_validator("workspace")
    @classmethod
    def _expand_workspace(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        return value.expanduser()


def get_settings() -> PileSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``_get_settings_cached.cache_clear()`` in tests to
    force a re-read after overriding env vars.
    """
    return _get_settings_cached()


@lru_cache(maxsize=1)
def _get_settings_cached() -> PileSettings:
    return PileSettings()
