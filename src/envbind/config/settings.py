"""Settings of the envbind command line tool, loaded from ENVBIND_* variables."""

from __future__ import annotations

from pydantic import BaseModel, Field

from envbind.binding.composite import bind_with_prefix
from envbind.binding.decoders import U8
from envbind.config.environment import EnvironmentSource

_ENV_PREFIX = "ENVBIND_"


class CliSettings(BaseModel):
    """Runtime settings for the ``envbind`` tool."""

    log_level: str = Field(default="WARNING", description="Logging level name.")
    indent: U8 = Field(default=2, description="JSON indent used by `envbind show`.")


def load_cli_settings(env: EnvironmentSource | None = None) -> CliSettings:
    """Build CliSettings from env vars (prefixed ENVBIND_) with defaults."""
    settings = CliSettings()
    bind_with_prefix(settings, _ENV_PREFIX, env)
    return settings
