"""``@environment``: attach environment-loading methods to a record class.

    @environment(prefix="APP_", from_env=True)
    class Settings(BaseModel):
        name: str = ""
        server: Server = Field(default_factory=Server)

    settings = Settings.from_env()          # defaults, then APP_* variables
    settings.load_environment()             # re-apply APP_* on top
    settings.load_environment_with_prefix("OTHER_")
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from envbind.binding.composite import bind, bind_with_prefix, from_defaults_then_bind
from envbind.config.environment import EnvironmentSource

T = TypeVar("T", bound=type)


def _load_environment(self: Any, env: EnvironmentSource | None = None) -> bool:
    """Modify the record from variables under its default prefix.

    Returns whether anything was found. Raises EnvBindError if a variable
    could not be read.
    """
    return bind(self, env)


def _load_environment_with_prefix(self: Any, prefix: str, env: EnvironmentSource | None = None) -> bool:
    """Modify the record from variables under ``prefix``."""
    return bind_with_prefix(self, prefix, env)


def _from_env(cls: type, env: EnvironmentSource | None = None) -> Any:
    """Create a record from its defaults, then apply the environment."""
    return from_defaults_then_bind(cls, env)


def environment(
    cls: T | None = None, *, prefix: str = "", from_env: bool = False,
) -> T | Callable[[T], T]:
    """Class decorator setting the default prefix and the loading methods.

    ``from_env=True`` also adds a ``from_env()`` classmethod constructor.
    Usable bare (``@environment``) or with arguments.
    """

    def wrap(record_cls: T) -> T:
        record_cls.__env_prefix__ = prefix
        record_cls.load_environment = _load_environment
        record_cls.load_environment_with_prefix = _load_environment_with_prefix
        if from_env:
            record_cls.from_env = classmethod(_from_env)
        return record_cls

    if cls is None:
        return wrap
    return wrap(cls)
