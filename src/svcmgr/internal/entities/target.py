"""Domain class for the application instance being managed.

Process managers and lifecycle hooks act upon a single application
instance: a command run from a working directory in a given environment.
"""

import dataclasses
import pathlib
import shlex
from collections.abc import Callable
from typing import Any


@dataclasses.dataclass(frozen=True, slots=True)
class RunTarget:
    """The application instance a process manager supervises."""

    name: str
    """A short identifier for the instance, used in unit and file names."""

    cwd: pathlib.Path
    """The directory the application runs from."""

    command: tuple[str, ...] = ()
    """The argv used to launch the application."""

    environment: str = "production"
    """The environment the application runs in."""

    @classmethod
    def from_config(cls, get: Callable[..., Any]) -> "RunTarget":
        """Build a run target from a configuration getter.

        Args:
            get: A ``get(key, default)`` callable, such as the ``get`` method
                of a configuration repository.
        """
        cwd = pathlib.Path(get("instance_dir", ".")).expanduser().resolve()
        command = get("run_command", "")
        if isinstance(command, str):
            command = shlex.split(command)
        return cls(
            name=str(get("name", cwd.name)),
            cwd=cwd,
            command=tuple(command),
            environment=str(get("environment", "production")),
        )
