"""Service interfaces for pluggable subsystems.

Anything loaded by the service registry must inherit from `Service`.
Membership is checked nominally with ``issubclass``: an object that merely
happens to have the right methods is rejected, so partial implementations
are caught when the registry loads, not when a hook first fires.

Process managers are services with a stricter contract. Along with the
`Service` interface they must implement every method in `REQUIRED_METHODS`,
and may override `ProcessManager.can_run` to declare that they do not work
on the current host. Since a process manager is only instantiated once it is
selected, `missing_methods` inspects the class itself and reports every
required method it leaves unimplemented.
"""

import abc
from collections.abc import Callable
from typing import Any

from svcmgr.internal import entities

from .registrar import Registrar

REQUIRED_METHODS: tuple[str, ...] = ("start", "stop", "restart", "is_running")
"""Methods a process manager must implement itself."""


class Service(abc.ABC):
    """Interface for a service loaded by the registry.

    The registry constructs the service with a registrar, sets its ``name``,
    then calls `init` exactly once. Hooks and commands should be registered
    from `init`, as the name is not yet known during construction.
    """

    name: str
    registrar: Registrar

    def __init__(self, registrar: Registrar) -> None:
        """Create a new instance."""
        self.registrar = registrar
        self.name = ""

    @abc.abstractmethod
    def init(self) -> None:
        """Perform one-time setup, such as registering hooks and commands."""
        pass

    def on(self, hook: entities.Hook | str, fn: Callable[..., Any]) -> None:
        """Attach a callback to a lifecycle hook under this service's name."""
        self.registrar.register_hook(hook, fn, self.name)

    def command(self, name: str, fn: Callable[..., Any]) -> None:
        """Expose a command under this service's name."""
        self.registrar.register_command(name, fn, self.name)


class ProcessManager(Service):
    """Interface for a service supervising the application process.

    At most one process manager is active per registry.
    """

    @staticmethod
    def can_run() -> bool:
        """Whether the process manager works on the current host.

        Called on the class before it is instantiated, so it must not
        have side effects.
        """
        return True

    @abc.abstractmethod
    async def start(self, target: entities.RunTarget) -> None:
        """Start the application."""
        pass

    @abc.abstractmethod
    async def stop(self, target: entities.RunTarget) -> None:
        """Stop the application."""
        pass

    @abc.abstractmethod
    async def restart(self, target: entities.RunTarget) -> None:
        """Restart the application."""
        pass

    @abc.abstractmethod
    async def is_running(self, target: entities.RunTarget) -> bool:
        """Whether the application is currently running."""
        pass


def missing_methods(cls: type) -> list[str]:
    """Return the required process manager methods the class does not implement.

    A method counts as missing when it is absent, not callable,
    or still abstract.
    """
    missing: list[str] = []
    for method in REQUIRED_METHODS:
        fn = getattr(cls, method, None)
        if fn is None or not callable(fn) or getattr(fn, "__isabstractmethod__", False):
            missing.append(method)
    return missing
