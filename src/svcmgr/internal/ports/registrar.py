"""The view of the registry handed to services.

Services only ever need to attach themselves to the registry, so rather than
holding the registry itself they are given a `Registrar`, which exposes the
two registration operations and nothing else.
"""

import abc
from collections.abc import Callable
from typing import Any

from svcmgr.internal import entities


class Registrar(abc.ABC):
    """Interface for registering hooks and commands against a registry."""

    @abc.abstractmethod
    def register_hook(
        self,
        hook: entities.Hook | str,
        fn: Callable[..., Any],
        service_name: str,
    ) -> None:
        """Attach a callback to a lifecycle hook on behalf of a loaded service.

        Raises:
            UnknownHook: The hook is not part of the hook vocabulary.
            UnknownService: No service is loaded under ``service_name``.
        """
        pass

    @abc.abstractmethod
    def register_command(
        self,
        name: str,
        fn: Callable[..., Any],
        service_name: str,
    ) -> None:
        """Expose a named command on behalf of a loaded service.

        Raises:
            UnknownService: No service is loaded under ``service_name``.
            DuplicateCommand: The command name is already taken.
        """
        pass
