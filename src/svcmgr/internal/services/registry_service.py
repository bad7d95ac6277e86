"""Implementation of the service registry.

The registry owns the catalog of loaded services, the hook and command tables,
and the single active process manager. Services never see the registry itself:
they are constructed with a `ports.Registrar` through which they attach their
hooks and commands.

Process manager selection
-------------------------

Process managers are not loaded with the other services. They are held as
candidates until configuration arrives, at which point the one named by the
``process`` configuration key is checked against the `ports.ProcessManager`
contract and asked whether it can run on this host. If it cannot, the
configuration is rewritten to name the fallback process manager, which is
loaded in its place. The fallback must be runnable everywhere; the registry
does not try a second fallback.
"""

import inspect
import logging
import types
from collections.abc import Callable, Iterable, Mapping
from typing import Any, ClassVar, override

from svcmgr.internal import entities, ports

log = logging.getLogger("svcmgr")


class _ServiceRegistrar(ports.Registrar):
    """Registrar forwarding to a registry."""

    def __init__(self, registry: "ServiceRegistry") -> None:
        self._registry = registry

    @override
    def register_hook(
        self,
        hook: entities.Hook | str,
        fn: Callable[..., Any],
        service_name: str,
    ) -> None:
        self._registry.register_hook(hook, fn, service_name)

    @override
    def register_command(
        self,
        name: str,
        fn: Callable[..., Any],
        service_name: str,
    ) -> None:
        self._registry.register_command(name, fn, service_name)


class ServiceRegistry(ports.Registrar):
    """Catalog of services, dispatching hooks and commands to them.

    Create instances with `ServiceRegistry.load`.
    """

    fallback_process_manager: ClassVar[str] = "local"
    """The process manager used when the configured one cannot run."""

    def __init__(self) -> None:
        """Create a new, empty registry."""
        self._hooks: dict[entities.Hook, dict[str, Callable[..., Any]]] = {}
        self._commands: dict[str, tuple[str, Callable[..., Any]]] = {}
        self._services: dict[str, ports.Service] = {}
        self._available_process_managers: dict[str, type[ports.Service]] = {}
        self._process: ports.ProcessManager | None = None
        self._config: ports.ConfigRepository | None = None
        self._registrar = _ServiceRegistrar(self)

    @classmethod
    def load(cls, known_services: Iterable[entities.ServiceDescriptor]) -> "ServiceRegistry":
        """Create a registry from the given service descriptors.

        Regular services are instantiated immediately, in the order given.
        Process managers are only recorded as candidates: see `set_config`.

        Raises:
            ContractViolation: A descriptor's implementation is not a `ports.Service`,
                or a regular service leaves abstract methods unimplemented.
            DuplicateService: Two descriptors share a name.
        """
        registry = cls()

        for descriptor in known_services:
            name, impl = descriptor.name, descriptor.implementation

            if not (isinstance(impl, type) and issubclass(impl, ports.Service)):
                raise entities.ContractViolation(
                    f"Service {name} ({impl!r}) does not inherit from "
                    f"{ports.Service.__module__}.{ports.Service.__qualname__}",
                )

            if descriptor.kind == entities.ServiceKind.PROCESS:
                if name in registry._available_process_managers:
                    raise entities.DuplicateService(
                        f"Process manager {name} is already known",
                    )
                registry._available_process_managers[name] = impl
                continue

            if inspect.isabstract(impl):
                raise entities.ContractViolation(
                    f"Service {name} does not implement the following methods: "
                    f"{', '.join(sorted(impl.__abstractmethods__))}",
                )

            registry._load_service(name, impl)

        log.debug(
            f"Loaded services {list(registry._services)}, "
            f"process manager candidates {list(registry._available_process_managers)}",
        )
        return registry

    @property
    def services(self) -> Mapping[str, ports.Service]:
        """The loaded services, by name."""
        return types.MappingProxyType(self._services)

    @property
    def commands(self) -> Mapping[str, str]:
        """The registered command names, mapped to the name of their owning service."""
        return {name: service_name for name, (service_name, _) in self._commands.items()}

    @property
    def process(self) -> ports.ProcessManager | None:
        """The active process manager, if one has been resolved."""
        return self._process

    @property
    def config(self) -> ports.ConfigRepository | None:
        """The configuration, if it has been set."""
        return self._config

    @property
    def available_process_managers(self) -> list[str]:
        """Names of the known process manager candidates."""
        return list(self._available_process_managers)

    def hooks_for(self, hook: entities.Hook | str) -> list[str]:
        """Names of the services with a callback on the hook, in call order."""
        return list(self._hooks.get(self._parse_hook(hook), {}))

    @override
    def register_hook(
        self,
        hook: entities.Hook | str,
        fn: Callable[..., Any],
        service_name: str,
    ) -> None:
        parsed = self._parse_hook(hook)

        if service_name not in self._services:
            raise entities.UnknownService(f"Service {service_name} does not exist")

        # Re-registering keeps the service's first position in the call order
        self._hooks.setdefault(parsed, {})[service_name] = fn

    async def call_hook(self, hook: entities.Hook | str, *args: Any) -> None:
        """Call every callback registered on the hook.

        Callbacks run one after the other, in registration order, each awaited
        before the next starts. The first callback to raise stops the sequence,
        and its exception propagates unchanged.

        Raises:
            UnknownHook: The hook is not part of the hook vocabulary.
        """
        parsed = self._parse_hook(hook)
        hooks = list(self._hooks.get(parsed, {}).items())

        for service_name, fn in hooks:
            log.debug(f"Calling '{parsed}' hook of service {service_name}")
            await self._invoke(self._services[service_name], fn, args)

    @override
    def register_command(
        self,
        name: str,
        fn: Callable[..., Any],
        service_name: str,
    ) -> None:
        if service_name not in self._services:
            raise entities.UnknownService(f"Service {service_name} does not exist")

        if name in self._commands:
            raise entities.DuplicateCommand(f"Service command {name} is already defined")

        self._commands[name] = (service_name, fn)

    async def call_command(self, name: str, *args: Any) -> Any:
        """Call a registered command, returning its result.

        Raises:
            UnknownCommand: No command is registered under the name.
        """
        if name not in self._commands:
            raise entities.UnknownCommand(f"Command {name} is not defined")

        service_name, fn = self._commands[name]
        return await self._invoke(self._services[service_name], fn, args)

    def set_config(self, config: ports.ConfigRepository, force: bool = False) -> None:
        """Set the configuration and resolve the active process manager.

        Once configuration has been set, further calls are ignored unless
        ``force`` is True.
        """
        if self._config is not None and not force:
            # Config has already been set and a reload was not asked for
            return

        self._config = config

        for name, impl in list(self._available_process_managers.items()):
            self._load_process(name, impl)

    def _load_process(self, name: str, impl: type[ports.Service]) -> None:
        """Load the process manager if it is the configured one."""
        if self._process is not None or self._config is None:
            return

        if name != self._config.get("process"):
            return

        if not issubclass(impl, ports.ProcessManager):
            raise entities.ContractViolation(
                f"Configured process manager {name} does not inherit from "
                f"{ports.ProcessManager.__module__}.{ports.ProcessManager.__qualname__}",
            )

        missing = ports.missing_methods(impl)
        if missing:
            raise entities.ContractViolation(
                f"Configured process manager {name} is missing the following "
                f"required methods: {', '.join(missing)}",
            )

        if not impl.can_run():
            fallback = self.fallback_process_manager
            if name == fallback:
                raise entities.ContractViolation(
                    f"Fallback process manager {name} reports it cannot run on this system",
                )
            if fallback not in self._available_process_managers:
                raise entities.UnknownService(
                    f"Fallback process manager {fallback} is not a known service",
                )

            log.warning(
                f"The '{name}' process manager will not run on this system, "
                f"defaulting to '{fallback}'",
            )
            self._config.set("process", fallback)
            self._load_process(fallback, self._available_process_managers[fallback])
            return

        self._process = self._load_service(name, impl)
        log.debug(f"Using process manager {name}")

    def _load_service[S: ports.Service](self, name: str, impl: type[S]) -> S:
        """Instantiate a service and add it to the catalog."""
        if name in self._services:
            raise entities.DuplicateService(f"Service {name} already exists")

        service = impl(self._registrar)
        self._services[name] = service

        # The registry owns service names; services don't choose their own
        service.name = name
        try:
            service.init()
        except Exception:
            self._unload_service(name)
            raise

        return service

    def _unload_service(self, name: str) -> None:
        """Drop a service along with any hooks and commands it registered."""
        self._services.pop(name, None)
        for callbacks in self._hooks.values():
            callbacks.pop(name, None)
        self._commands = {
            command: entry for command, entry in self._commands.items() if entry[0] != name
        }

    @staticmethod
    def _parse_hook(hook: entities.Hook | str) -> entities.Hook:
        parsed = entities.Hook.parse(hook)
        if parsed is None:
            raise entities.UnknownHook(f"Hook {hook} does not exist")
        return parsed

    @staticmethod
    async def _invoke(
        service: ports.Service,
        fn: Callable[..., Any],
        args: tuple[Any, ...],
    ) -> Any:
        """Call a callback in the context of its owning service.

        Plain functions are bound to the service, so they receive it as their
        first argument. Bound methods, partials and other callables are called
        as they are. Coroutine results are awaited.
        """
        if inspect.isfunction(fn):
            fn = types.MethodType(fn, service)

        result = fn(*args)
        if inspect.isawaitable(result):
            result = await result
        return result
