from typing import Any, override

from svcmgr.internal import entities, ports

calls: list[tuple[str, str, tuple[Any, ...]]] = []
"""Record of (service name, hook, args) for every dummy hook callback run."""


class DummyService(ports.Service):
    @override
    def init(self) -> None:
        self.on(entities.Hook.START, self.on_start)
        self.on(entities.Hook.STOP, self.on_stop)

    async def on_start(self, *args: Any) -> None:
        calls.append((self.name, "start", args))

    def on_stop(self, *args: Any) -> None:
        calls.append((self.name, "stop", args))


class FailingService(DummyService):
    @override
    async def on_start(self, *args: Any) -> None:
        calls.append((self.name, "start", args))
        raise RuntimeError(f"{self.name} failed to start")


class CommandService(ports.Service):
    @override
    def init(self) -> None:
        self.command("greet", self.greet)
        self.command("whoami", whoami)

    async def greet(self, who: str) -> str:
        return f"hello {who} from {self.name}"


def whoami(service: ports.Service) -> str:
    return service.name


class FlakyInitService(ports.Service):
    """Registers a hook and a command, then fails to initialise while `fail_init` is set."""

    fail_init: bool = True

    @override
    def init(self) -> None:
        self.on(entities.Hook.SETUP, self.on_setup)
        self.command("flaky", self.on_setup)
        if self.fail_init:
            raise OSError(f"{self.name} could not initialise")

    def on_setup(self, *args: Any) -> None:
        calls.append((self.name, "setup", args))


class IncompleteService(ports.Service):
    """Does not implement init."""


class NotAService:
    def init(self) -> None:
        pass


class _DummyProcessManager(ports.ProcessManager):
    running: bool

    @override
    def init(self) -> None:
        self.running = False

    @override
    async def start(self, target: entities.RunTarget) -> None:
        self.running = True

    @override
    async def stop(self, target: entities.RunTarget) -> None:
        self.running = False

    @override
    async def restart(self, target: entities.RunTarget) -> None:
        await self.stop(target)
        await self.start(target)

    @override
    async def is_running(self, target: entities.RunTarget) -> bool:
        return self.running


class RunnableProcessManager(_DummyProcessManager):
    pass


class FallbackProcessManager(_DummyProcessManager):
    pass


class UnrunnableProcessManager(_DummyProcessManager):
    @staticmethod
    @override
    def can_run() -> bool:
        return False


class NoRestartProcessManager(ports.ProcessManager):
    @override
    def init(self) -> None:
        pass

    @override
    async def start(self, target: entities.RunTarget) -> None:
        pass

    @override
    async def stop(self, target: entities.RunTarget) -> None:
        pass

    @override
    async def is_running(self, target: entities.RunTarget) -> bool:
        return False


class PlainProcessService(DummyService):
    """A regular service wrongly described as a process manager."""


class DictConfig(ports.ConfigRepository):
    def __init__(self, **values: Any) -> None:
        self.values = dict(values)

    @override
    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    @override
    def set(self, key: str, value: Any) -> None:
        self.values[key] = value
