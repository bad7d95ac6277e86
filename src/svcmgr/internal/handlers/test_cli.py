import contextlib
import io
import unittest
from typing import Any, override

from svcmgr.internal import entities, ports, services
from svcmgr.internal.repositories.config_repositories import JSONConfigRepository

from .cli import CLIHandler

events: list[str] = []


class DummyProcessManager(ports.ProcessManager):
    running: bool = False

    @override
    def init(self) -> None:
        self.command("echo", self.echo)

    @override
    async def start(self, target: entities.RunTarget) -> None:
        events.append(f"{self.name}:start:{target.name}")
        DummyProcessManager.running = True

    @override
    async def stop(self, target: entities.RunTarget) -> None:
        events.append(f"{self.name}:stop:{target.name}")
        DummyProcessManager.running = False

    @override
    async def restart(self, target: entities.RunTarget) -> None:
        events.append(f"{self.name}:restart:{target.name}")

    @override
    async def is_running(self, target: entities.RunTarget) -> bool:
        return DummyProcessManager.running

    def echo(self, target: entities.RunTarget, *words: str) -> str:
        return " ".join(words)


class UnrunnableProcessManager(DummyProcessManager):
    @staticmethod
    @override
    def can_run() -> bool:
        return False

    @override
    def init(self) -> None:
        pass


class HookService(ports.Service):
    @override
    def init(self) -> None:
        for hook in entities.Hook:
            self.on(hook, self.record(hook))

    def record(self, hook: entities.Hook) -> Any:
        async def _record(service: ports.Service, target: entities.RunTarget) -> None:
            events.append(f"{service.name}:{hook}:{target.name}")
            if target.name == "explode":
                raise RuntimeError("hook exploded")

        return _record


def _handler(**config: Any) -> CLIHandler:
    registry = services.ServiceRegistry.load([
        entities.ServiceDescriptor(name="hooks", implementation=HookService),
        entities.ServiceDescriptor(
            name="dummy",
            implementation=DummyProcessManager,
            kind=entities.ServiceKind.PROCESS,
        ),
        entities.ServiceDescriptor(
            name="unrunnable",
            implementation=UnrunnableProcessManager,
            kind=entities.ServiceKind.PROCESS,
        ),
    ])
    return CLIHandler(
        registry=registry,
        config=JSONConfigRepository.in_memory(**({"name": "blog"} | config)),
    )


class TestCLIHandler(unittest.TestCase):
    def setUp(self) -> None:
        events.clear()
        DummyProcessManager.running = False

    def run_cli(self, handler: CLIHandler, *argv: str) -> tuple[int, str]:
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            code = handler.run(list(argv))
        return code, stdout.getvalue()

    def test_lifecycleCommands(self) -> None:
        tests = [
            (["setup"], ["hooks:setup:blog"]),
            (["start"], ["hooks:start:blog", "dummy:start:blog"]),
            (["stop"], ["dummy:stop:blog", "hooks:stop:blog"]),
            (["restart"], ["dummy:restart:blog"]),
            (["run"], ["hooks:run:blog"]),
            (["uninstall"], ["hooks:uninstall:blog"]),
        ]

        for argv, expected in tests:
            with self.subTest(argv=argv):
                events.clear()
                code, _ = self.run_cli(_handler(process="dummy"), *argv)
                self.assertEqual(code, 0)
                self.assertListEqual(events, expected)

    def test_uninstallStopsRunningApplication(self) -> None:
        DummyProcessManager.running = True

        code, _ = self.run_cli(_handler(process="dummy"), "uninstall")

        self.assertEqual(code, 0)
        self.assertListEqual(
            events,
            ["dummy:stop:blog", "hooks:stop:blog", "hooks:uninstall:blog"],
        )

    def test_status(self) -> None:
        code, out = self.run_cli(_handler(process="dummy"), "status")

        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "blog is stopped")

    def test_command(self) -> None:
        code, out = self.run_cli(_handler(process="dummy"), "command", "echo", "hi", "there")

        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "hi there")

    def test_unknownCommandFails(self) -> None:
        with self.assertLogs("svcmgr", level="ERROR") as logs:
            code, _ = self.run_cli(_handler(process="dummy"), "command", "nope")

        self.assertEqual(code, 1)
        self.assertIn("Command nope is not defined", logs.output[0])

    def test_failingHookFails(self) -> None:
        with self.assertLogs("svcmgr", level="ERROR") as logs:
            code, _ = self.run_cli(_handler(process="dummy", name="explode"), "start")

        self.assertEqual(code, 1)
        self.assertIn("hook exploded", logs.output[0])
        self.assertListEqual(events, ["hooks:start:explode"])

    def test_noProcessManager(self) -> None:
        with self.assertLogs("svcmgr", level="ERROR"):
            code, _ = self.run_cli(_handler(process="supervisord"), "start")

        self.assertEqual(code, 1)

    def test_processOverride(self) -> None:
        handler = _handler(process="supervisord")

        code, _ = self.run_cli(handler, "--process", "dummy", "status")

        self.assertEqual(code, 0)
        self.assertEqual(handler.config.get("process"), "dummy")
        self.assertIsInstance(handler.registry.process, DummyProcessManager)

    def test_info(self) -> None:
        code, out = self.run_cli(_handler(process="dummy"), "info")

        self.assertEqual(code, 0)
        self.assertIn("Process manager: dummy (available: dummy, unrunnable)", out)
        self.assertIn("  start: hooks\n", out)
        self.assertIn("  echo (dummy)", out)

    def test_noCommand(self) -> None:
        code, _ = self.run_cli(_handler(process="dummy"))

        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
