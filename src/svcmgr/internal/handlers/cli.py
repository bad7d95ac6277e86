"""Adaptor for the CLI driving actor."""

import argparse
import asyncio
import logging
from collections.abc import Sequence

from returns.future import future_safe
from returns.pipeline import is_successful
from returns.unsafe import unsafe_perform_io

from svcmgr.internal import entities, ports, services

log = logging.getLogger("svcmgr")


class CLIHandler:
    """CLI driving actor."""

    registry: services.ServiceRegistry
    config: ports.ConfigRepository

    def __init__(
        self,
        registry: services.ServiceRegistry,
        config: ports.ConfigRepository,
    ) -> None:
        """Create a new instance."""
        self.registry = registry
        self.config = config

    @property
    def parser(self) -> argparse.ArgumentParser:
        """Return the CLI argument parser."""
        parser = argparse.ArgumentParser(prog="svcmgr", description="Service manager CLI")
        parser.add_argument(
            "--process",
            "-p",
            help="Process manager to use, overriding (and saving to) the configuration.",
            required=False,
        )
        subparsers = parser.add_subparsers(dest="command")

        subparsers.add_parser("setup", help="Run the setup hooks of all services")
        subparsers.add_parser("start", help="Run the start hooks, then start the application")
        subparsers.add_parser("stop", help="Stop the application, then run the stop hooks")
        subparsers.add_parser("restart", help="Restart the application")
        subparsers.add_parser("run", help="Run the run hooks of all services")
        subparsers.add_parser(
            "uninstall",
            help="Stop the application if running, then run the uninstall hooks",
        )
        subparsers.add_parser("status", help="Show whether the application is running")
        subparsers.add_parser("info", help="Show the loaded services, hooks and commands")

        command_command = subparsers.add_parser("command", help="Call a service command")
        command_command.add_argument("name", help="Name of the command")
        command_command.add_argument(
            "args",
            nargs="*",
            help="Arguments passed to the command after the run target",
        )

        return parser

    def run(self, argv: Sequence[str] | None = None) -> int:
        """Run the CLI handler.

        Returns the appropriate exit code.
        """
        args = self.parser.parse_args(argv)

        if args.process is not None:
            self.config.set("process", args.process)
        self.registry.set_config(self.config)

        match args.command:
            case None:
                self.parser.print_help()
                return 1
            case "info":
                print(self.info())
                return 0

        target = entities.RunTarget.from_config(self.config.get)
        result = asyncio.run(self._dispatch(args, target).awaitable())
        if not is_successful(result):
            log.error(f"Failed to {args.command} {target.name}: {unsafe_perform_io(result.failure())}")
            return 1

        output = unsafe_perform_io(result.unwrap())
        if output:
            print(output)
        return 0

    def info(self) -> str:
        """Describe the state of the registry."""
        process = self.registry.process
        lines = [
            f"Process manager: {process.name if process else '(none)'} "
            f"(available: {', '.join(self.registry.available_process_managers) or 'none'})",
            f"Services: {', '.join(self.registry.services) or 'none'}",
            "Hooks:",
        ]
        for hook in entities.Hook:
            lines.append(f"  {hook}: {', '.join(self.registry.hooks_for(hook)) or '-'}")
        lines.append("Commands:")
        for name, service_name in self.registry.commands.items():
            lines.append(f"  {name} ({service_name})")
        return "\n".join(lines)

    def _process(self) -> ports.ProcessManager:
        if self.registry.process is None:
            raise entities.UnknownService(
                f"No process manager named {self.config.get('process')!r} is available. "
                f"Expected one of {self.registry.available_process_managers}",
            )
        return self.registry.process

    @future_safe
    async def _dispatch(self, args: argparse.Namespace, target: entities.RunTarget) -> str:
        """Carry out a lifecycle command, returning any output for the user."""
        match args.command:
            case "setup":
                await self.registry.call_hook(entities.Hook.SETUP, target)
            case "start":
                await self.registry.call_hook(entities.Hook.START, target)
                await self._process().start(target)
            case "stop":
                await self._process().stop(target)
                await self.registry.call_hook(entities.Hook.STOP, target)
            case "restart":
                await self._process().restart(target)
            case "run":
                await self.registry.call_hook(entities.Hook.RUN, target)
            case "uninstall":
                process = self._process()
                if await process.is_running(target):
                    await process.stop(target)
                    await self.registry.call_hook(entities.Hook.STOP, target)
                await self.registry.call_hook(entities.Hook.UNINSTALL, target)
            case "status":
                running = await self._process().is_running(target)
                return f"{target.name} is {'running' if running else 'stopped'}"
            case "command":
                output = await self.registry.call_command(args.name, target, *args.args)
                return "" if output is None else str(output)
            case _ as command:
                raise ValueError(f"Unknown command: {command}")
        return ""
