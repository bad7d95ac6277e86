"""Local process manager implementation.

Runs the application as a detached process in its own session, tracking it
through a pid file in the instance directory. Nothing beyond the ability to
spawn processes is required of the host, so this process manager can always
run: `LocalProcessManager.can_run` returning True is what makes it safe to
use as the registry's fallback.

The pid file holds the pid and the creation time of the process. A process
is only treated as the application when both match, so a stale pid file left
behind by a reboot never leads to an unrelated process being reported as
running or being stopped.
"""

import asyncio
import logging
import os
import pathlib
import subprocess
from typing import override

import psutil

from svcmgr.internal import entities, ports

log = logging.getLogger("svcmgr")

PID_FILENAME = ".svcmgr.pid"
LOG_FILENAME = ".svcmgr.log"


class LocalProcessManager(ports.ProcessManager):
    """Process manager running the application as a detached local process."""

    stop_timeout: float = 10
    """Seconds to wait for the process to exit before killing it."""

    @override
    def init(self) -> None:
        self._children: dict[int, subprocess.Popen[bytes]] = {}
        self.on(entities.Hook.UNINSTALL, self.remove_files)
        self.command("pid", self.pid)

    @staticmethod
    @override
    def can_run() -> bool:
        return True

    @staticmethod
    def pid_file(target: entities.RunTarget) -> pathlib.Path:
        """The file the running application's pid is recorded in."""
        return target.cwd / PID_FILENAME

    def _recorded(self, target: entities.RunTarget) -> tuple[int, float] | None:
        try:
            pid, created = self.pid_file(target).read_text().split()
            return int(pid), float(created)
        except (FileNotFoundError, ValueError):
            return None

    def pid(self, target: entities.RunTarget) -> int | None:
        """Return the recorded pid of the application, if any."""
        recorded = self._recorded(target)
        return recorded[0] if recorded is not None else None

    def _process(self, target: entities.RunTarget) -> psutil.Process | None:
        """The live application process, if the pid file names one."""
        recorded = self._recorded(target)
        if recorded is None:
            return None

        pid, created = recorded
        try:
            proc = psutil.Process(pid)
            if abs(proc.create_time() - created) >= 1:
                log.debug(f"Process {pid} was not started for {target.name}, ignoring it")
                return None
            if proc.status() == psutil.STATUS_ZOMBIE:
                return None
        except psutil.NoSuchProcess:
            return None
        return proc

    @override
    async def start(self, target: entities.RunTarget) -> None:
        if await self.is_running(target):
            log.info(f"{target.name} is already running (pid {self.pid(target)})")
            return

        if not target.command:
            raise ValueError(f"No run command configured for {target.name}")

        env = os.environ | {"SVCMGR_ENV": target.environment}
        with open(target.cwd / LOG_FILENAME, "ab") as logfile:
            # A new session keeps the application alive once the CLI exits
            proc = await asyncio.to_thread(
                subprocess.Popen,
                target.command,
                cwd=target.cwd,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=logfile,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        self._children[proc.pid] = proc

        try:
            created = psutil.Process(proc.pid).create_time()
        except psutil.NoSuchProcess:
            raise OSError(f"{target.name} exited immediately, see {LOG_FILENAME}") from None

        self.pid_file(target).write_text(f"{proc.pid} {created!r}\n")
        log.info(f"Started {target.name} (pid {proc.pid})")

    @override
    async def stop(self, target: entities.RunTarget) -> None:
        proc = self._process(target)
        if proc is None:
            self.pid_file(target).unlink(missing_ok=True)
            return

        try:
            procs = [proc, *proc.children(recursive=True)]
        except psutil.NoSuchProcess:
            procs = []

        for p in procs:
            try:
                p.terminate()
            except psutil.NoSuchProcess:
                pass

        _, alive = await asyncio.to_thread(psutil.wait_procs, procs, timeout=self.stop_timeout)
        for p in alive:
            log.warning(f"Process {p.pid} did not exit within {self.stop_timeout}s, killing it")
            try:
                p.kill()
            except psutil.NoSuchProcess:
                pass

        child = self._children.pop(proc.pid, None)
        if child is not None:
            await asyncio.to_thread(child.wait)

        self.pid_file(target).unlink(missing_ok=True)
        log.info(f"Stopped {target.name} (pid {proc.pid})")

    @override
    async def restart(self, target: entities.RunTarget) -> None:
        await self.stop(target)
        await self.start(target)

    @override
    async def is_running(self, target: entities.RunTarget) -> bool:
        return self._process(target) is not None

    def remove_files(self, target: entities.RunTarget) -> None:
        """Remove the pid and log files from the instance directory."""
        for filename in (PID_FILENAME, LOG_FILENAME):
            (target.cwd / filename).unlink(missing_ok=True)
