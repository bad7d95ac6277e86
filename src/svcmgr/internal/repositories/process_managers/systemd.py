"""Systemd process manager implementation.

Runs the application as a systemd unit named ``svcmgr-<name>``.
The unit file is written by the ``setup`` hook and removed by the
``uninstall`` hook.

Configuration
-------------

.. code-block:: none

    | Key                       | Description                            | Default             |
    |---------------------------|----------------------------------------|---------------------|
    | SVCMGR_SYSTEMD_UNIT_DIR   | The directory unit files are placed in | /etc/systemd/system |
"""

import asyncio
import logging
import os
import pathlib
import shlex
import shutil
from typing import override

from svcmgr.internal import entities, ports

log = logging.getLogger("svcmgr")

_UNIT_TEMPLATE = """\
[Unit]
Description=svcmgr: {name}
After=network.target

[Service]
Type=simple
WorkingDirectory={cwd}
Environment={environment}
ExecStart={exec_start}
Restart=always

[Install]
WantedBy=multi-user.target
"""


def _quote(value: str) -> str:
    """Quote a value as a single word of a systemd unit setting."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("%", "%%")
    return f'"{escaped}"'


class SystemdProcessManager(ports.ProcessManager):
    """Process manager delegating to systemd."""

    unit_dir: pathlib.Path

    @override
    def init(self) -> None:
        self.unit_dir = pathlib.Path(
            os.getenv("SVCMGR_SYSTEMD_UNIT_DIR", "/etc/systemd/system"),
        )
        self.on(entities.Hook.SETUP, self.install_unit)
        self.on(entities.Hook.UNINSTALL, self.remove_unit)

    @staticmethod
    @override
    def can_run() -> bool:
        # /run/systemd/system only exists when systemd is the running init system
        return (
            shutil.which("systemctl") is not None
            and pathlib.Path("/run/systemd/system").is_dir()
        )

    @staticmethod
    def unit_name(target: entities.RunTarget) -> str:
        """The name of the unit the application runs as."""
        return f"svcmgr-{target.name}"

    def unit_path(self, target: entities.RunTarget) -> pathlib.Path:
        """The path of the application's unit file."""
        return self.unit_dir / f"{self.unit_name(target)}.service"

    @staticmethod
    def render_unit(target: entities.RunTarget) -> str:
        """Render the unit file for the application."""
        if not target.command:
            raise ValueError(f"No run command configured for {target.name}")

        executable, *args = target.command
        # ExecStart needs an absolute path to the executable
        if not os.path.isabs(executable):
            executable = shutil.which(executable) or executable
        return _UNIT_TEMPLATE.format(
            name=target.name,
            cwd=target.cwd,
            environment=_quote(f"SVCMGR_ENV={target.environment}"),
            exec_start=shlex.join([executable, *args]),
        )

    async def _systemctl(self, *args: str, check: bool = True) -> int:
        """Run systemctl, returning its exit code."""
        proc = await asyncio.create_subprocess_exec(
            "systemctl",
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await proc.communicate()
        if check and proc.returncode != 0:
            raise OSError(
                f"'systemctl {' '.join(args)}' exited with code {proc.returncode}: "
                f"{stderr.decode(errors='replace').strip()}",
            )
        return proc.returncode or 0

    @override
    async def start(self, target: entities.RunTarget) -> None:
        await self._systemctl("start", self.unit_name(target))

    @override
    async def stop(self, target: entities.RunTarget) -> None:
        await self._systemctl("stop", self.unit_name(target))

    @override
    async def restart(self, target: entities.RunTarget) -> None:
        await self._systemctl("restart", self.unit_name(target))

    @override
    async def is_running(self, target: entities.RunTarget) -> bool:
        returncode = await self._systemctl(
            "is-active", "--quiet", self.unit_name(target), check=False,
        )
        return returncode == 0

    async def install_unit(self, target: entities.RunTarget) -> None:
        """Write the unit file and reload systemd."""
        path = self.unit_path(target)
        path.write_text(self.render_unit(target))
        log.info(f"Wrote systemd unit {path}")
        await self._systemctl("daemon-reload")

    async def remove_unit(self, target: entities.RunTarget) -> None:
        """Disable the unit and remove its file."""
        path = self.unit_path(target)
        if not path.exists():
            return
        await self._systemctl("disable", "--now", self.unit_name(target), check=False)
        path.unlink()
        log.info(f"Removed systemd unit {path}")
        await self._systemctl("daemon-reload")
