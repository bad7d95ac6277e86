"""Entrypoints to the svcmgr CLI."""

import logging
import pathlib
import sys
from collections.abc import Sequence

from returns.result import Failure

from svcmgr.internal import config, entities, handlers, repositories, services

log = logging.getLogger("svcmgr")

KNOWN_SERVICES: list[entities.ServiceDescriptor] = [
    entities.ServiceDescriptor(
        name="systemd",
        implementation=repositories.process_managers.SystemdProcessManager,
        kind=entities.ServiceKind.PROCESS,
    ),
    entities.ServiceDescriptor(
        name="local",
        implementation=repositories.process_managers.LocalProcessManager,
        kind=entities.ServiceKind.PROCESS,
    ),
]
"""The services built into the CLI."""


def run_cli(argv: Sequence[str] | None = None) -> None:
    """Entrypoint for the CLI handler."""
    env = config.ManagerEnv()

    config_path = pathlib.Path(env.SVCMGR_CONFIG).expanduser()
    config_result = repositories.config_repositories.JSONConfigRepository.from_path(config_path)
    if isinstance(config_result, Failure):
        log.error(f"Failed to load configuration: {config_result.failure()}")
        sys.exit(1)

    instance_config = config_result.unwrap()
    if instance_config.get("process") is None:
        instance_config.set("process", env.SVCMGR_PROCESS)

    c = handlers.CLIHandler(
        registry=services.ServiceRegistry.load(KNOWN_SERVICES),
        config=instance_config,
    )
    returncode: int = c.run(argv)
    sys.exit(returncode)
