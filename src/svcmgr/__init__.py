"""svcmgr.

Usage Documentation
===================

Configuration
-------------

The following environment variables can be used to configure the application:

.. code-block:: none

    | Key                       | Description                              | Default                |
    |---------------------------|------------------------------------------|------------------------|
    | LOGLEVEL                  | The logging level for the app.           | INFO                   |
    |---------------------------|------------------------------------------|------------------------|
    | SVCMGR_CONFIG             | Path to the instance configuration file. | .svcmgr.json           |
    |---------------------------|------------------------------------------|------------------------|
    | SVCMGR_PROCESS            | Process manager to use when the instance | systemd                |
    |                           | configuration does not name one.         |                        |
    |---------------------------|------------------------------------------|------------------------|
    | SVCMGR_SYSTEMD_UNIT_DIR   | Where the systemd process manager writes | /etc/systemd/system    |
    |                           | its unit files.                          |                        |
    |---------------------------|------------------------------------------|------------------------|

The instance configuration file is a JSON object. The keys read by the
built-in services are ``process``, ``name``, ``instance_dir``, ``run_command``
and ``environment``.


Development Documentation
=========================

Getting started for development
-------------------------------

Create a virtual environment and install the dependencies
using an editable pip installation::

    $ python -m venv ./venv
    $ source ./venv/bin/activate
    $ pip install -e .[dev]

This enables the use of the 'svcmgr' command in the virtualenv, which
runs the `svcmgr.cmd.main.run_cli` entrypoint.


Project structure
-----------------

The code follows the `Hexagonal Architecture`_ pattern: the core logic is
kept apart from the *actors* that are external to it.

- `svcmgr.internal.entities` - Domain classes: hooks, service descriptors,
  run targets and the registry error taxonomy.
- `svcmgr.internal.ports` - The interfaces services, process managers
  and configuration stores must implement.
- `svcmgr.internal.services` - The service registry: hook and command
  dispatch, and selection of the active process manager.

Alongside these are the actors:

- `svcmgr.internal.repositories.process_managers` (driven) - Process manager
  implementations (``local`` and ``systemd``).
- `svcmgr.internal.repositories.config_repositories` (driven) - Stores for the
  instance configuration.
- `svcmgr.internal.handlers.cli` (driving) - The command-line interface.

Where do I go to...?
--------------------

- **...add a new process manager?** Implement `ports.ProcessManager` in
  `internal.repositories.process_managers` and add a descriptor for it
  to the known services in `cmd.main`.
- **...change how hooks and commands are dispatched?** Check out
  `internal.services.registry_service`.
- **...modify the command line interface?** Check out `internal.handlers.cli`.

.. _Hexagonal Architecture: https://alistair.cockburn.us/hexagonal-architecture/
"""

import logging
import os
import sys

import structlog

if sys.stdout.isatty():
    # Simple logging for terminals
    _formatstr = "%(levelname)s [%(name)s] | %(message)s"
else:
    # JSON logging for journald and containers
    _formatstr = "".join((
        "{",
        '"message": "%(message)s", ',
        '"severity": "%(levelname)s", "timestamp": "%(asctime)s.%(msecs)03dZ", ',
        '"logger": "%(name)s", ',
        '"sourceLocation": ',
        '{"file": "%(filename)s", "line": %(lineno)d, "function": "%(funcName)s"}',
        "}",
    ))

_loglevel: int | str = logging.getLevelName(os.getenv("LOGLEVEL", "INFO").upper())
_level: int = logging.INFO if isinstance(_loglevel, str) else _loglevel
logging.basicConfig(
    level=_level,
    stream=sys.stdout,
    format=_formatstr,
    datefmt="%Y-%m-%dT%H:%M:%S",
)

for logger in ["asyncio"]:
    logging.getLogger(logger).setLevel(logging.WARNING)

# The config module logs through structlog; hold it to the same level
structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(_level))
