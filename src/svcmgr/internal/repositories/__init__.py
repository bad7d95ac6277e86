"""Implementation of adaptors for driven actors.

Driven actors
--------------

A driven actor is an external component that is acted upon by the core logic.
They extend the core driven ports (see `svcmgr.internal.ports`) in their
implementation.

This module
-----------

This module contains implementations for the following driven actors:

- Process Managers - Supervisors for the managed application's process
- Config Repositories - Stores for the instance configuration

Both inherit from the ports specified in the core via `svcmgr.internal.ports`.
"""
from . import (
    config_repositories,
    process_managers,
)

__all__ = [
    "config_repositories",
    "process_managers",
]
