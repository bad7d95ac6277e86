"""Implementation of adaptors for driving actors.

Driving actors
--------------

A driving actor is an external component that acts upon the core logic.
Also referred to as *primary* actors, a driving actor represents an external
system that initiates interactions with the core logic.

This module
-----------

This module contains implementations for the following driving actors:

- Command-line interface - Drives the lifecycle hooks, the process manager
  and service commands from a terminal.
"""

from .cli import CLIHandler

__all__ = ["CLIHandler"]
