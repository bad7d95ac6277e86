"""Core services implementations.

The services module holds the business logic of the application: the
registry dispatching hooks and commands to loaded services and selecting
the active process manager.
"""

from .registry_service import ServiceRegistry

__all__ = [
    "ServiceRegistry",
]
