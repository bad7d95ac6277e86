"""Struct definitions for domain entities.

These define data objects and behaviours that are used in the core.

Domain Entities
---------------

Entities are the core building blocks of the domain layer. They are the
representations of the objects the service registry works with: the fixed
vocabulary of lifecycle hooks, the descriptors of known services, the
application instance handed to process managers, and the errors the
registry raises.

A domain entity may have associated methods that define its behaviour, but it
should not contain any logic that is specific to a particular implementation.
"""

from .hooks import Hook
from .descriptors import ServiceDescriptor, ServiceKind
from .target import RunTarget
from .errors import (
    ContractViolation,
    DuplicateCommand,
    DuplicateService,
    RegistryError,
    UnknownCommand,
    UnknownHook,
    UnknownService,
)

__all__ = [
    "Hook",
    "ServiceDescriptor",
    "ServiceKind",
    "RunTarget",
    "RegistryError",
    "ContractViolation",
    "UnknownHook",
    "UnknownCommand",
    "UnknownService",
    "DuplicateCommand",
    "DuplicateService",
]
