"""Descriptors for the services a registry knows about.

A descriptor pairs the name a service is registered under with the class
implementing it. The name belongs to the descriptor, not to the class,
so two classes can never collide by choosing the same name for themselves.
"""

import dataclasses
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from svcmgr.internal import ports


class ServiceKind(StrEnum):
    """The kind of a known service."""

    SERVICE = "service"
    """Loaded as soon as the registry is created."""

    PROCESS = "process"
    """A process manager, loaded only once it is selected by configuration."""


@dataclasses.dataclass(frozen=True, slots=True)
class ServiceDescriptor:
    """A statically known service."""

    name: str
    """The name the service is registered under."""

    implementation: "type[ports.Service]"
    """The class implementing the service."""

    kind: ServiceKind = ServiceKind.SERVICE
    """Whether the service is a process manager candidate."""
