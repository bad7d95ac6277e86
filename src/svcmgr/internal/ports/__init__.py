"""Interfaces for actor-core communication.

The ports module defines abstract interfaces that specify the signatures
any actors must obey in order to interact with the core.

Services and process managers are *driven* actors plugged into the registry;
the registrar is the narrow view of the registry they are handed;
configuration repositories hold the instance configuration.
"""

from .services import REQUIRED_METHODS, ProcessManager, Service, missing_methods
from .registrar import Registrar
from .repositories import ConfigRepository

__all__ = [
    "REQUIRED_METHODS",
    "Service",
    "ProcessManager",
    "missing_methods",
    "Registrar",
    "ConfigRepository",
]
