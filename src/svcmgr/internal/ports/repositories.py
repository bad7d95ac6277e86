"""Repository interfaces for instance configuration.

The registry treats configuration as an opaque key-value store: it reads
the ``process`` key to choose the active process manager, and writes it back
when the chosen one cannot run on the current host.
"""

import abc
from typing import Any


class ConfigRepository(abc.ABC):
    """Interface for a key-value configuration store."""

    @abc.abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under the key, or the default."""
        pass

    @abc.abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value under the key."""
        pass
