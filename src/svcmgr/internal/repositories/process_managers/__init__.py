"""Process manager implementations.

Only one process manager is active for a given run, chosen by the ``process``
configuration key. ``local`` can run on any host and is the fallback for
process managers that cannot.
"""

from .local import LocalProcessManager
from .systemd import SystemdProcessManager

__all__ = [
    "LocalProcessManager",
    "SystemdProcessManager",
]
