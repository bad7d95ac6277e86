"""The fixed vocabulary of lifecycle hooks."""

from enum import StrEnum


class Hook(StrEnum):
    """A named lifecycle extension point services can attach callbacks to.

    The set of members is closed: the registry rejects any other value.
    """

    SETUP = "setup"
    START = "start"
    STOP = "stop"
    RUN = "run"
    UNINSTALL = "uninstall"

    @classmethod
    def parse(cls, value: "Hook | str") -> "Hook | None":
        """Return the hook matching the given value, or None if there is none."""
        try:
            return cls(value)
        except ValueError:
            return None
