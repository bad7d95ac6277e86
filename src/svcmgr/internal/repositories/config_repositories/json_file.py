"""JSON file configuration repository implementation."""

import json
import logging
import pathlib
from typing import Any, override

from returns.result import Failure, ResultE, Success

from svcmgr.internal import ports

log = logging.getLogger("svcmgr")


class JSONConfigRepository(ports.ConfigRepository):
    """Configuration stored as a JSON object in a file.

    Every `set` rewrites the file, so values written back by the registry
    (such as a fallback process manager) persist across runs.
    """

    path: pathlib.Path | None
    values: dict[str, Any]

    def __init__(self, values: dict[str, Any], path: pathlib.Path | None = None) -> None:
        """Create a new instance.

        Args:
            values: The initial configuration values.
            path: Where to persist the values. If None, values are kept in memory only.
        """
        self.values = values
        self.path = path

    @classmethod
    def from_path(cls, path: pathlib.Path) -> ResultE["JSONConfigRepository"]:
        """Load configuration from a JSON file.

        A missing file is treated as empty configuration; it is created on the first `set`.
        """
        if not path.exists():
            log.debug(f"No configuration file at {path}, starting with empty configuration")
            return Success(cls(values={}, path=path))

        try:
            values = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            return Failure(OSError(f"Unable to read configuration file {path}: {e}"))

        if not isinstance(values, dict):
            return Failure(
                ValueError(f"Configuration file {path} does not contain a JSON object"),
            )

        return Success(cls(values=values, path=path))

    @classmethod
    def in_memory(cls, **values: Any) -> "JSONConfigRepository":
        """Create a repository that is never written to disk."""
        return cls(values=dict(values))

    @override
    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    @override
    def set(self, key: str, value: Any) -> None:
        self.values[key] = value
        if self.path is not None:
            self.save()

    def save(self) -> None:
        """Write the values to the configuration file."""
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.values, indent=2, sort_keys=True) + "\n")
