"""Config struct for application running."""

import os
from typing import get_type_hints

import structlog

log = structlog.getLogger()

_TRUE_VALUES = ("y", "yes", "t", "true", "on", "1")
_FALSE_VALUES = ("n", "no", "f", "false", "off", "0")


def _parse_bool(value: str) -> bool:
    match value.lower():
        case v if v in _TRUE_VALUES:
            return True
        case v if v in _FALSE_VALUES:
            return False
        case _:
            raise ValueError(f"Invalid truth value {value!r}")


class EnvParser:
    """Mixin to parse environment variables into class fields."""

    def __init__(self) -> None:
        """Parse environment variables into class fields.

        If the class field is upper case, parse it into the indicated
        type from the environment. Required fields are those set in
        the child class without a default value.

        Examples:
        >>> MyEnv(EnvParser):
        >>>     REQUIRED_ENV_VAR: str
        >>>     OPTIONAL_ENV_VAR: str = "default value"
        >>>     ignored_var: str = "ignored"
        """
        for field, t in get_type_hints(type(self)).items():
            # Skip item if not upper case
            if not field.isupper():
                continue

            default_value = getattr(self, field, None)
            match (default_value, os.environ.get(field)):
                case (None, None):
                    # No default value, and field not in env
                    raise OSError(f"Required field {field} not supplied")
                case (_, None):
                    # A default value is set and field not in env
                    log.debug(
                        event="environment variable not set, using default",
                        variable=field,
                        default=default_value,
                    )
                case (_, str() as env_value):
                    # Handle bools seperately as bool("False") == True
                    if t is bool:
                        self.__setattr__(field, _parse_bool(env_value))
                    else:
                        self.__setattr__(field, t(env_value))


class ManagerEnv(EnvParser):
    """Config for the service manager CLI."""

    SVCMGR_CONFIG: str = ".svcmgr.json"
    """Path to the instance configuration file."""

    SVCMGR_PROCESS: str = "systemd"
    """The process manager to use when the instance configuration names none."""
