"""Configuration for the service manager."""

__all__ = [
    "EnvParser",
    "ManagerEnv",
]

from .env import EnvParser, ManagerEnv
