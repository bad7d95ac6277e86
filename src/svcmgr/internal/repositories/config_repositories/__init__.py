from .json_file import JSONConfigRepository

__all__ = [
    "JSONConfigRepository",
]
