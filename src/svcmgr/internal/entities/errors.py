"""Errors raised by the service registry.

``ContractViolation`` signals a service wired into the registry that does not
implement what it claims to. It is raised at load time, and is meant to be
fixed by whoever added the service, not handled.

The remaining errors signal bad input from the caller of the registry.
Failures raised by hook and command callbacks are not wrapped: they reach
the caller unchanged.
"""


class RegistryError(Exception):
    """Base class for all registry errors."""


class ContractViolation(RegistryError, TypeError):
    """A service or process manager does not satisfy its interface."""


class UnknownHook(RegistryError, LookupError):
    """The hook is not part of the fixed hook vocabulary."""


class UnknownCommand(RegistryError, LookupError):
    """No command is registered under the name."""


class UnknownService(RegistryError, LookupError):
    """No service is loaded under the name."""


class DuplicateCommand(RegistryError, ValueError):
    """A command is already registered under the name."""


class DuplicateService(RegistryError, ValueError):
    """A service is already loaded under the name."""
