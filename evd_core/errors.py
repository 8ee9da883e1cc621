"""Error types raised by the event dispatcher and its service container."""

from __future__ import annotations

from typing import Any


class DispatcherError(Exception):
    """Base class for event dispatcher failures."""


class ContainerError(DispatcherError):
    """Base class for service container failures."""


class NotFoundError(ContainerError, LookupError):
    """Raised when no factory is registered for a service id."""

    def __init__(self, service_id: str) -> None:
        super().__init__(f"service {service_id!r} not found")
        self.service_id = service_id


class InvalidServiceError(ContainerError):
    """Raised when a factory or extension fails while building a service."""

    def __init__(self, service_id: str, cause: BaseException) -> None:
        super().__init__(f"invalid service {service_id!r}: {cause}")
        self.service_id = service_id
        self.cause = cause


class CyclicDependencyError(ContainerError):
    """Raised when a service is requested while it is still being built."""

    def __init__(self, service_id: str) -> None:
        super().__init__(f"re-entrant initialization detected for {service_id!r}")
        self.service_id = service_id


class InvalidInputError(DispatcherError, ValueError):
    """Raised when a registration source or subscriber table is malformed."""


class UnsupportedListenerError(DispatcherError, TypeError):
    """Raised when a listener source is neither callable nor resolvable."""

    def __init__(self, listener: Any) -> None:
        super().__init__(f"unsupported listener type: {type(listener).__name__!r}")
        self.listener = listener


class ConfigError(DispatcherError):
    """Raised when a listener configuration file cannot be used."""
