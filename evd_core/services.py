"""Service container that lazily instantiates and caches services."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Set

from evd_core.api.abc import Container
from evd_core.errors import CyclicDependencyError, InvalidServiceError, NotFoundError

__all__ = ["ServiceContainer", "CompositeContainer", "ServiceFactory", "ServiceExtension"]

ServiceFactory = Callable[[Container], Any]
ServiceExtension = Callable[[Container, Any], None]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ServiceRegistration:
    factory: ServiceFactory
    extensions: tuple[ServiceExtension, ...] = ()


class ServiceContainer:
    """Dependency container with lazy, cached initialization.

    Factories and extensions receive ``resolver`` rather than this container,
    so services can depend on ids owned by a wider container chain.
    """

    def __init__(self, resolver: Container) -> None:
        self._resolver = resolver
        self._registrations: Dict[str, _ServiceRegistration] = {}
        self._singletons: Dict[str, Any] = {}
        self._initializing: Set[str] = set()
        self._lock = threading.RLock()

    @property
    def resolver(self) -> Container:
        return self._resolver

    def register(
        self,
        service_id: str,
        factory: ServiceFactory,
        *,
        extension: ServiceExtension | None = None,
    ) -> None:
        """Register a factory that will be invoked on first ``get``."""
        if service_id in self._registrations:
            raise ValueError(f"service {service_id!r} already registered")
        extensions = (extension,) if extension is not None else ()
        self._registrations[service_id] = _ServiceRegistration(factory, extensions)

    def extend(self, service_id: str, extension: ServiceExtension) -> None:
        """Append a post-construction hook for ``service_id``."""
        registration = self._registrations.get(service_id)
        if registration is None:
            raise NotFoundError(service_id)
        if service_id in self._singletons:
            raise ValueError(f"service {service_id!r} is already built")
        self._registrations[service_id] = _ServiceRegistration(
            registration.factory, registration.extensions + (extension,)
        )

    def has(self, service_id: str) -> bool:
        return service_id in self._singletons or service_id in self._registrations

    def get(self, service_id: str) -> Any:
        """Resolve ``service_id``, instantiating it only when first requested."""
        with self._lock:
            if service_id in self._singletons:
                return self._singletons[service_id]

            registration = self._registrations.get(service_id)
            if registration is None:
                raise NotFoundError(service_id)

            if service_id in self._initializing:
                raise CyclicDependencyError(service_id)

            self._initializing.add(service_id)
            try:
                instance = self._build(service_id, registration)
            finally:
                self._initializing.discard(service_id)

            self._singletons[service_id] = instance
            return instance

    def _build(self, service_id: str, registration: _ServiceRegistration) -> Any:
        logger.debug("building service %s", service_id)
        try:
            instance = registration.factory(self._resolver)
            for extension in registration.extensions:
                extension(self._resolver, instance)
        except CyclicDependencyError:
            raise
        except Exception as exc:
            raise InvalidServiceError(service_id, exc) from exc
        return instance


class CompositeContainer:
    """Resolve ids through an ordered chain of containers."""

    def __init__(self, *containers: Container) -> None:
        self._containers: list[Container] = list(containers)

    def attach(self, container: Container) -> None:
        self._containers.append(container)

    def has(self, service_id: str) -> bool:
        return any(container.has(service_id) for container in self._containers)

    def get(self, service_id: str) -> Any:
        for container in self._containers:
            if container.has(service_id):
                return container.get(service_id)
        raise NotFoundError(service_id)
