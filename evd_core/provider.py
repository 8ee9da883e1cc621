"""Turn heterogeneous listener sources into container factories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from evd_core.api.abc import Container, Listener, ListenerProvider
from evd_core.dispatcher import EventDispatcher
from evd_core.errors import InvalidInputError, UnsupportedListenerError
from evd_core.events import type_key
from evd_core.listeners.aggregate import ListenerProviderAggregate
from evd_core.listeners.lazy import LazyListener
from evd_core.listeners.reflection import (
    DeclaredListener,
    annotated_event_key,
    declared_listeners,
    has_declared_listeners,
)
from evd_core.listeners.registry import PriorityListenerRegistry
from evd_core.listeners.subscriber import SubscriberListenerProvider
from evd_core.loader import import_object
from evd_core.services import ServiceExtension, ServiceFactory

__all__ = [
    "DispatcherServiceProvider",
    "ListenerSource",
    "SourceKind",
    "classify_source",
    "EVENT_DISPATCHER",
    "LISTENER_PROVIDER",
    "AGGREGATE_PROVIDER",
    "PRIORITIZED_PROVIDER",
    "REFLECTION_PROVIDER",
    "SUBSCRIBER_PROVIDER",
]

logger = logging.getLogger(__name__)

EVENT_DISPATCHER = "event_dispatcher"
LISTENER_PROVIDER = "listener_provider"
AGGREGATE_PROVIDER = "listener_provider.aggregate"
PRIORITIZED_PROVIDER = "listener_provider.prioritized"
REFLECTION_PROVIDER = "listener_provider.reflection"
SUBSCRIBER_PROVIDER = "listener_provider.subscriber"


class SourceKind(Enum):
    """Where a listener source ends up."""

    PRIORITIZED = "prioritized"
    PROVIDER = "provider"
    SUBSCRIBER = "subscriber"
    REFLECTED = "reflected"


@dataclass(frozen=True)
class ListenerSource:
    """A registration source classified once, before any dispatch."""

    kind: SourceKind
    target: Any
    service_id: str | None
    declared: tuple[DeclaredListener, ...] = ()
    original: Any = None

    @property
    def requires_service(self) -> bool:
        return isinstance(self.target, type)


def classify_source(source: Any) -> ListenerSource:
    """Decide how ``source`` contributes listeners.

    Strings are service ids that double as import paths, classes are looked
    up in the container under their qualified name, and everything else is
    used as is.
    """

    service_id: str | None = None
    target = source
    if isinstance(source, str):
        service_id = source
        try:
            target = import_object(source)
        except ImportError as exc:
            raise UnsupportedListenerError(source) from exc
    elif isinstance(source, type):
        service_id = type_key(source)

    kind = _kind_of(target)
    if kind is None:
        raise UnsupportedListenerError(source)

    declared: tuple[DeclaredListener, ...] = ()
    if kind is SourceKind.PRIORITIZED:
        declared = declared_listeners(target)
    elif kind is SourceKind.REFLECTED:
        declared = (DeclaredListener(annotated_event_key(target), 0, None),)

    return ListenerSource(
        kind=kind,
        target=target,
        service_id=service_id,
        declared=declared,
        original=source,
    )


def _kind_of(target: Any) -> SourceKind | None:
    if has_declared_listeners(target):
        return SourceKind.PRIORITIZED
    if isinstance(target, type):
        if callable(getattr(target, "get_listeners_for_event", None)):
            return SourceKind.PROVIDER
        if callable(getattr(target, "subscribed_events", None)):
            return SourceKind.SUBSCRIBER
        if "__call__" in _class_attributes(target):
            return SourceKind.REFLECTED
        return None
    if isinstance(target, ListenerProvider):
        return SourceKind.PROVIDER
    if callable(getattr(target, "subscribed_events", None)):
        return SourceKind.SUBSCRIBER
    if callable(target):
        return SourceKind.REFLECTED
    return None


def _class_attributes(cls: type) -> set[str]:
    names: set[str] = set()
    for klass in cls.__mro__[:-1]:
        names.update(vars(klass))
    return names


class DispatcherServiceProvider:
    """Factories and extensions that build a dispatcher from listener sources."""

    def __init__(self, *sources: Any) -> None:
        self._sources: dict[SourceKind, list[ListenerSource]] = {kind: [] for kind in SourceKind}
        for source in sources:
            classified = classify_source(source)
            self._sources[classified.kind].append(classified)
            logger.debug("classified listener source %r as %s", source, classified.kind.value)

    def sources(self, kind: SourceKind) -> tuple[ListenerSource, ...]:
        return tuple(self._sources[kind])

    def factories(self) -> Mapping[str, ServiceFactory]:
        return {
            EVENT_DISPATCHER: lambda container: EventDispatcher(container.get(LISTENER_PROVIDER)),
            type_key(EventDispatcher): _alias(EVENT_DISPATCHER),
            LISTENER_PROVIDER: _alias(AGGREGATE_PROVIDER),
            AGGREGATE_PROVIDER: self._create_aggregate,
            PRIORITIZED_PROVIDER: lambda _: PriorityListenerRegistry(name="prioritized"),
            REFLECTION_PROVIDER: lambda _: PriorityListenerRegistry(name="reflection"),
            SUBSCRIBER_PROVIDER: self._create_subscriber_provider,
        }

    def extensions(self) -> Mapping[str, ServiceExtension]:
        return {
            AGGREGATE_PROVIDER: self._extend_aggregate,
            PRIORITIZED_PROVIDER: self._extend_prioritized,
            REFLECTION_PROVIDER: self._extend_reflection,
        }

    def validate(self, container: Container) -> None:
        """Fail fast when a class source has no service in ``container``."""

        for sources in self._sources.values():
            for source in sources:
                if source.requires_service and not container.has(source.service_id or ""):
                    raise UnsupportedListenerError(source.original)

    def _create_aggregate(self, container: Container) -> ListenerProviderAggregate:
        providers = [
            self._resolve(container, source) for source in self._sources[SourceKind.PROVIDER]
        ]
        return ListenerProviderAggregate(*providers)

    def _create_subscriber_provider(self, container: Container) -> SubscriberListenerProvider:
        provider = SubscriberListenerProvider()
        for source in self._sources[SourceKind.SUBSCRIBER]:
            if source.service_id is not None and container.has(source.service_id):
                provider.subscribe(source.target, bind=self._binder(container, source))
            elif source.requires_service:
                raise UnsupportedListenerError(source.original)
            else:
                provider.subscribe(source.target)
        return provider

    def _extend_aggregate(self, container: Container, aggregate: ListenerProviderAggregate) -> None:
        aggregate.attach(container.get(PRIORITIZED_PROVIDER))
        aggregate.attach(container.get(REFLECTION_PROVIDER))
        aggregate.attach(container.get(SUBSCRIBER_PROVIDER))

    def _extend_prioritized(self, container: Container, registry: PriorityListenerRegistry) -> None:
        self._populate(container, registry, SourceKind.PRIORITIZED)

    def _extend_reflection(self, container: Container, registry: PriorityListenerRegistry) -> None:
        self._populate(container, registry, SourceKind.REFLECTED)

    def _populate(
        self,
        container: Container,
        registry: PriorityListenerRegistry,
        kind: SourceKind,
    ) -> None:
        for source in self._sources[kind]:
            bind = self._binder(container, source)
            origin = source.service_id or type_key(type(source.target))
            for declared in source.declared:
                registry.listen(
                    declared.event_key,
                    bind(declared.method),
                    declared.priority,
                    origin=origin,
                )

    def _binder(self, container: Container, source: ListenerSource) -> Callable[[str | None], Listener]:
        lazy = source.service_id is not None and container.has(source.service_id)
        if source.requires_service and not lazy:
            raise UnsupportedListenerError(source.original)

        def bind(method: str | None) -> Listener:
            if method is not None and not callable(getattr(source.target, method, None)):
                raise InvalidInputError(f"{source.original!r} has no callable method {method!r}")
            if lazy:
                return LazyListener(container, source.service_id or "", method)
            if method is None:
                return source.target
            return getattr(source.target, method)

        return bind

    @staticmethod
    def _resolve(container: Container, source: ListenerSource) -> Any:
        if source.service_id is not None and container.has(source.service_id):
            return container.get(source.service_id)
        if source.requires_service:
            raise UnsupportedListenerError(source.original)
        return source.target


def _alias(target: str) -> ServiceFactory:
    return lambda container: container.get(target)
