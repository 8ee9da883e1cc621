"""Wire listener sources, the service container and the dispatcher together."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from evd_core.api.abc import Container
from evd_core.config import ListenerConfig
from evd_core.dispatcher import EventDispatcher
from evd_core.provider import EVENT_DISPATCHER, DispatcherServiceProvider
from evd_core.services import CompositeContainer, ServiceContainer

__all__ = ["DispatcherContainer", "create_container", "create_dispatcher", "LISTENERS_ALIAS"]

LISTENERS_ALIAS = "config.listeners"

logger = logging.getLogger(__name__)


class DispatcherContainer(ServiceContainer):
    """Service container pre-loaded with a :class:`DispatcherServiceProvider`."""

    def __init__(self, provider: DispatcherServiceProvider, resolver: Container) -> None:
        super().__init__(resolver)
        self.provider = provider
        extensions = provider.extensions()
        for service_id, factory in provider.factories().items():
            self.register(service_id, factory, extension=extensions.get(service_id))


def create_container(
    *sources: Any,
    parent: Container | None = None,
    config: ListenerConfig | None = None,
) -> CompositeContainer:
    """Build the container chain that resolves the dispatcher and its listeners.

    Ids are looked up in the dispatcher container first and then in
    ``parent``. Without explicit sources the listeners come from ``config``
    (for example ``ListenerConfig.load()``), and failing that from
    ``parent``'s ``config.listeners`` entry when present.
    """

    listener_sources: Iterable[Any] = sources
    if not sources and config is not None:
        listener_sources = config.sources()
        logger.debug("using listener sources from %s", config.path)
    elif not sources and parent is not None and parent.has(LISTENERS_ALIAS):
        listener_sources = parent.get(LISTENERS_ALIAS)
        logger.debug("using listener sources from %s", LISTENERS_ALIAS)

    provider = DispatcherServiceProvider(*listener_sources)
    chain = CompositeContainer()
    chain.attach(DispatcherContainer(provider, chain))
    if parent is not None:
        chain.attach(parent)
    provider.validate(chain)
    return chain


def create_dispatcher(
    *sources: Any,
    parent: Container | None = None,
    config: ListenerConfig | None = None,
) -> EventDispatcher:
    """Return a dispatcher for ``sources``; see :func:`create_container`."""

    return create_container(*sources, parent=parent, config=config).get(EVENT_DISPATCHER)
