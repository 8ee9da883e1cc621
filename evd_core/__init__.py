"""Priority-ordered event dispatching backed by a lazy service container."""

from .api import EventSubscriber, ListenerProvider, listens_to
from .config import ListenerConfig, default_config_path
from .container import DispatcherContainer, create_container, create_dispatcher
from .dispatcher import EventDispatcher
from .errors import (
    ConfigError,
    ContainerError,
    CyclicDependencyError,
    DispatcherError,
    InvalidInputError,
    InvalidServiceError,
    NotFoundError,
    UnsupportedListenerError,
)
from .events import Event, FaultEvent, NamedEvent, event_key
from .listeners import (
    LazyListener,
    ListenerProviderAggregate,
    PriorityListenerRegistry,
    SubscriberListenerProvider,
)
from .provider import DispatcherServiceProvider
from .services import CompositeContainer, ServiceContainer

__all__ = [
    "CompositeContainer",
    "ConfigError",
    "ContainerError",
    "CyclicDependencyError",
    "DispatcherContainer",
    "DispatcherError",
    "DispatcherServiceProvider",
    "Event",
    "EventDispatcher",
    "EventSubscriber",
    "FaultEvent",
    "InvalidInputError",
    "InvalidServiceError",
    "LazyListener",
    "ListenerConfig",
    "ListenerProvider",
    "ListenerProviderAggregate",
    "NamedEvent",
    "NotFoundError",
    "PriorityListenerRegistry",
    "ServiceContainer",
    "SubscriberListenerProvider",
    "UnsupportedListenerError",
    "create_container",
    "create_dispatcher",
    "default_config_path",
    "event_key",
    "listens_to",
]
