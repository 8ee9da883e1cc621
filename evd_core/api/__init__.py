"""Public interfaces for writing listeners, subscribers and providers."""

from .abc import Container, EventSubscriber, Listener, ListenerProvider, MethodSpec, StoppableEvent
from .decorators import ListenerSpec, listener_specs, listens_to

__all__ = [
    "Container",
    "EventSubscriber",
    "Listener",
    "ListenerProvider",
    "ListenerSpec",
    "MethodSpec",
    "StoppableEvent",
    "listener_specs",
    "listens_to",
]
