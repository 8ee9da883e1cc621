"""Abstract interfaces implemented by subscribers, providers and containers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Mapping, Protocol, Sequence, Union, runtime_checkable

Listener = Callable[[Any], Any]
MethodPair = Union[tuple[str], tuple[str, int]]
MethodSpec = Union[str, MethodPair, Sequence[MethodPair]]


class EventSubscriber(ABC):
    """Declares which of its methods listen to which events."""

    @classmethod
    @abstractmethod
    def subscribed_events(cls) -> Mapping[Any, MethodSpec]:
        """Map event types or names to a method name, a ``(method, priority)``
        pair, or a list of such pairs."""


@runtime_checkable
class ListenerProvider(Protocol):
    """Anything able to list the listeners interested in an event."""

    def get_listeners_for_event(self, event: Any) -> Iterable[Listener]:
        ...


@runtime_checkable
class StoppableEvent(Protocol):
    """Events whose propagation listeners may stop."""

    def is_propagation_stopped(self) -> bool:
        ...


@runtime_checkable
class Container(Protocol):
    """Minimal service lookup surface."""

    def has(self, service_id: str) -> bool:
        ...

    def get(self, service_id: str) -> Any:
        ...
