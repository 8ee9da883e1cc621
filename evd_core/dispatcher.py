"""Synchronous event dispatcher with stop-propagation and fault events."""

from __future__ import annotations

import itertools
import logging
from types import MethodType
from typing import Any, Hashable, Iterable, Iterator, TypeVar

from evd_core.api.abc import Listener, ListenerProvider, StoppableEvent
from evd_core.events import FaultEvent, NamedEvent, event_key
from evd_core.listeners.lazy import LazyListener

__all__ = ["EventDispatcher", "listener_identity", "unique_listeners"]

logger = logging.getLogger(__name__)

_E = TypeVar("_E")


def listener_identity(listener: Listener) -> Hashable:
    """Return the key two listeners share when they would call the same target."""

    if isinstance(listener, MethodType):
        return ("method", id(listener.__self__), listener.__func__)
    if isinstance(listener, LazyListener):
        return ("lazy", listener)
    return ("object", id(listener))


def unique_listeners(listeners: Iterable[Listener]) -> Iterator[Listener]:
    """Yield listeners in order, skipping any already seen.

    Yielded listeners stay referenced until the iterator is exhausted, so an
    ``id`` taken from a listener built per lookup is never reused mid-dispatch.
    """

    seen: dict[Hashable, Listener] = {}
    for listener in listeners:
        identity = listener_identity(listener)
        if identity in seen:
            continue
        seen[identity] = listener
        yield listener


class EventDispatcher:
    """Deliver events to the listeners returned by a provider."""

    def __init__(self, listener_provider: ListenerProvider) -> None:
        self.listener_provider = listener_provider

    def dispatch(self, event: _E, name: str | None = None) -> _E:
        """Invoke every interested listener with ``event`` and return it.

        Listeners registered for the event's type and for ``name`` both run,
        each at most once. A listener that raises causes a :class:`FaultEvent`
        to be dispatched before the original exception is re-raised.
        """

        stoppable = isinstance(event, StoppableEvent)
        if stoppable and event.is_propagation_stopped():
            return event

        key = name or event_key(event)
        listeners = unique_listeners(
            itertools.chain(
                self.listener_provider.get_listeners_for_event(event),
                self.listener_provider.get_listeners_for_event(NamedEvent(event, key)),
            )
        )

        for listener in listeners:
            fault: Exception | None = None
            try:
                listener(event)
            except Exception as exc:
                fault = exc

            # Handled outside the except block so no exception context leaks
            # onto the error the caller receives.
            if fault is not None:
                self._handle_fault(event, listener, fault)
                raise fault

            if stoppable and event.is_propagation_stopped():
                logger.debug("propagation of %s stopped by %r", key, listener)
                break

        return event

    def _handle_fault(self, event: Any, listener: Listener, exc: Exception) -> None:
        if isinstance(event, FaultEvent):
            raise event.cause

        logger.debug("listener %r raised %r, dispatching fault event", listener, exc)
        try:
            self.dispatch(FaultEvent(event, listener, exc))
        except Exception as secondary:
            if secondary is not exc:
                logger.debug("fault listeners raised %r; keeping original error", secondary)
