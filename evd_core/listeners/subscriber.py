"""Adapt :class:`EventSubscriber` route tables into prioritized listeners."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping

from evd_core.api.abc import Listener
from evd_core.errors import InvalidInputError
from evd_core.events import event_key

from .registry import ListenerSequence, PriorityListenerRegistry

__all__ = ["SubscriberListenerProvider", "parse_method_spec"]

logger = logging.getLogger(__name__)

Binder = Callable[[str], Listener]


def _parse_pair(pair: Any, key: str) -> tuple[str, int] | None:
    if not isinstance(pair, (tuple, list)) or not 1 <= len(pair) <= 2:
        return None
    method = pair[0]
    if not isinstance(method, str) or not method:
        return None
    priority = pair[1] if len(pair) == 2 else 0
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise InvalidInputError(f"priority for {key} -> {method} must be an integer")
    return method, priority


def parse_method_spec(key: str, spec: Any) -> list[tuple[str, int]]:
    """Normalize one route table value into ``(method, priority)`` entries.

    Accepted shapes are ``"method"``, ``("method", priority)`` and a list of
    such pairs.
    """

    if isinstance(spec, str):
        if not spec:
            raise InvalidInputError(f"empty method name for {key}")
        return [(spec, 0)]

    pair = _parse_pair(spec, key)
    if pair is not None:
        return [pair]

    if isinstance(spec, (tuple, list)) and spec:
        entries: list[tuple[str, int]] = []
        for item in spec:
            parsed = _parse_pair(item, key)
            if parsed is None:
                raise InvalidInputError(f"malformed listener entry {item!r} for {key}")
            entries.append(parsed)
        return entries

    raise InvalidInputError(f"unrecognized listener declaration {spec!r} for {key}")


class SubscriberListenerProvider:
    """Listener provider fed by event subscribers."""

    def __init__(self, *subscribers: Any) -> None:
        self._registry = PriorityListenerRegistry(name="subscriber")
        for subscriber in subscribers:
            self.subscribe(subscriber)

    def subscribe(self, subscriber: Any, *, bind: Binder | None = None) -> None:
        """Register every route declared by ``subscriber``.

        ``bind`` turns a method name into the callable to store; by default it
        is looked up on ``subscriber`` right away.
        """

        declare = getattr(subscriber, "subscribed_events", None)
        if not callable(declare):
            raise InvalidInputError(
                f"event subscriber {subscriber!r} must define subscribed_events()"
            )
        table = declare()
        if not isinstance(table, Mapping):
            raise InvalidInputError(
                f"subscribed_events() of {subscriber!r} must return a mapping"
            )

        binder = bind or (lambda method: self._bind_method(subscriber, method))
        origin = _origin_of(subscriber)
        for event, spec in table.items():
            key = event_key(event)
            for method, priority in parse_method_spec(key, spec):
                self._registry.listen(key, binder(method), priority, origin=origin)

    @staticmethod
    def _bind_method(subscriber: Any, method: str) -> Listener:
        listener = getattr(subscriber, method, None)
        if not callable(listener):
            raise InvalidInputError(f"{subscriber!r} has no callable method {method!r}")
        return listener

    def listeners_for(self, key: str) -> ListenerSequence:
        return self._registry.listeners_for(key)

    def get_listeners_for_event(self, event: Any) -> Iterable[Listener]:
        return self._registry.get_listeners_for_event(event)

    @property
    def registry(self) -> PriorityListenerRegistry:
        return self._registry


def _origin_of(subscriber: Any) -> str:
    cls = subscriber if isinstance(subscriber, type) else type(subscriber)
    return event_key(cls)
