"""Priority-ordered listener storage keyed by event."""

from __future__ import annotations

import bisect
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Iterator

from evd_core.api.abc import Listener
from evd_core.errors import InvalidInputError
from evd_core.events import NamedEvent, event_key

__all__ = ["ListenerDescriptor", "ListenerSequence", "PriorityListenerRegistry"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListenerDescriptor:
    """Immutable record of one registered listener."""

    event_key: str
    target: Listener
    priority: int
    origin: str
    order: int

    @property
    def sort_key(self) -> tuple[int, int]:
        return (-self.priority, self.order)


class ListenerSequence:
    """Restartable view over one priority bucket."""

    def __init__(self, bucket: list[ListenerDescriptor]) -> None:
        self._bucket = bucket

    def __iter__(self) -> Iterator[Listener]:
        for descriptor in self._bucket:
            yield descriptor.target

    def __len__(self) -> int:
        return len(self._bucket)


class PriorityListenerRegistry:
    """Listener provider that keeps one priority bucket per event key.

    Higher priorities run first; equal priorities run in registration order.
    """

    def __init__(self, name: str = "registry") -> None:
        self.name = name
        self._buckets: dict[str, list[ListenerDescriptor]] = {}
        self._sequence = itertools.count()

    def listen(
        self,
        event: type | str,
        listener: Listener,
        priority: int = 0,
        *,
        origin: str | None = None,
    ) -> ListenerDescriptor:
        """Register ``listener`` for ``event`` and return its descriptor."""

        if not callable(listener):
            raise InvalidInputError(f"listener for {event_key(event)} is not callable")
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise InvalidInputError(f"priority must be an integer, got {priority!r}")

        descriptor = ListenerDescriptor(
            event_key=event_key(event),
            target=listener,
            priority=priority,
            origin=origin or self.name,
            order=next(self._sequence),
        )
        bucket = self._buckets.setdefault(descriptor.event_key, [])
        bisect.insort(bucket, descriptor, key=lambda item: item.sort_key)
        logger.debug(
            "%s: registered %r for %s (priority %d)",
            self.name,
            listener,
            descriptor.event_key,
            priority,
        )
        return descriptor

    def listeners_for(self, key: str) -> ListenerSequence:
        return ListenerSequence(self._buckets.get(key, []))

    def get_listeners_for_event(self, event: Any) -> ListenerSequence:
        key = event.name if isinstance(event, NamedEvent) else event_key(event)
        return self.listeners_for(key)

    def descriptors(self, key: str | None = None) -> tuple[ListenerDescriptor, ...]:
        if key is not None:
            return tuple(self._buckets.get(key, ()))
        return tuple(itertools.chain.from_iterable(self._buckets.values()))
