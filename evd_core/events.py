"""Event primitives shared by providers and the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

__all__ = ["Event", "NamedEvent", "FaultEvent", "event_key", "type_key"]


def type_key(cls: type) -> str:
    """Return the ``module.QualName`` key used for a type."""

    return f"{cls.__module__}.{cls.__qualname__}"


def event_key(target: Any) -> str:
    """Return the key under which listeners for ``target`` are stored.

    Strings are explicit names and are returned unchanged, types map to their
    qualified name and any other object maps to the key of its type.
    """

    if isinstance(target, str):
        return target
    if isinstance(target, type):
        return type_key(target)
    return type_key(type(target))


class Event:
    """Base class for events that listeners may stop."""

    _propagation_stopped: bool = False

    def stop_propagation(self) -> None:
        self._propagation_stopped = True

    def is_propagation_stopped(self) -> bool:
        return self._propagation_stopped


@dataclass(frozen=True)
class NamedEvent:
    """Pairs an event with the name it is being dispatched under."""

    event: Any
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", event_key(self.event))


@dataclass(frozen=True, eq=False)
class FaultEvent:
    """Dispatched when a listener raises, before the error reaches the caller."""

    source_event: Any
    listener: Callable[[Any], Any]
    cause: BaseException = field(repr=False)
