"""Decorators that mark functions and classes as event listeners."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from evd_core.events import event_key

LISTENER_METADATA = "__evd_listeners__"

_Target = TypeVar("_Target")


@dataclass(frozen=True)
class ListenerSpec:
    """Listener metadata attached by :func:`listens_to`."""

    event: str | None
    priority: int = 0
    method: str | None = None


def listener_specs(target: Any) -> tuple[ListenerSpec, ...]:
    """Return the metadata declared directly on ``target``."""

    if isinstance(target, type):
        return tuple(vars(target).get(LISTENER_METADATA, ()))
    return tuple(getattr(target, LISTENER_METADATA, ()))


def listens_to(
    event: type | str | None = None,
    *,
    priority: int = 0,
    method: str | None = None,
) -> Callable[[_Target], _Target]:
    """Mark a function, method or class as listening to ``event``.

    When ``event`` is omitted the event type is read from the annotation of
    the listener's first parameter. On a class, ``method`` names the method
    to call; by default the instance itself is called. The decorator may be
    stacked to listen to several events.
    """

    if isinstance(priority, bool) or not isinstance(priority, int):
        raise TypeError("priority must be an integer.")

    spec = ListenerSpec(
        event=None if event is None else event_key(event),
        priority=priority,
        method=method,
    )

    def wrap(target: _Target) -> _Target:
        if isinstance(target, type):
            existing = tuple(vars(target).get(LISTENER_METADATA, ()))
        elif callable(target):
            if method is not None:
                raise TypeError("method can only be given when decorating a class.")
            existing = tuple(getattr(target, LISTENER_METADATA, ()))
        else:
            raise TypeError("Decorated object must be a class or a callable.")
        setattr(target, LISTENER_METADATA, existing + (spec,))
        return target

    return wrap
