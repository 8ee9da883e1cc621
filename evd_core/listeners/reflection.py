"""Read listener metadata from decorators and type annotations."""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from evd_core.api.decorators import ListenerSpec, listener_specs
from evd_core.errors import InvalidInputError
from evd_core.events import event_key

__all__ = [
    "DeclaredListener",
    "declared_listeners",
    "has_declared_listeners",
    "annotated_event_key",
]


@dataclass(frozen=True)
class DeclaredListener:
    """Listener metadata normalized to an event key.

    ``method`` is ``None`` when the source itself is the callable.
    """

    event_key: str
    priority: int
    method: str | None


def annotated_event_key(source: Any) -> str:
    """Return the key of the type annotated on the first listener parameter.

    ``source`` may be a function, a bound method, a callable instance or a
    class whose instances are callable.
    """

    if isinstance(source, type):
        return _annotation_key(_lookup_method(source, "__call__"), skip_first=True, owner=source)
    if inspect.isfunction(source) or inspect.ismethod(source):
        return _annotation_key(source, skip_first=False, owner=source)
    if callable(source):
        return _annotation_key(type(source).__call__, skip_first=True, owner=source)
    raise InvalidInputError(f"{source!r} is not callable")


def has_declared_listeners(source: Any) -> bool:
    if not isinstance(source, type) and listener_specs(source):
        return True
    cls = source if isinstance(source, type) else type(source)
    if listener_specs(cls):
        return True
    return any(specs for _, _, specs in _decorated_members(cls))


def declared_listeners(source: Any) -> tuple[DeclaredListener, ...]:
    """Collect ``listens_to`` metadata from a function, class or instance."""

    if inspect.isfunction(source) or inspect.ismethod(source):
        return tuple(
            DeclaredListener(spec.event or annotated_event_key(source), spec.priority, None)
            for spec in listener_specs(source)
        )

    cls = source if isinstance(source, type) else type(source)
    found: list[DeclaredListener] = []
    for spec in listener_specs(cls):
        found.append(_class_level(cls, spec))
    for name, function, specs in _decorated_members(cls):
        for spec in specs:
            key = spec.event or _annotation_key(
                function, skip_first=_is_instance_method(cls, name), owner=cls
            )
            found.append(DeclaredListener(key, spec.priority, name))
    return tuple(found)


def _class_level(cls: type, spec: ListenerSpec) -> DeclaredListener:
    if spec.method is None:
        key = spec.event or annotated_event_key(cls)
        return DeclaredListener(key, spec.priority, None)
    function = _lookup_method(cls, spec.method)
    key = spec.event or _annotation_key(
        function, skip_first=_is_instance_method(cls, spec.method), owner=cls
    )
    return DeclaredListener(key, spec.priority, spec.method)


def _decorated_members(cls: type) -> Iterator[tuple[str, Callable[..., Any], tuple[ListenerSpec, ...]]]:
    members: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        members.update(vars(klass))
    for name, member in members.items():
        function = getattr(member, "__func__", member)
        if not callable(function) or isinstance(function, type):
            continue
        specs = listener_specs(function) or listener_specs(member)
        if specs:
            yield name, function, specs


def _lookup_method(cls: type, name: str) -> Callable[..., Any]:
    member = inspect.getattr_static(cls, name, None)
    function = getattr(member, "__func__", member)
    if not callable(function):
        raise InvalidInputError(f"{cls.__qualname__} has no callable method {name!r}")
    return function


def _is_instance_method(cls: type, name: str) -> bool:
    return not isinstance(inspect.getattr_static(cls, name, None), staticmethod)


def _annotation_key(function: Callable[..., Any], *, skip_first: bool, owner: Any) -> str:
    try:
        parameters = list(inspect.signature(function).parameters.values())
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"cannot inspect listener {owner!r}") from exc
    if skip_first:
        parameters = parameters[1:]
    if not parameters:
        raise InvalidInputError(f"listener {owner!r} takes no event parameter")

    try:
        hints = typing.get_type_hints(function)
    except Exception as exc:
        raise InvalidInputError(f"cannot resolve annotations of {owner!r}") from exc

    annotation = hints.get(parameters[0].name)
    if annotation is None or annotation is Any or annotation is object:
        raise InvalidInputError(f"listener {owner!r} has no event type annotation")
    if not isinstance(annotation, type):
        raise InvalidInputError(f"event annotation of {owner!r} must be a class")
    return event_key(annotation)
