"""Tests for listener metadata declared with decorators and annotations."""

from __future__ import annotations

import pytest

from evd_core.api import listens_to, listener_specs
from evd_core.errors import InvalidInputError
from evd_core.events import event_key
from evd_core.listeners.reflection import (
    DeclaredListener,
    annotated_event_key,
    declared_listeners,
    has_declared_listeners,
)


class _Opened:
    pass


class _Closed:
    pass


def test_decorator_stacks_specs_on_functions() -> None:
    @listens_to(_Opened, priority=3)
    @listens_to("door.closed")
    def handler(event) -> None: ...

    specs = listener_specs(handler)

    assert [spec.event for spec in specs] == ["door.closed", event_key(_Opened)]
    assert declared_listeners(handler) == (
        DeclaredListener("door.closed", 0, None),
        DeclaredListener(event_key(_Opened), 3, None),
    )


def test_decorator_infers_event_from_annotation() -> None:
    @listens_to(priority=1)
    def handler(event: _Opened) -> None: ...

    assert declared_listeners(handler) == (DeclaredListener(event_key(_Opened), 1, None),)


def test_decorator_validates_arguments() -> None:
    with pytest.raises(TypeError):
        listens_to(_Opened, priority="high")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        listens_to(_Opened, method="run")(lambda event: None)
    with pytest.raises(TypeError):
        listens_to(_Opened)(42)  # type: ignore[arg-type]


def test_class_level_and_method_level_declarations() -> None:
    @listens_to(_Closed, method="closed", priority=-1)
    @listens_to(priority=2)
    class Door:
        def __call__(self, event: _Opened) -> None: ...

        def closed(self, event) -> None: ...

        @listens_to()
        def on_opened(self, event: _Opened) -> None: ...

        @staticmethod
        @listens_to("door.static")
        def static_handler(event) -> None: ...

    assert has_declared_listeners(Door)
    assert has_declared_listeners(Door())
    assert declared_listeners(Door) == (
        DeclaredListener(event_key(_Opened), 2, None),
        DeclaredListener(event_key(_Closed), -1, "closed"),
        DeclaredListener(event_key(_Opened), 0, "on_opened"),
        DeclaredListener("door.static", 0, "static_handler"),
    )
    assert declared_listeners(Door()) == declared_listeners(Door)


def test_subclass_metadata_does_not_leak_to_base() -> None:
    class Base:
        @listens_to("base.event")
        def handle(self, event) -> None: ...

    @listens_to("child.event", method="handle")
    class Child(Base):
        pass

    assert [item.event_key for item in declared_listeners(Base)] == ["base.event"]
    assert [item.event_key for item in declared_listeners(Child)] == [
        "child.event",
        "base.event",
    ]


def test_plain_callables_are_not_declared() -> None:
    def handler(event: _Opened) -> None: ...

    class Plain:
        def __call__(self, event: _Opened) -> None: ...

    assert not has_declared_listeners(handler)
    assert not has_declared_listeners(Plain)
    assert not has_declared_listeners(Plain())


def test_annotated_event_key_for_functions_methods_and_callables() -> None:
    def handler(event: _Opened) -> None: ...

    class Listener:
        def __call__(self, event: _Closed) -> None: ...

        def method(self, event: _Opened) -> None: ...

    assert annotated_event_key(handler) == event_key(_Opened)
    assert annotated_event_key(Listener()) == event_key(_Closed)
    assert annotated_event_key(Listener) == event_key(_Closed)
    assert annotated_event_key(Listener().method) == event_key(_Opened)


@pytest.mark.parametrize(
    "listener",
    [
        lambda event: None,
        lambda: None,
    ],
)
def test_missing_annotations_are_rejected(listener) -> None:
    with pytest.raises(InvalidInputError):
        annotated_event_key(listener)


def test_non_class_annotations_are_rejected() -> None:
    def handler(event: _Opened | None) -> None: ...

    with pytest.raises(InvalidInputError):
        annotated_event_key(handler)


def test_non_callables_are_rejected() -> None:
    with pytest.raises(InvalidInputError):
        annotated_event_key(42)
