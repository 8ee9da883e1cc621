"""Compose several listener providers behind one lookup."""

from __future__ import annotations

import itertools
from typing import Any, Iterator

from evd_core.api.abc import Listener, ListenerProvider
from evd_core.errors import InvalidInputError

__all__ = ["ListenerProviderAggregate"]


class ListenerProviderAggregate:
    """Chain providers in attach order.

    Priorities are honoured inside each provider only; the aggregate never
    re-sorts listeners across providers.
    """

    def __init__(self, *providers: ListenerProvider) -> None:
        self._providers: list[ListenerProvider] = []
        for provider in providers:
            self.attach(provider)

    def attach(self, provider: ListenerProvider) -> None:
        if not isinstance(provider, ListenerProvider):
            raise InvalidInputError(f"{provider!r} is not a listener provider")
        self._providers.append(provider)

    @property
    def providers(self) -> tuple[ListenerProvider, ...]:
        return tuple(self._providers)

    def get_listeners_for_event(self, event: Any) -> Iterator[Listener]:
        providers = tuple(self._providers)
        return itertools.chain.from_iterable(
            provider.get_listeners_for_event(event) for provider in providers
        )
