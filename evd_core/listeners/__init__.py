"""Listener providers: priority registries, subscribers and aggregates."""

from .aggregate import ListenerProviderAggregate
from .lazy import LazyListener
from .registry import ListenerDescriptor, ListenerSequence, PriorityListenerRegistry
from .subscriber import SubscriberListenerProvider, parse_method_spec

__all__ = [
    "LazyListener",
    "ListenerDescriptor",
    "ListenerProviderAggregate",
    "ListenerSequence",
    "PriorityListenerRegistry",
    "SubscriberListenerProvider",
    "parse_method_spec",
]
