"""Listeners materialized from the service container on first use."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from evd_core.api.abc import Container

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LazyListener:
    """Call ``method`` (or the service itself) on a container-held service.

    The service is looked up on every call; the container caches it, so it is
    only built once.
    """

    container: Container = field(compare=False, repr=False)
    service_id: str
    method: str | None = None
    _container_id: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_container_id", id(self.container))

    def __call__(self, event: Any) -> Any:
        service = self.container.get(self.service_id)
        logger.debug("invoking lazy listener %s.%s", self.service_id, self.method or "__call__")
        if self.method is None:
            return service(event)
        return getattr(service, self.method)(event)
