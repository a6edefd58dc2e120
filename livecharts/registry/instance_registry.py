"""Live chart instances keyed by their container identifier.

The registry owns instance lifetime: anything that leaves the mapping is
destroyed through the adapter that created it, and nothing destroyed stays
reachable through it.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional

from ..adapters.base import ChartAdapter
from ..models import Backend, ChartInstance

logger = logging.getLogger(__name__)


class InstanceRegistry:
    def __init__(self, adapter_for: Callable[[Backend], ChartAdapter]) -> None:
        self._adapter_for = adapter_for
        self._instances: dict[str, ChartInstance] = {}

    def _destroy(self, instance: ChartInstance) -> None:
        self._adapter_for(instance.backend).destroy(instance.handle)
        logger.debug("chart_destroyed", extra={"chart_id": instance.identifier, "backend": instance.backend.value})

    def put(self, identifier: str, instance: ChartInstance) -> None:
        existing = self._instances.pop(identifier, None)
        if existing is not None and existing is not instance:
            self._destroy(existing)
        self._instances[identifier] = instance

    def get(self, identifier: str) -> Optional[ChartInstance]:
        return self._instances.get(identifier)

    def remove(self, identifier: str) -> None:
        instance = self._instances.pop(identifier, None)
        if instance is not None:
            self._destroy(instance)

    def clear(self) -> None:
        instances = list(self._instances.values())
        self._instances.clear()
        for instance in instances:
            self._destroy(instance)

    def identifiers(self) -> list[str]:
        return list(self._instances)

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._instances

    def __iter__(self) -> Iterator[ChartInstance]:
        return iter(list(self._instances.values()))

    def describe(self) -> list[dict[str, str]]:
        return [
            {"identifier": i.identifier, "kind": i.descriptor.kind.value, "backend": i.backend.value}
            for i in self._instances.values()
        ]
