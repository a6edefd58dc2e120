"""Value types shared by the scanner, the adapters and the registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from .errors import UnknownBackendError


class ChartKind(str, Enum):
    LINE = "line"
    BAR = "bar"
    PIE = "pie"
    DOUGHNUT = "doughnut"
    SCATTER = "scatter"
    RADAR = "radar"

    @property
    def is_circular(self) -> bool:
        return self in (ChartKind.PIE, ChartKind.DOUGHNUT)


class Backend(str, Enum):
    """Drawing backends a renderer can switch between."""

    PLOTLY = "plotly"
    ALTAIR = "altair"
    BOKEH = "bokeh"

    @classmethod
    def parse(cls, name: str | Backend) -> Backend:
        if isinstance(name, Backend):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise UnknownBackendError(str(name)) from None


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Return a plain, mutable deep copy of a frozen payload."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class ChartDescriptor:
    """Kind-tagged chart configuration read from a container.

    ``payload`` is stored read-only so that adapters cannot mutate the
    configuration they were handed.
    """

    kind: ChartKind
    payload: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", _freeze(self.payload))

    def with_payload(self, payload: Mapping[str, Any]) -> ChartDescriptor:
        return ChartDescriptor(kind=self.kind, payload=payload)


@dataclass
class ChartInstance:
    identifier: str
    descriptor: ChartDescriptor
    backend: Backend
    handle: Any = field(repr=False)
    container: Any = field(default=None, repr=False, compare=False)
