"""Discovery of chart containers in a parsed page.

A container is an element carrying the declarative chart attributes::

    <div class="chart-container" data-chart-type="line"
         data-chart-data='{"data": {"labels": [...], "datasets": [...]}}'>
      <div class="chart-canvas" id="revenue"></div>
    </div>

After a chart is created the container gets ``data-chart-id`` and
``data-rendered="true"`` written back. Those two attributes are the only
state kept in the document.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from bs4 import BeautifulSoup, Tag

from ..errors import MalformedDescriptorError, MissingSurfaceError
from ..models import ChartDescriptor, ChartKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContainerProtocol:
    container_class: str = "chart-container"
    surface_class: str = "chart-canvas"
    type_attr: str = "data-chart-type"
    data_attr: str = "data-chart-data"
    id_attr: str = "data-chart-id"
    rendered_attr: str = "data-rendered"


class DomScanner:
    def __init__(self, document: BeautifulSoup, protocol: ContainerProtocol | None = None) -> None:
        self.document = document
        self.protocol = protocol or ContainerProtocol()

    def find_all(self) -> Iterator[Tag]:
        yield from self.document.select(f".{self.protocol.container_class}")

    def find_creatable(self) -> Iterator[Tag]:
        p = self.protocol
        yield from self.document.select(f".{p.container_class}:not([{p.rendered_attr}])")

    def extract_descriptor(self, container: Tag) -> ChartDescriptor:
        p = self.protocol
        kind_name = container.get(p.type_attr)
        if not kind_name:
            raise MalformedDescriptorError(f"missing {p.type_attr}", attribute=p.type_attr)
        try:
            kind = ChartKind(str(kind_name).strip())
        except ValueError:
            raise MalformedDescriptorError(f"unknown chart type '{kind_name}'", attribute=p.type_attr) from None

        raw = container.get(p.data_attr)
        if raw is None:
            raise MalformedDescriptorError(f"missing {p.data_attr}", attribute=p.data_attr)
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedDescriptorError(f"{p.data_attr} is not valid JSON: {e}", attribute=p.data_attr) from e
        if not isinstance(payload, dict):
            raise MalformedDescriptorError(f"{p.data_attr} must be a JSON object", attribute=p.data_attr)
        return ChartDescriptor(kind=kind, payload=payload)

    def surface_of(self, container: Tag) -> Tag:
        surface = container.select_one(f".{self.protocol.surface_class}")
        if surface is None:
            raise MissingSurfaceError(f"no .{self.protocol.surface_class} element in container")
        return surface

    def chart_id_of(self, container: Tag) -> Optional[str]:
        value = container.get(self.protocol.id_attr)
        return str(value) if value else None

    def is_rendered(self, container: Tag) -> bool:
        return container.has_attr(self.protocol.rendered_attr)

    def mark_rendered(self, container: Tag, identifier: str) -> None:
        container[self.protocol.id_attr] = identifier
        container[self.protocol.rendered_attr] = "true"

    def clear_marker(self, container: Tag) -> None:
        if container.has_attr(self.protocol.rendered_attr):
            del container[self.protocol.rendered_attr]

    def clear_all_markers(self) -> int:
        cleared = 0
        for container in self.find_all():
            if self.is_rendered(container):
                self.clear_marker(container)
                cleared += 1
        logger.debug("chart_markers_cleared", extra={"count": cleared})
        return cleared
