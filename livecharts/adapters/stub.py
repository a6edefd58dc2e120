"""Placeholder backend that satisfies the adapter contract without drawing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bs4 import Tag

from ..models import Backend, ChartDescriptor

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class StubChart:
    surface: Tag = field(repr=False)
    descriptor: ChartDescriptor
    destroyed: bool = False


class BokehAdapter:
    backend = Backend.BOKEH

    def create(self, target: Tag, descriptor: ChartDescriptor) -> StubChart:
        logger.info("backend_not_implemented", extra={"backend": self.backend.value})
        return StubChart(surface=target, descriptor=descriptor)

    def update(self, handle: StubChart, descriptor: ChartDescriptor) -> None:
        if not handle.destroyed:
            handle.descriptor = descriptor

    def destroy(self, handle: StubChart) -> None:
        handle.destroyed = True
