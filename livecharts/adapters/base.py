"""Adapter contract every drawing backend implements."""

from __future__ import annotations

from typing import Any, Protocol

from bs4 import BeautifulSoup, Tag

from ..models import Backend, ChartDescriptor


class ChartAdapter(Protocol):
    backend: Backend

    def create(self, target: Tag, descriptor: ChartDescriptor) -> Any:
        """Draw ``descriptor`` into ``target`` and return a live handle."""
        ...

    def update(self, handle: Any, descriptor: ChartDescriptor) -> None:
        """Redraw in place; the handle object stays the same."""
        ...

    def destroy(self, handle: Any) -> None:
        """Release the handle. Calling it twice is a no-op."""
        ...


def write_fragment(surface: Tag, html: str) -> None:
    """Replace the children of ``surface`` with the parsed ``html`` fragment."""
    surface.clear()
    fragment = BeautifulSoup(html, "html.parser")
    for node in list(fragment.contents):
        surface.append(node.extract())


def make_adapter(
    backend: Backend,
    *,
    value_prefix: str | None = None,
    include_plotlyjs: str | bool = "cdn",
) -> ChartAdapter:
    # backend libraries load on first selection
    if backend is Backend.PLOTLY:
        from .plotly_adapter import PlotlyAdapter

        return PlotlyAdapter(value_prefix=value_prefix, include_plotlyjs=include_plotlyjs)
    if backend is Backend.ALTAIR:
        from .altair_adapter import AltairAdapter

        return AltairAdapter(value_prefix=value_prefix)
    if backend is Backend.BOKEH:
        from .stub import BokehAdapter

        return BokehAdapter()
    raise ValueError(f"unhandled backend {backend!r}")
