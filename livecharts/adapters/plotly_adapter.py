"""Plotly backend: builds a Figure per container and embeds its HTML."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import plotly.graph_objects as go
import plotly.io as pio
from bs4 import Tag

from ..errors import ConfigurationError
from ..models import Backend, ChartDescriptor, ChartKind
from .base import write_fragment
from .options import build_options, legend_position, value_prefix
from .payload import ChartData, Series, parse_chart_data

logger = logging.getLogger(__name__)

# plotly spline smoothing spans 0..1.3 where chart tension spans 0..1
_SMOOTHING_SCALE = 1.3


@dataclass(eq=False)
class PlotlyChart:
    surface: Tag = field(repr=False)
    kind: ChartKind
    figure: go.Figure | None = field(default=None, repr=False)
    destroyed: bool = False


def _first_color(color: str | tuple[str, ...] | None) -> str | None:
    if isinstance(color, tuple):
        return color[0] if color else None
    return color


def _marker_color(color: str | tuple[str, ...] | None) -> str | list[str] | None:
    return list(color) if isinstance(color, tuple) else color


def _legend(options: dict[str, Any]) -> dict[str, Any]:
    legend = options["plugins"]["legend"]
    font = {"color": legend["labels"]["color"], "size": legend["labels"]["font"]["size"]}
    if legend_position(options) == "right":
        return {"orientation": "v", "x": 1.02, "xanchor": "left", "y": 1, "font": font}
    return {"orientation": "h", "x": 0, "y": 1.02, "yanchor": "bottom", "font": font}


def _axis(axis: dict[str, Any], *, prefix: str = "") -> dict[str, Any]:
    return {
        "visible": axis["display"],
        "showgrid": True,
        "gridcolor": axis["grid"]["color"],
        "showline": axis["grid"]["drawBorder"],
        "tickfont": {"color": axis["ticks"]["color"], "size": axis["ticks"]["font"]["size"]},
        "tickprefix": prefix,
    }


def build_layout(kind: ChartKind, options: dict[str, Any]) -> go.Layout:
    tooltip = options["plugins"]["tooltip"]
    layout: dict[str, Any] = {
        "autosize": options["responsive"],
        "showlegend": options["plugins"]["legend"]["display"],
        "legend": _legend(options),
        "paper_bgcolor": "rgba(0,0,0,0)",
        "plot_bgcolor": "rgba(0,0,0,0)",
        "hoverlabel": {
            "bgcolor": tooltip["backgroundColor"],
            "bordercolor": tooltip["borderColor"],
            "font": {"color": tooltip["bodyColor"]},
        },
    }
    if not tooltip["enabled"]:
        layout["hovermode"] = False
    elif tooltip["mode"] == "index" and not tooltip["intersect"] and not kind.is_circular:
        layout["hovermode"] = "x unified"
    else:
        layout["hovermode"] = "closest"

    if not kind.is_circular and kind is not ChartKind.RADAR:
        scales = options["scales"]
        layout["xaxis"] = _axis(scales["x"])
        layout["yaxis"] = _axis(scales["y"], prefix=value_prefix(options))
    if kind is ChartKind.BAR:
        layout["barcornerradius"] = options["elements"]["bar"]["borderRadius"]
    return go.Layout(**layout)


def _line_trace(series: Series, labels: tuple[str, ...], options: dict[str, Any]) -> go.Scatter:
    elements = options["elements"]
    return go.Scatter(
        x=list(labels),
        y=list(series.values),
        name=series.label,
        mode="lines+markers",
        line={
            "shape": "spline",
            "smoothing": round(elements["line"]["tension"] * _SMOOTHING_SCALE, 2),
            "color": _first_color(series.border_color),
        },
        marker={"size": elements["point"]["radius"] * 2, "color": _marker_color(series.border_color)},
    )


def build_traces(kind: ChartKind, chart: ChartData, options: dict[str, Any]) -> list[Any]:
    labels = chart.labels
    traces: list[Any] = []
    count = len(chart.series)
    for i, series in enumerate(chart.series):
        if kind is ChartKind.LINE:
            traces.append(_line_trace(series, labels, options))
        elif kind is ChartKind.BAR:
            traces.append(
                go.Bar(x=list(labels), y=list(series.values), name=series.label, marker_color=_marker_color(series.color))
            )
        elif kind.is_circular:
            # one ring per dataset, laid out side by side
            traces.append(
                go.Pie(
                    labels=list(labels),
                    values=list(series.values),
                    name=series.label,
                    hole=0.5 if kind is ChartKind.DOUGHNUT else 0,
                    marker={"colors": list(series.color)} if isinstance(series.color, tuple) else None,
                    domain={"x": [i / count, (i + 1) / count]},
                )
            )
        elif kind is ChartKind.SCATTER:
            traces.append(
                go.Scatter(
                    x=[x for x, _ in series.values],
                    y=[y for _, y in series.values],
                    name=series.label,
                    mode="markers",
                    marker_color=_marker_color(series.color),
                )
            )
        elif kind is ChartKind.RADAR:
            traces.append(
                go.Scatterpolar(r=list(series.values), theta=list(labels), name=series.label, fill="toself")
            )
    return traces


class PlotlyAdapter:
    backend = Backend.PLOTLY

    def __init__(self, *, value_prefix: str | None = None, include_plotlyjs: str | bool = "cdn") -> None:
        self.value_prefix = value_prefix
        self.include_plotlyjs = include_plotlyjs

    def _draw(self, figure: go.Figure, descriptor: ChartDescriptor) -> None:
        chart = parse_chart_data(descriptor)
        options = build_options(descriptor.kind, value_prefix=self.value_prefix)
        try:
            traces = build_traces(descriptor.kind, chart, options)
            layout = build_layout(descriptor.kind, options)
        except ValueError as e:
            # plotly rejects values its schema does not accept, e.g. unknown colours
            raise ConfigurationError("data", str(e)) from e
        figure.data = []
        figure.add_traces(traces)
        figure.layout = layout

    def _embed(self, handle: PlotlyChart) -> None:
        html = pio.to_html(
            handle.figure,
            include_plotlyjs=self.include_plotlyjs,
            full_html=False,
            config={"responsive": True, "displaylogo": False},
        )
        write_fragment(handle.surface, html)

    def create(self, target: Tag, descriptor: ChartDescriptor) -> PlotlyChart:
        figure = go.Figure()
        self._draw(figure, descriptor)
        handle = PlotlyChart(surface=target, kind=descriptor.kind, figure=figure)
        self._embed(handle)
        logger.debug("plotly_chart_created", extra={"kind": descriptor.kind.value, "traces": len(figure.data)})
        return handle

    def update(self, handle: PlotlyChart, descriptor: ChartDescriptor) -> None:
        if handle.destroyed or handle.figure is None:
            return
        self._draw(handle.figure, descriptor)
        handle.kind = descriptor.kind
        self._embed(handle)

    def destroy(self, handle: PlotlyChart) -> None:
        if handle.destroyed:
            return
        handle.surface.clear()
        handle.figure = None
        handle.destroyed = True
