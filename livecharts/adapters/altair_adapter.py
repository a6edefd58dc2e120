"""Altair backend: long-form rows rendered through vega-embed."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

import altair as alt
from bs4 import Tag

from ..models import Backend, ChartDescriptor, ChartKind
from .base import write_fragment
from .options import build_options, legend_position, value_prefix
from .payload import ChartData, parse_chart_data

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class AltairChart:
    surface: Tag = field(repr=False)
    kind: ChartKind
    chart: Any = field(default=None, repr=False)
    output_div: str = field(default_factory=lambda: f"vis-{uuid.uuid4().hex[:12]}")
    destroyed: bool = False


def _rows(kind: ChartKind, chart: ChartData) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for series in chart.series:
        if kind is ChartKind.SCATTER:
            rows.extend({"series": series.label, "x": x, "y": y} for x, y in series.values)
        else:
            rows.extend(
                {"series": series.label, "label": label, "value": value}
                for label, value in zip(chart.labels, series.values)
            )
    return rows


def _value_axis(options: dict[str, Any]) -> alt.Axis:
    prefix = value_prefix(options).replace("'", "\\'")
    if not prefix:
        return alt.Axis()
    return alt.Axis(labelExpr=f"'{prefix}' + format(datum.value, ',')")


def build_chart(kind: ChartKind, chart: ChartData, options: dict[str, Any]) -> alt.Chart:
    data = alt.Data(values=_rows(kind, chart))
    labels = list(chart.labels)
    tooltip = options["plugins"]["tooltip"]["enabled"]
    series = alt.Color("series:N", title=None)

    if kind is ChartKind.BAR:
        radius = options["elements"]["bar"]["borderRadius"]
        encoded = alt.Chart(data).mark_bar(cornerRadiusEnd=radius).encode(
            x=alt.X("label:N", sort=labels, title=None),
            y=alt.Y("value:Q", axis=_value_axis(options), title=None),
            xOffset="series:N",
            color=series,
        )
    elif kind.is_circular:
        inner = 50 if kind is ChartKind.DOUGHNUT else 0
        encoded = alt.Chart(data).mark_arc(innerRadius=inner).encode(
            theta="value:Q",
            color=alt.Color("label:N", sort=labels, title=None),
        )
        if len(chart.series) > 1:
            encoded = encoded.encode(column=alt.Column("series:N", title=None))
    elif kind is ChartKind.SCATTER:
        encoded = alt.Chart(data).mark_point(filled=True).encode(
            x=alt.X("x:Q", title=None),
            y=alt.Y("y:Q", axis=_value_axis(options), title=None),
            color=series,
        )
    else:
        if kind is ChartKind.RADAR:
            logger.debug("altair_radar_as_line")
            options = build_options(ChartKind.LINE, value_prefix=value_prefix(options))
        point = options["elements"]["point"]
        tension = options["elements"]["line"]["tension"]
        encoded = alt.Chart(data).mark_line(
            interpolate="monotone" if tension else "linear",
            point=alt.OverlayMarkDef(size=(point["radius"] * 2) ** 2),
        ).encode(
            x=alt.X("label:N", sort=labels, title=None),
            y=alt.Y("value:Q", axis=_value_axis(options), title=None),
            color=series,
        )

    if tooltip:
        fields = ["series:N", "x:Q", "y:Q"] if kind is ChartKind.SCATTER else ["series:N", "label:N", "value:Q"]
        encoded = encoded.encode(tooltip=fields)
    if options["responsive"] and not (kind.is_circular and len(chart.series) > 1):
        encoded = encoded.properties(width="container")

    legend = options["plugins"]["legend"]
    axis = options["scales"]["x"]
    return (
        encoded.properties(background="transparent")
        .configure_legend(
            disable=not legend["display"],
            orient=legend_position(options),
            labelColor=legend["labels"]["color"],
            labelFontSize=legend["labels"]["font"]["size"],
        )
        .configure_axis(
            grid=True,
            gridColor=axis["grid"]["color"],
            domain=axis["grid"]["drawBorder"],
            labelColor=axis["ticks"]["color"],
            labelFontSize=axis["ticks"]["font"]["size"],
        )
    )


class AltairAdapter:
    backend = Backend.ALTAIR

    def __init__(self, *, value_prefix: str | None = None) -> None:
        self.value_prefix = value_prefix

    def _build(self, descriptor: ChartDescriptor) -> alt.Chart:
        chart = parse_chart_data(descriptor)
        options = build_options(descriptor.kind, value_prefix=self.value_prefix)
        return build_chart(descriptor.kind, chart, options)

    def _embed(self, handle: AltairChart) -> None:
        html = handle.chart.to_html(output_div=handle.output_div, fullhtml=False)
        write_fragment(handle.surface, html)

    def create(self, target: Tag, descriptor: ChartDescriptor) -> AltairChart:
        handle = AltairChart(surface=target, kind=descriptor.kind, chart=self._build(descriptor))
        self._embed(handle)
        logger.debug("altair_chart_created", extra={"kind": descriptor.kind.value, "output_div": handle.output_div})
        return handle

    def update(self, handle: AltairChart, descriptor: ChartDescriptor) -> None:
        if handle.destroyed:
            return
        handle.chart = self._build(descriptor)
        handle.kind = descriptor.kind
        self._embed(handle)

    def destroy(self, handle: AltairChart) -> None:
        if handle.destroyed:
            return
        handle.surface.clear()
        handle.chart = None
        handle.destroyed = True
