from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from livecharts.adapters.plotly_adapter import PlotlyAdapter, build_layout
from livecharts.adapters.options import build_options
from livecharts.errors import ConfigurationError
from livecharts.models import ChartDescriptor, ChartKind

LINE = ChartDescriptor(
    kind=ChartKind.LINE,
    payload={"data": {"labels": ["A", "B"], "datasets": [{"label": "Balance", "data": [1, 2]}]}},
)


def surface():
    doc = BeautifulSoup('<div class="chart-canvas" id="c1"></div>', "html.parser")
    return doc.div


def test_create_embeds_figure_into_surface():
    target = surface()
    handle = PlotlyAdapter(include_plotlyjs=False).create(target, LINE)

    assert handle.figure is not None
    trace = handle.figure.data[0]
    assert trace.type == "scatter"
    assert list(trace.x) == ["A", "B"]
    assert trace.line.shape == "spline"
    assert trace.marker.size == 8
    assert target.find("div") is not None
    assert "Balance" in str(target)
    assert handle.figure.layout.yaxis.tickprefix == "$"


def test_update_keeps_handle_and_figure():
    target = surface()
    adapter = PlotlyAdapter(include_plotlyjs=False)
    handle = adapter.create(target, LINE)
    figure = handle.figure

    adapter.update(handle, LINE.with_payload({"data": {"labels": ["A", "B", "C"], "datasets": [{"data": [3, 2, 1]}, {"data": [1, 1, 1]}]}}))
    assert handle.figure is figure
    assert len(figure.data) == 2
    assert list(figure.data[0].y) == [3, 2, 1]


def test_destroy_is_idempotent():
    target = surface()
    adapter = PlotlyAdapter(include_plotlyjs=False)
    handle = adapter.create(target, LINE)
    adapter.destroy(handle)
    adapter.destroy(handle)
    assert handle.destroyed
    assert handle.figure is None
    assert target.contents == []
    adapter.update(handle, LINE)
    assert target.contents == []


def test_invalid_payload_names_field():
    descriptor = ChartDescriptor(kind=ChartKind.BAR, payload={"data": {"labels": ["A"], "datasets": [{"data": ["x"]}]}})
    with pytest.raises(ConfigurationError) as exc:
        PlotlyAdapter(include_plotlyjs=False).create(surface(), descriptor)
    assert exc.value.field == "data.datasets[0].data[0]"


@pytest.mark.parametrize(
    "kind, trace_type",
    [
        (ChartKind.BAR, "bar"),
        (ChartKind.PIE, "pie"),
        (ChartKind.DOUGHNUT, "pie"),
        (ChartKind.RADAR, "scatterpolar"),
    ],
)
def test_kinds_map_to_traces(kind, trace_type):
    descriptor = ChartDescriptor(kind=kind, payload=LINE.payload)
    handle = PlotlyAdapter(include_plotlyjs=False).create(surface(), descriptor)
    assert handle.figure.data[0].type == trace_type


def test_scatter_points():
    descriptor = ChartDescriptor(
        kind=ChartKind.SCATTER,
        payload={"data": {"datasets": [{"data": [{"x": 1, "y": 2}, {"x": 3, "y": 4}]}]}},
    )
    handle = PlotlyAdapter(include_plotlyjs=False).create(surface(), descriptor)
    assert list(handle.figure.data[0].x) == [1, 3]
    assert handle.figure.data[0].mode == "markers"


def test_layout_follows_kind_policy():
    bar = build_layout(ChartKind.BAR, build_options(ChartKind.BAR))
    assert bar.barcornerradius == 4
    assert bar.hovermode == "x unified"
    assert bar.legend.orientation == "h"

    doughnut = build_layout(ChartKind.DOUGHNUT, build_options(ChartKind.DOUGHNUT))
    assert doughnut.legend.orientation == "v"
    assert doughnut.hovermode == "closest"


def test_doughnut_has_hole():
    descriptor = ChartDescriptor(
        kind=ChartKind.DOUGHNUT,
        payload={"data": {"labels": ["Stocks", "Bonds"], "datasets": [{"data": [60, 40], "backgroundColor": ["#f00", "#0f0"]}]}},
    )
    handle = PlotlyAdapter(include_plotlyjs=False).create(surface(), descriptor)
    assert handle.figure.data[0].hole == 0.5
    assert list(handle.figure.data[0].marker.colors) == ["#f00", "#0f0"]


def test_line_accepts_per_point_border_colours():
    descriptor = ChartDescriptor(
        kind=ChartKind.LINE,
        payload={"data": {"labels": ["A", "B"], "datasets": [{"data": [1, 2], "borderColor": ["#111111", "#222222"]}]}},
    )
    trace = PlotlyAdapter(include_plotlyjs=False).create(surface(), descriptor).figure.data[0]
    assert trace.line.color == "#111111"
    assert list(trace.marker.color) == ["#111111", "#222222"]


def test_colour_plotly_rejects_is_a_configuration_error():
    descriptor = ChartDescriptor(
        kind=ChartKind.BAR,
        payload={"data": {"labels": ["A"], "datasets": [{"data": [1], "backgroundColor": "not-a-colour"}]}},
    )
    with pytest.raises(ConfigurationError) as exc:
        PlotlyAdapter(include_plotlyjs=False).create(surface(), descriptor)
    assert exc.value.field == "data"
