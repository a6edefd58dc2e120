"""Visual options shared by the drawing backends.

The vocabulary follows the chart payloads the page templates emit: a base
set of legend, tooltip and axis options composed with a per-kind override.
Adapters translate the composed options into their own library's terms.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from ..models import ChartKind, thaw

TEXT_COLOR = "#9CA3AF"
GRID_COLOR = "#374151"


def _axis(font_size: int, *, prefix: str = "") -> dict[str, Any]:
    return {
        "display": True,
        "grid": {"color": GRID_COLOR, "drawBorder": False},
        "ticks": {"color": TEXT_COLOR, "font": {"size": font_size}, "prefix": prefix},
    }


BASE_OPTIONS: Mapping[str, Any] = MappingProxyType(
    {
        "responsive": True,
        "maintainAspectRatio": False,
        "plugins": {
            "legend": {
                "display": True,
                "position": "top",
                "labels": {"color": TEXT_COLOR, "font": {"size": 12}},
            },
            "tooltip": {
                "enabled": True,
                "mode": "index",
                "intersect": False,
                "backgroundColor": "rgba(0, 0, 0, 0.8)",
                "titleColor": "#FFFFFF",
                "bodyColor": "#FFFFFF",
                "borderColor": GRID_COLOR,
                "borderWidth": 1,
            },
        },
        "scales": {
            "x": _axis(11),
            "y": _axis(11, prefix="$"),
        },
    }
)

_KIND_OVERRIDES: dict[ChartKind, dict[str, Any]] = {
    ChartKind.LINE: {
        "elements": {
            "point": {"radius": 4, "hoverRadius": 6},
            "line": {"tension": 0.4},
        }
    },
    ChartKind.BAR: {"elements": {"bar": {"borderRadius": 4}}},
    ChartKind.PIE: {"plugins": {"legend": {"position": "right"}}},
    ChartKind.DOUGHNUT: {"plugins": {"legend": {"position": "right"}}},
}


def merge_options(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge ``override`` onto a copy of ``base``; neither input is modified."""
    merged = thaw(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_options(current, value)
        else:
            merged[key] = thaw(value)
    return merged


def build_options(kind: ChartKind, *, value_prefix: str | None = None) -> dict[str, Any]:
    """Return the composed options for ``kind``.

    Same ``kind`` and ``value_prefix`` always produce an equal, fresh dict.
    """
    options = merge_options(BASE_OPTIONS, _KIND_OVERRIDES.get(kind, {}))
    if value_prefix is not None:
        options["scales"]["y"]["ticks"]["prefix"] = value_prefix
    return options


def legend_position(options: Mapping[str, Any]) -> str:
    return options["plugins"]["legend"]["position"]


def value_prefix(options: Mapping[str, Any]) -> str:
    return options["scales"]["y"]["ticks"].get("prefix", "")
