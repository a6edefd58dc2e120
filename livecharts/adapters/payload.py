"""Validation of chart payloads into backend-neutral series."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Any, Mapping, Sequence

from ..errors import ConfigurationError
from ..models import ChartDescriptor, ChartKind


@dataclass(frozen=True)
class Series:
    label: str
    values: tuple[Any, ...]
    color: str | tuple[str, ...] | None = None
    border_color: str | tuple[str, ...] | None = None


@dataclass(frozen=True)
class ChartData:
    labels: tuple[str, ...]
    series: tuple[Series, ...]


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _check_color(value: Any, field: str) -> str | tuple[str, ...] | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, Sequence) and all(isinstance(c, str) for c in value):
        return tuple(value)
    raise ConfigurationError(field, "expected a colour string or a list of colour strings")


def _check_value(kind: ChartKind, value: Any, field: str) -> Any:
    if kind is ChartKind.SCATTER:
        if not isinstance(value, Mapping):
            raise ConfigurationError(field, "scatter points must be objects with 'x' and 'y'")
        for axis in ("x", "y"):
            if not _is_number(value.get(axis)):
                raise ConfigurationError(f"{field}.{axis}", "expected a number")
        return (value["x"], value["y"])
    if value is not None and not _is_number(value):
        raise ConfigurationError(field, f"expected a number or null, got {type(value).__name__}")
    return value


def parse_chart_data(descriptor: ChartDescriptor) -> ChartData:
    """Validate ``descriptor.payload`` and return its labels and series.

    Raises:
        ConfigurationError: naming the first offending field, e.g.
            ``data.datasets[1].data[0]``.
    """
    if not isinstance(descriptor.payload, Mapping):
        raise ConfigurationError("payload", f"expected an object, got {type(descriptor.payload).__name__}")
    data = descriptor.payload.get("data")
    if not isinstance(data, Mapping):
        raise ConfigurationError("data", "expected an object with 'labels' and 'datasets'")

    raw_labels = data.get("labels", ())
    if not isinstance(raw_labels, Sequence) or isinstance(raw_labels, str):
        raise ConfigurationError("data.labels", "expected a list")
    labels = tuple(str(label) for label in raw_labels)

    datasets = data.get("datasets")
    if not isinstance(datasets, Sequence) or isinstance(datasets, str):
        raise ConfigurationError("data.datasets", "expected a list")

    series: list[Series] = []
    for i, dataset in enumerate(datasets):
        field = f"data.datasets[{i}]"
        if not isinstance(dataset, Mapping):
            raise ConfigurationError(field, "expected an object")
        values = dataset.get("data")
        if not isinstance(values, Sequence) or isinstance(values, str):
            raise ConfigurationError(f"{field}.data", "expected a list")
        checked = tuple(_check_value(descriptor.kind, v, f"{field}.data[{j}]") for j, v in enumerate(values))
        if descriptor.kind is not ChartKind.SCATTER and labels and len(checked) > len(labels):
            raise ConfigurationError(f"{field}.data", f"{len(checked)} values for {len(labels)} labels")
        series.append(
            Series(
                label=str(dataset.get("label") or f"Series {i + 1}"),
                values=checked,
                color=_check_color(dataset.get("backgroundColor"), f"{field}.backgroundColor"),
                border_color=_check_color(dataset.get("borderColor"), f"{field}.borderColor"),
            )
        )
    if not labels and descriptor.kind is not ChartKind.SCATTER:
        # unlabelled categories are numbered from 1
        longest = max((len(s.values) for s in series), default=0)
        labels = tuple(str(n) for n in range(1, longest + 1))
    return ChartData(labels=labels, series=tuple(series))
