"""Exception types raised while scanning, creating and switching charts."""

from __future__ import annotations


class ChartError(Exception):
    """Base class for every failure the chart lifecycle recovers from."""


class MalformedDescriptorError(ChartError):
    """Container configuration is not well-formed structured data."""

    def __init__(self, message: str, *, attribute: str | None = None) -> None:
        super().__init__(message)
        self.attribute = attribute


class ConfigurationError(ChartError):
    """Descriptor parsed but is not valid for its chart kind."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class MissingSurfaceError(ChartError):
    """Container has no element to draw into."""


class UnknownBackendError(ChartError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Chart backend '{name}' not supported")
        self.name = name
