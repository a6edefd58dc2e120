from __future__ import annotations

"""Config loading for livecharts defaults.

Supports a project-level TOML file and environment variable overrides.

Priority: CLI > env vars > config file > code defaults.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from .dom.scanner import ContainerProtocol
from .errors import UnknownBackendError
from .models import Backend

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".livecharts.toml", "livecharts.toml")


@dataclass(frozen=True)
class RendererConfig:
    backend: Backend = Backend.PLOTLY
    include_plotlyjs: str | bool = "cdn"
    value_prefix: Optional[str] = None
    protocol: ContainerProtocol = field(default_factory=ContainerProtocol)


def _find_project_root(start: Path) -> Path:
    cur = start.resolve()
    for p in [cur] + list(cur.parents):
        if (p / ".git").exists() or (p / "pyproject.toml").exists():
            return p
    return cur


def _load_toml(path: Path) -> dict[str, Any]:
    import tomllib

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("config_unreadable", extra={"path": str(path), "error": str(e)})
        return {}


def load_config_file(start: Path) -> dict[str, Any]:
    root = _find_project_root(start)
    for c in (root / name for name in CONFIG_FILENAMES):
        if c.exists():
            cfg = _load_toml(c)
            if isinstance(cfg, dict):
                return cfg.get("livecharts", cfg)
    return {}


def env_override_str(env_name: str, default: Optional[str]) -> Optional[str]:
    val = os.getenv(env_name)
    if val is None:
        return default
    return val.strip()


def _plotlyjs_mode(value: Any) -> str | bool:
    if isinstance(value, bool):
        return value
    v = str(value).strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return v


def load_renderer_config(start: Path | None = None, *, backend: str | None = None) -> RendererConfig:
    """Build a RendererConfig from file, env and an optional CLI backend."""
    cfg = load_config_file(start or Path.cwd())
    defaults = RendererConfig()

    backend_name = backend or env_override_str("LIVECHARTS_BACKEND", cfg.get("backend"))
    selected = defaults.backend
    if backend_name:
        try:
            selected = Backend.parse(backend_name)
        except UnknownBackendError:
            logger.warning("config_unknown_backend", extra={"backend": backend_name, "fallback": selected.value})

    plotlyjs = env_override_str("LIVECHARTS_INCLUDE_PLOTLYJS", None)
    include_plotlyjs = _plotlyjs_mode(plotlyjs if plotlyjs is not None else cfg.get("include_plotlyjs", "cdn"))

    prefix = env_override_str("LIVECHARTS_VALUE_PREFIX", cfg.get("value_prefix"))

    protocol = ContainerProtocol()
    protocol_cfg = cfg.get("protocol")
    if isinstance(protocol_cfg, dict):
        known = {f.name for f in fields(ContainerProtocol)}
        protocol = ContainerProtocol(**{k: str(v) for k, v in protocol_cfg.items() if k in known})

    return RendererConfig(
        backend=selected,
        include_plotlyjs=include_plotlyjs,
        value_prefix=prefix,
        protocol=protocol,
    )
