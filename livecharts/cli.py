from __future__ import annotations

"""Render every chart container of a static HTML page."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from bs4 import BeautifulSoup

from .config import load_renderer_config
from .service_layer.renderer import ChartRenderer


def _summary(renderer: ChartRenderer, page: Path) -> dict[str, Any]:
    containers = list(renderer.scanner.find_all())
    return {
        "page": str(page),
        "backend": renderer.backend.value,
        "containers": len(containers),
        "rendered": len(renderer),
        "skipped": sum(1 for c in containers if not renderer.scanner.is_rendered(c)),
        "charts": renderer.registry.describe(),
    }


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Render chart containers of an HTML page with a chart backend")
    p.add_argument("page", help="Path to the HTML page")
    p.add_argument("--backend", type=str, default=None, help="plotly, altair or bokeh (default from config)")
    p.add_argument("--output", "-o", type=str, default="", help="Write the rendered page here instead of stdout")
    p.add_argument("--summary", action="store_true", help="Print a JSON summary to stderr")
    p.add_argument("--log-level", type=str, default="WARNING")

    args = p.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s %(message)s")

    page = Path(args.page).expanduser().resolve()
    if not page.exists():
        print(f"Page not found: {page}", file=sys.stderr)  # noqa: T201
        return 1

    config = load_renderer_config(page.parent, backend=args.backend)
    document = BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")
    renderer = ChartRenderer(document, config=config)
    renderer.on_ready()

    html = str(renderer.document)
    summary = _summary(renderer, page)
    renderer.close()

    if args.output:
        Path(args.output).write_text(html, encoding="utf-8")
    else:
        print(html)  # noqa: T201

    if args.summary:
        print(json.dumps(summary, indent=2), file=sys.stderr)  # noqa: T201
    return 0


__all__ = ["main"]
