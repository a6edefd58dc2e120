"""Identifier helpers for chart surfaces without an ``id``."""

from __future__ import annotations

import secrets
import time


def mint_chart_id(prefix: str = "chart") -> str:
    """Return ``<prefix>-<epoch ms>-<random hex>``; unique per call in practice."""
    return f"{prefix}-{int(time.time() * 1000)}-{secrets.token_hex(4)}"
