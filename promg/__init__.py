"""Chart Prometheus range queries as SVG fragments or a live page."""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = ["__version__"]
