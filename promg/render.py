"""Line-chart rendering for range-query results."""
from __future__ import annotations

import html
import io
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Sequence, Tuple

import matplotlib
import matplotlib.dates as mdates
from matplotlib.figure import Figure

from .models import QueryResult

FIGSIZE_IN = (8.0, 4.5)
VIEWBOX = "0 0 576 324"

_SVG_RC = {
    "svg.fonttype": "none",
    "svg.hashsalt": "promg",
}


@dataclass
class ChartSeries:
    label: str
    points: List[Tuple[float, float]] = field(default_factory=list)


def build_series(results: Iterable[QueryResult]) -> List[ChartSeries]:
    """Convert query results into plot-ready series.

    Points keep upstream order. A single unparseable value fails the whole
    conversion with :class:`~promg.errors.ValueParseError`.
    """
    series: List[ChartSeries] = []
    for result in results:
        points = [(sample.timestamp, sample.number()) for sample in result.values]
        series.append(ChartSeries(label=result.metric.display(), points=points))
    return series


def _plain_text(text: str) -> str:
    # matplotlib treats paired dollars as mathtext
    return text.replace("$", r"\$")


def _strip_prolog(svg: str) -> str:
    start = svg.find("<svg")
    return svg[start:] if start >= 0 else svg


def render_chart(title: str, series: Sequence[ChartSeries]) -> str:
    """Draw ``series`` as connected lines and return an inline ``<svg>``."""
    fig = Figure(figsize=FIGSIZE_IN)
    ax = fig.add_subplot()
    handles, labels = [], []
    for item in series:
        xs = [datetime.fromtimestamp(ts, tz=timezone.utc) for ts, _ in item.points]
        ys = [value for _, value in item.points]
        (line,) = ax.plot(xs, ys, linestyle="-", linewidth=1.2)
        if item.label:
            handles.append(line)
            labels.append(_plain_text(item.label))

    locator = mdates.AutoDateLocator()
    ax.xaxis.set_major_locator(locator)
    ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(locator, tz=timezone.utc))
    ax.autoscale(enable=True)
    ax.grid(True, linewidth=0.3, alpha=0.6)
    ax.set_title(_plain_text(title), fontsize=10)
    # explicit handles keep labels such as "_foo" that legend() would hide
    if handles:
        ax.legend(handles, labels, loc="upper left", fontsize=7, frameon=False)

    buffer = io.StringIO()
    with matplotlib.rc_context(_SVG_RC):
        fig.savefig(buffer, format="svg", metadata={"Date": None})
    return _strip_prolog(buffer.getvalue())


def render_fragment(title: str, results: Iterable[QueryResult]) -> str:
    """Render ``results`` as an embeddable ``<figure>`` tagged with ``title``."""
    svg = render_chart(title, build_series(results))
    escaped = html.escape(title, quote=True)
    return (
        f'<figure class="promg-chart" data-title="{escaped}">'
        f"{svg}"
        f"<figcaption>{escaped}</figcaption>"
        "</figure>"
    )
