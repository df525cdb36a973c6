from __future__ import annotations

import asyncio
import contextlib
import tempfile
import webbrowser
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv

from promg import settings
from promg.client import PrometheusClient
from promg.errors import ArgumentError, PromgError
from promg.orchestrator import ChartJob, build_jobs, run_batch

from .common import configure_logging, console

load_dotenv()

app = typer.Typer(help="Generate line charts from Prometheus range queries.", add_completion=False)


def _build_client(endpoint: str) -> PrometheusClient:
    return PrometheusClient(endpoint)


def _open_page(fragments: List[str]) -> Path:
    from ui.server import render_page

    handle = tempfile.NamedTemporaryFile("w", suffix=".html", prefix="promg-", delete=False, encoding="utf-8")
    with handle:
        handle.write(render_page(fragments))
    path = Path(handle.name)
    webbrowser.open(path.as_uri())
    return path


def _run_html(client: PrometheusClient, jobs: List[ChartJob], open_browser: bool) -> None:
    fragments: List[str] = []

    def _emit(fragment: str) -> None:
        fragments.append(fragment)
        typer.echo(fragment)

    asyncio.run(run_batch(client, jobs, _emit))
    if open_browser:
        path = _open_page(fragments)
        console().print(f"Opened {path}", markup=False, highlight=False)


def _run_live(client: PrometheusClient, jobs: List[ChartJob], step: int, open_browser: bool) -> None:
    from ui.server import create_app, start_live

    server_app = create_app(client, jobs, reload_interval=step / 2)

    def _announce(url: str) -> None:
        console().print(f"Serving {len(jobs)} chart(s) on {url} (Ctrl-C to stop)", markup=False, highlight=False)

    # uvicorn may re-raise the captured SIGINT once it has shut down
    with contextlib.suppress(KeyboardInterrupt):
        start_live(server_app, open_browser=open_browser, on_bound=_announce)
    console().print("Shutting down")


@app.command()
def main(
    query: List[str] = typer.Option(..., "--query", "-q", help="PromQL range query; repeat for several charts."),
    title: Optional[List[str]] = typer.Option(None, "--title", "-t", help="Chart title, one per --query."),
    endpoint: str = typer.Option(settings.DEFAULT_ENDPOINT, "--endpoint", "-e", envvar="PROMG_ENDPOINT", help="Prometheus server endpoint."),
    start: Optional[int] = typer.Option(None, "--start", min=0, help="Range start (unix seconds). Defaults to 24h ago."),
    end: Optional[int] = typer.Option(None, "--end", min=0, help="Range end (unix seconds). Defaults to now."),
    step: int = typer.Option(settings.DEFAULT_STEP, "--step", "-s", envvar="PROMG_STEP", help="Range query step in seconds."),
    html: bool = typer.Option(False, "--html", help="Print embeddable chart markup to stdout (default)."),
    live: bool = typer.Option(False, "--live", help="Serve an auto-refreshing page and open it in the browser."),
    open_browser: bool = typer.Option(False, "--open", help="With --html, also open the charts in the browser."),
    no_browser: bool = typer.Option(False, "--no-browser", help="With --live, do not open the browser."),
    log_level: str = typer.Option("WARNING", "--log-level", envvar="PROMG_LOG_LEVEL", help="Console log level."),
) -> None:
    """Chart one or more Prometheus range queries."""
    configure_logging(log_level)
    try:
        if html and live:
            raise ArgumentError("--html and --live are mutually exclusive")
        jobs = build_jobs(
            query,
            title,
            start=settings.DEFAULT_START if start is None else start,
            end=settings.DEFAULT_END if end is None else end,
            step=step,
        )
        client = _build_client(endpoint)
        if live:
            _run_live(client, jobs, step, open_browser=not no_browser)
        else:
            _run_html(client, jobs, open_browser)
    except PromgError as exc:
        console().print(f"promg encountered an error: {exc}", markup=False, highlight=False)
        raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    app()
