"""FastAPI application serving the auto-refreshing chart page."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import socket
import webbrowser
from datetime import datetime, timezone
from typing import AsyncIterator, Callable, Iterable, Optional, Sequence

from fastapi import FastAPI, Response
from fastapi.responses import HTMLResponse, PlainTextResponse, StreamingResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape
from uvicorn import Config, Server

from promg import settings
from promg.client import PrometheusClient
from promg.orchestrator import ChartJob, render_all

from . import TEMPLATES_DIR
from .reload import ReloadBroadcaster

LOGGER = logging.getLogger(__name__)

RELOAD_PATH = "/livereload"
ERROR_BODY = "Internal Server Error"

jinja_env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html", "xml"]),
)


def render_page(fragments: Iterable[str], *, live_reload: bool = False, title: str = "promg") -> str:
    """Wrap chart fragments into a standalone HTML document."""
    template = jinja_env.get_template("live.html")
    return template.render(
        title=title,
        fragments=list(fragments),
        live_reload=live_reload,
        reload_path=RELOAD_PATH,
        rendered_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"),
    )


def create_app(
    client: PrometheusClient,
    jobs: Sequence[ChartJob],
    reload_interval: float,
    broadcaster: Optional[ReloadBroadcaster] = None,
) -> FastAPI:
    """Build the live-mode app; every page load re-queries Prometheus."""
    channel = broadcaster or ReloadBroadcaster()

    @contextlib.asynccontextmanager
    async def lifespan(instance: FastAPI) -> AsyncIterator[None]:
        timer = asyncio.create_task(channel.run(reload_interval))
        instance.state.reload_timer = timer
        try:
            yield
        finally:
            timer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await timer

    app = FastAPI(title="promg live", lifespan=lifespan)
    app.state.reload = channel

    @app.get("/", response_class=HTMLResponse)
    async def index() -> Response:
        try:
            fragments = await render_all(client, jobs)
        except Exception:
            LOGGER.exception("Rendering live page failed")
            return PlainTextResponse(ERROR_BODY, status_code=500)
        return HTMLResponse(render_page(fragments, live_reload=True))

    @app.get(RELOAD_PATH, include_in_schema=False)
    async def livereload() -> StreamingResponse:
        async def _events() -> AsyncIterator[str]:
            async for tick in channel.subscribe():
                yield f"id: {tick}\ndata: reload\n\n"

        return StreamingResponse(
            _events(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache"},
        )

    return app


def bind_ephemeral(host: str = settings.LIVE_HOST) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind((host, 0))
    return sock


def start_live(
    app: FastAPI,
    *,
    host: str = settings.LIVE_HOST,
    open_browser: bool = True,
    on_bound: Optional[Callable[[str], None]] = None,
) -> None:
    """Serve ``app`` on an ephemeral port until interrupted."""
    sock = bind_ephemeral(host)
    port = sock.getsockname()[1]
    url = f"http://{host}:{port}/"
    if on_bound:
        on_bound(url)

    config = Config(
        app=app,
        log_level=settings.LIVE_LOG_LEVEL,
        timeout_graceful_shutdown=settings.LIVE_SHUTDOWN_TIMEOUT_S,
    )
    server = Server(config=config)

    async def _serve() -> None:
        if open_browser:
            asyncio.get_running_loop().call_later(0.5, webbrowser.open, url)
        await server.serve(sockets=[sock])

    try:
        asyncio.run(_serve())
    finally:
        sock.close()
