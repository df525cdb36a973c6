"""Concurrent fetch-and-render of every configured chart."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from .client import PrometheusClient
from .errors import ArgumentError
from .models import RangeQuery
from .render import render_fragment

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartJob:
    title: str
    query: RangeQuery


def build_jobs(
    queries: Sequence[str],
    titles: Optional[Sequence[str]],
    *,
    start: int,
    end: int,
    step: int,
) -> List[ChartJob]:
    """Pair every query with its title; untitled queries are titled by themselves."""
    if not queries:
        raise ArgumentError("at least one --query is required")
    if step < 1:
        raise ArgumentError(f"--step must be at least 1 second, got {step}")
    titles = list(titles or [])
    if titles and len(titles) != len(queries):
        raise ArgumentError(f"got {len(titles)} --title values for {len(queries)} --query values; counts must match")
    if not titles:
        titles = list(queries)
    return [
        ChartJob(title=title, query=RangeQuery(query=query, start=start, end=end, step=step))
        for title, query in zip(titles, queries)
    ]


async def run_in_executor(func: Callable[..., Any], *args: Any, loop: Optional[asyncio.AbstractEventLoop] = None) -> Any:
    loop = loop or asyncio.get_running_loop()
    return await loop.run_in_executor(None, lambda: func(*args))


async def fetch_and_render(client: PrometheusClient, job: ChartJob) -> str:
    response = await run_in_executor(client.query_range, job.query)
    result = response.data.result if response.data else []
    LOGGER.info("Fetched %d series for %r", len(result), job.title)
    return render_fragment(job.title, result)


async def run_batch(client: PrometheusClient, jobs: Sequence[ChartJob], emit: Callable[[str], None]) -> int:
    """Emit each fragment as soon as it is ready; the first failure aborts the rest."""
    tasks = [asyncio.ensure_future(fetch_and_render(client, job)) for job in jobs]
    emitted = 0
    try:
        for next_done in asyncio.as_completed(tasks):
            emit(await next_done)
            emitted += 1
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    return emitted


async def render_all(client: PrometheusClient, jobs: Sequence[ChartJob]) -> List[str]:
    """Render every job concurrently, returning fragments in job order."""
    return list(await asyncio.gather(*(fetch_and_render(client, job) for job in jobs)))
