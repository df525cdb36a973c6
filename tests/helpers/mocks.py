"""Mock implementations used by the pytest suite."""

from __future__ import annotations

import threading
import time
from typing import Any, Dict, List, Optional, Union

import requests

__all__ = [
    "FakeHttpResponse",
    "FakeSession",
]


class FakeHttpResponse:
    """Minimal response object for mocked HTTP calls."""

    def __init__(self, payload: Any, status_code: int = 200, text: Optional[str] = None) -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else ("" if isinstance(payload, (dict, list)) else str(payload))

    def json(self) -> Any:
        if not isinstance(self._payload, (dict, list)):
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


Reply = Union[FakeHttpResponse, Exception]


class FakeSession:
    """Stand-in for ``requests.Session`` answering per PromQL query.

    ``routes`` maps a query string to a response or an exception to raise;
    ``delays`` holds per-query sleeps used to force completion order.
    """

    def __init__(
        self,
        routes: Optional[Dict[str, Reply]] = None,
        *,
        default: Optional[Reply] = None,
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        self.routes = dict(routes or {})
        self.default = default
        self.delays = dict(delays or {})
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def post(self, url: str, data: Optional[Dict[str, str]] = None, timeout: Optional[float] = None, **_: Any) -> FakeHttpResponse:
        data = dict(data or {})
        with self._lock:
            self.calls.append({"url": url, "data": data, "timeout": timeout})
        query = data.get("query", "")
        delay = self.delays.get(query)
        if delay:
            time.sleep(delay)
        reply = self.routes.get(query, self.default)
        if reply is None:
            raise requests.ConnectionError(f"no route for {query!r}")
        if isinstance(reply, Exception):
            raise reply
        return reply
