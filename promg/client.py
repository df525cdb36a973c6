"""HTTP client for the Prometheus range-query endpoint."""
from __future__ import annotations

import logging
from typing import Optional

import requests
from pydantic import ValidationError

from . import settings
from .errors import DecodeError, QueryError, TransportError, UnsupportedResultTypeError
from .models import QueryResultType, RangeQuery, Response, Status

logger = logging.getLogger(__name__)

_BODY_EXCERPT = 200


class PrometheusClient:
    """Thin wrapper around ``POST /api/v1/query_range``."""

    def __init__(
        self,
        endpoint: str = settings.DEFAULT_ENDPOINT,
        *,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.endpoint}{settings.QUERY_RANGE_PATH}"

    def query_range(self, query: RangeQuery) -> Response:
        """Run ``query`` and return the parsed matrix response."""
        logger.debug("POST %s query=%r start=%s end=%s step=%s", self.url, query.query, query.start, query.end, query.step)
        try:
            resp = self.session.post(self.url, data=query.form(), timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Prometheus request to %s failed: %s", self.url, exc)
            raise TransportError(f"request to {self.url} failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            excerpt = (resp.text or "")[:_BODY_EXCERPT]
            logger.warning("Prometheus returned HTTP %s for %r", resp.status_code, query.query)
            raise TransportError(f"{self.url} returned HTTP {resp.status_code}: {excerpt}", status=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise DecodeError(f"response from {self.url} is not JSON: {exc}") from exc

        try:
            response = Response.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(f"unexpected response shape from {self.url}: {exc}") from exc

        if response.status is Status.ERROR:
            raise QueryError(response.error_type, response.error)
        if response.data is None:
            raise DecodeError(f"response from {self.url} carries no data")
        if response.data.result_type is not QueryResultType.MATRIX:
            raise UnsupportedResultTypeError(response.data.result_type.value)
        return response
