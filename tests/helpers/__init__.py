"""Shared helper utilities for the promg test-suite."""

from .data import matrix_payload, series, vector_payload
from .mocks import FakeHttpResponse, FakeSession

__all__ = [
    "matrix_payload",
    "series",
    "vector_payload",
    "FakeHttpResponse",
    "FakeSession",
]
