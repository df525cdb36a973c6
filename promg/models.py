"""Typed models for the Prometheus ``query_range`` API."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import ValueParseError

HIDDEN_LABELS = frozenset({"job"})


@dataclass(frozen=True)
class RangeQuery:
    """A PromQL expression evaluated over ``[start, end]`` every ``step`` seconds."""

    query: str
    start: int
    end: int
    step: int

    def form(self) -> Dict[str, str]:
        return {
            "query": self.query,
            "start": str(self.start),
            "end": str(self.end),
            "step": str(self.step),
        }


class Status(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class QueryResultType(str, Enum):
    MATRIX = "matrix"
    VECTOR = "vector"
    SCALAR = "scalar"
    STRING = "string"


class Sample(BaseModel):
    """One ``[timestamp, "value"]`` pair; the value is parsed lazily."""

    model_config = ConfigDict(frozen=True)

    timestamp: float
    value: str

    @model_validator(mode="before")
    @classmethod
    def _from_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError(f"expected a [timestamp, value] pair, got {len(data)} items")
            return {"timestamp": data[0], "value": data[1]}
        return data

    def number(self) -> float:
        try:
            parsed = float(self.value)
        except ValueError:
            raise ValueParseError(self.value, self.timestamp) from None
        if math.isnan(parsed):
            raise ValueParseError(self.value, self.timestamp)
        return parsed


class Metric(BaseModel):
    name: str = ""
    labels: Dict[str, str] = Field(default_factory=dict)

    def display(self) -> str:
        """Return ``name{k=v...}`` with ``job`` dropped and keys sorted."""
        shown = [f"{key}={value}" for key, value in sorted(self.labels.items()) if key not in HIDDEN_LABELS]
        if not shown:
            return self.name
        return f"{self.name}{{{''.join(shown)}}}"

    def __str__(self) -> str:
        return self.display()


class QueryResult(BaseModel):
    metric: Metric
    values: List[Sample] = Field(default_factory=list)

    @field_validator("metric", mode="before")
    @classmethod
    def _split_name(cls, value: Any) -> Any:
        if isinstance(value, dict):
            labels = dict(value)
            return {"name": labels.pop("__name__", ""), "labels": labels}
        return value


class Data(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    result_type: QueryResultType = Field(..., alias="resultType")
    result: List[QueryResult] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _drop_non_matrix(cls, data: Any) -> Any:
        # Only matrix results are modelled; other shapes keep just their type
        # so the client can reject them by name.
        if not isinstance(data, dict):
            return data
        kind = data.get("resultType", data.get("result_type"))
        if kind != QueryResultType.MATRIX:
            return {key: value for key, value in data.items() if key != "result"}
        return data


class Response(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Status
    data: Optional[Data] = None
    error_type: Optional[str] = Field(None, alias="errorType")
    error: Optional[str] = None
