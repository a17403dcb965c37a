"""Vector store boundary types."""

from dataclasses import dataclass, field
from typing import Any

PointId = str | int


@dataclass
class VectorPoint:
    """A point to upsert: identifier, embedding and payload."""

    id: PointId
    vector: list[float]
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass
class ScoredPoint:
    """A nearest-neighbour hit returned by a vector search."""

    id: PointId
    score: float
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass
class StoredPoint:
    """A point returned by a scroll, without vector or score."""

    id: PointId
    payload: dict[str, Any] = field(default_factory=dict)
