"""
Lifelog Query Schemas

Routing types (request-scoped dataclasses) and answer-layer models (pydantic).
"""

from .query import (
    Intent,
    DataType,
    Strategy,
    AggregationOp,
    TimestampRepresentation,
    DateRange,
    RoutingDecision,
)
from .context import SourceItem, RoutingMetadata, AssembledContext

__all__ = [
    "Intent",
    "DataType",
    "Strategy",
    "AggregationOp",
    "TimestampRepresentation",
    "DateRange",
    "RoutingDecision",
    "SourceItem",
    "RoutingMetadata",
    "AssembledContext",
]
