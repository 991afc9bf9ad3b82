"""
Query Routing Types

Request-scoped types shared by the analyzer, temporal parser, router and
executors. Nothing here is persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class Intent(str, Enum):
    """Primary intent of a question"""
    COUNT = "count"  # "How many voice notes yesterday?"
    AGGREGATION = "aggregation"  # "Total steps this week?"
    COMPARISON = "comparison"  # "Badminton this week vs last week"
    PATTERN = "pattern"  # "When do I usually go to the gym?"
    OTHER = "other"  # Catch-all


class DataType(str, Enum):
    """Kinds of personal data a question can be scoped to"""
    HEALTH = "health"
    LOCATION = "location"
    VOICE = "voice"
    PHOTO = "photo"
    TEXT = "text"
    EVENT = "event"


class Strategy(str, Enum):
    """How a question is answered"""
    DIRECT_COUNT = "DIRECT_COUNT"
    DIRECT_AGGREGATION = "DIRECT_AGGREGATION"
    DIRECT_COMPARISON = "DIRECT_COMPARISON"
    DIRECT_PATTERN = "DIRECT_PATTERN"
    VECTOR_SEARCH = "VECTOR_SEARCH"

    @property
    def is_direct(self) -> bool:
        return self is not Strategy.VECTOR_SEARCH

    @property
    def direct_query_type(self) -> Optional[str]:
        """Short name reported to the answer layer ("count", "pattern", ...)"""
        if not self.is_direct:
            return None
        return self.value[len("DIRECT_"):].lower()


class AggregationOp(str, Enum):
    """Numeric reductions supported by the aggregation executor"""
    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"


class TimestampRepresentation(str, Enum):
    """Encodings historically used for a record's creation time"""
    STRING = "string"  # ISO-8601 text, e.g. "2026-10-13T12:00:00.000Z"
    NATIVE = "native"  # store-native timestamp type


@dataclass(frozen=True)
class DateRange:
    """Closed UTC interval [start, end]"""
    start: datetime
    end: datetime
    label: Optional[str] = None  # matched phrase, e.g. "yesterday"

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("DateRange bounds must be timezone-aware")
        if self.start > self.end:
            raise ValueError(f"DateRange start {self.start} is after end {self.end}")

    def describe(self) -> str:
        """Human-readable span used in logs and assembled context"""
        start = self.start.strftime("%Y-%m-%d")
        end = self.end.strftime("%Y-%m-%d")
        span = start if start == end else f"{start} to {end}"
        if self.label:
            return f"{self.label} ({span})"
        return span


@dataclass
class RoutingDecision:
    """Exactly one strategy per question, plus what the executors need"""
    strategy: Strategy
    intent: Intent = Intent.OTHER
    data_type: Optional[DataType] = None
    date_range: Optional[DateRange] = None
    activity: Optional[str] = None  # canonical activity tag, e.g. "badminton"
    aggregation: Optional[AggregationOp] = None
    metric: Optional[str] = None  # health sub-metric, e.g. "steps"
    comparison_ranges: Optional[Tuple[DateRange, DateRange]] = None
    top_k: int = 10
    language: Optional[str] = None  # diagnostic only
    reasons: list = field(default_factory=list)

    @property
    def is_direct(self) -> bool:
        return self.strategy.is_direct
