"""
Direct Query Executors

Exact answers computed against the structured store. Every executor reads
through the DualDateQueryMerger, so records are counted once regardless of
how their creation time was encoded, and every executor returns up to
max_sources SourceItems (most recent first, score 1.0) so provenance has the
same shape as the vector path's.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..common.config import RouterConfig, StoreConfig
from ..common.firestore_store import StoreRecord, parse_timestamp
from ..common.schemas.context import SourceItem
from ..common.schemas.query import (
    AggregationOp,
    DataType,
    DateRange,
    RoutingDecision,
    Strategy,
)
from .date_merger import DualDateQueryMerger

logger = logging.getLogger("lifelog.router.executors")

WEEKDAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

# Values of a health record's "type" field that belong to each sub-metric
METRIC_RECORD_TYPES = {
    "steps": {"steps", "step_count", "stepcount"},
    "heart_rate": {"heart_rate", "heartrate", "heart-rate"},
    "sleep": {"sleep", "sleep_hours", "sleepanalysis", "sleep_analysis"},
}

# Fields tried in order for a one-line preview of each record type
SNIPPET_FIELDS = {
    DataType.VOICE: ("transcription", "transcript", "content", "text"),
    DataType.TEXT: ("content", "title", "text"),
    DataType.PHOTO: ("description", "caption", "autoDescription", "userDescription"),
    DataType.EVENT: ("title", "description"),
    DataType.LOCATION: ("name", "placeName", "address"),
}


@dataclass
class DirectResult:
    """Exact value plus provenance from one direct executor"""
    strategy: Strategy
    data_type: DataType
    value: Any
    sources: List[SourceItem] = field(default_factory=list)
    date_range: Optional[DateRange] = None
    record_count: int = 0
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def direct_query_type(self) -> Optional[str]:
        return self.strategy.direct_query_type


def record_time(record: StoreRecord, date_field: str = "createdAt") -> Optional[datetime]:
    """Creation time of a record in either stored representation"""
    value = record.data.get(date_field)
    if value is None:
        value = record.data.get("timestamp", record.data.get("date"))
    return parse_timestamp(value)


def _truncate(text: str, limit: int) -> str:
    text = " ".join(str(text).split())
    if len(text) <= limit:
        return text
    return text[: max(limit - 3, 0)].rstrip() + "..."


def record_snippet(record: StoreRecord, limit: int = 200) -> str:
    """One-line preview of a record, chosen by its type"""
    data = record.data

    if record.data_type == DataType.HEALTH:
        kind = data.get("type", "health")
        value = data.get("value", data.get("steps"))
        unit = data.get("unit", "")
        text = " ".join(str(p) for p in (kind, value, unit) if p not in (None, ""))
        return _truncate(text, limit)

    text = ""
    for key in SNIPPET_FIELDS.get(record.data_type, ()):
        candidate = data.get(key)
        if isinstance(candidate, str) and candidate.strip():
            text = candidate
            break

    if record.data_type == DataType.LOCATION:
        tag = data.get("activityTag") or data.get("activity")
        if tag:
            text = f"{text} ({tag})" if text else str(tag)

    return _truncate(text or f"{record.data_type.value} record", limit)


def build_sources(
    records: Sequence[StoreRecord],
    max_sources: int = 10,
    snippet_max_chars: int = 200,
    date_field: str = "createdAt",
) -> List[SourceItem]:
    """SourceItems for the most recent records, newest first"""
    floor = datetime.min.replace(tzinfo=timezone.utc)
    timed = [(record_time(r, date_field), r) for r in records]
    timed.sort(key=lambda t: (t[0] or floor, t[1].id), reverse=True)

    sources = []
    for moment, record in timed[:max_sources]:
        sources.append(SourceItem(
            id=record.id,
            type=record.data_type.value,
            snippet=record_snippet(record, snippet_max_chars),
            score=1.0,
            source_id=record.id,
            created_at=moment.isoformat() if moment else None,
        ))
    return sources


def _as_python_number(value: float, integral: bool):
    value = float(value)
    if integral and value.is_integer():
        return int(value)
    return round(value, 4)


def reduce_values(values: Sequence[float], op: AggregationOp):
    """sum/avg/min/max over numeric values; None when there are none"""
    if not values:
        return None
    arr = np.asarray(values, dtype=np.float64)
    integral = all(isinstance(v, int) for v in values)
    if op == AggregationOp.SUM:
        return _as_python_number(arr.sum(), integral)
    if op == AggregationOp.AVG:
        return _as_python_number(arr.mean(), False)
    if op == AggregationOp.MIN:
        return _as_python_number(arr.min(), integral)
    if op == AggregationOp.MAX:
        return _as_python_number(arr.max(), integral)
    raise ValueError(f"Unsupported aggregation: {op}")


class _Executor:
    """Shared wiring: merger, limits, field names"""

    name = "executor"

    def __init__(
        self,
        merger: DualDateQueryMerger,
        router_config: Optional[RouterConfig] = None,
        store_config: Optional[StoreConfig] = None,
    ):
        self._merger = merger
        self._config = router_config or RouterConfig()
        self._store_config = store_config or StoreConfig()

    async def _merge(
        self,
        user_id: str,
        decision: RoutingDecision,
        date_range: Optional[DateRange],
        timeout: Optional[float],
    ) -> Dict[str, StoreRecord]:
        return await self._merger.merge(
            user_id,
            decision.data_type,
            date_range,
            activity=decision.activity,
            timeout=timeout,
            executor=self.name,
        )

    def _sources(self, records: Sequence[StoreRecord]) -> List[SourceItem]:
        return build_sources(
            records,
            max_sources=self._config.max_sources,
            snippet_max_chars=self._config.snippet_max_chars,
            date_field=self._store_config.date_field,
        )


class CountExecutor(_Executor):
    """Number of merged records"""

    name = "count"

    async def execute(
        self,
        decision: RoutingDecision,
        user_id: str,
        timeout: Optional[float] = None,
        date_range: Optional[DateRange] = None,
        now: Optional[datetime] = None,
    ) -> DirectResult:
        date_range = date_range if date_range is not None else decision.date_range
        records = await self._merge(user_id, decision, date_range, timeout)
        count = len(records)
        logger.info(
            "Counted %d %s records (range=%s, activity=%s)",
            count,
            decision.data_type.value,
            date_range.describe() if date_range else "unbounded",
            decision.activity,
        )
        return DirectResult(
            strategy=Strategy.DIRECT_COUNT,
            data_type=decision.data_type,
            value=count,
            sources=self._sources(list(records.values())),
            date_range=date_range,
            record_count=count,
        )


class AggregationExecutor(_Executor):
    """sum/avg/min/max of a per-type numeric field"""

    name = "aggregation"

    def numeric_values(self, records: Sequence[StoreRecord], data_type: DataType, metric: Optional[str]) -> List[float]:
        """Numeric field of each record; health records only count toward their own metric"""
        if data_type == DataType.HEALTH and metric not in METRIC_RECORD_TYPES:
            return []

        fields = self._config.aggregation_fields.get(data_type.value, [])
        if data_type == DataType.HEALTH and metric == "steps" and "steps" in fields:
            fields = ["steps"] + [f for f in fields if f != "steps"]

        allowed = METRIC_RECORD_TYPES[metric] if data_type == DataType.HEALTH else None

        values = []
        for record in records:
            if allowed is not None:
                kind = str(record.data.get("type", "")).lower()
                if kind not in allowed:
                    continue
            for name in fields:
                value = record.data.get(name)
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    values.append(value)
                    break
        return values

    async def execute(
        self,
        decision: RoutingDecision,
        user_id: str,
        timeout: Optional[float] = None,
        date_range: Optional[DateRange] = None,
        now: Optional[datetime] = None,
    ) -> DirectResult:
        date_range = date_range if date_range is not None else decision.date_range
        op = decision.aggregation or AggregationOp.SUM
        records = list((await self._merge(user_id, decision, date_range, timeout)).values())
        values = self.numeric_values(records, decision.data_type, decision.metric)
        result = reduce_values(values, op)

        metric_unresolved = decision.data_type == DataType.HEALTH and decision.metric not in METRIC_RECORD_TYPES

        if metric_unresolved:
            logger.info("Health metric not resolved; %d records left unaggregated", len(records))
        elif result is None:
            logger.info("No numeric values among %d %s records", len(records), decision.data_type.value)
        else:
            logger.info(
                "Aggregated %s of %d values from %d %s records: %s",
                op.value, len(values), len(records), decision.data_type.value, result,
            )

        return DirectResult(
            strategy=Strategy.DIRECT_AGGREGATION,
            data_type=decision.data_type,
            value=result,
            sources=self._sources(records),
            date_range=date_range,
            record_count=len(records),
            details={
                "operation": op.value,
                "metric": decision.metric,
                "values_used": len(values),
                "metric_unresolved": metric_unresolved,
            },
        )


class ComparisonExecutor(_Executor):
    """Count (or aggregate) two disjoint periods concurrently"""

    name = "comparison"

    def __init__(
        self,
        merger: DualDateQueryMerger,
        router_config: Optional[RouterConfig] = None,
        store_config: Optional[StoreConfig] = None,
    ):
        super().__init__(merger, router_config, store_config)
        self._count = CountExecutor(merger, router_config, store_config)
        self._aggregate = AggregationExecutor(merger, router_config, store_config)

    async def execute(
        self,
        decision: RoutingDecision,
        user_id: str,
        timeout: Optional[float] = None,
        date_range: Optional[DateRange] = None,
        now: Optional[datetime] = None,
    ) -> DirectResult:
        if not decision.comparison_ranges:
            raise ValueError("Comparison requires two periods")
        period_a, period_b = decision.comparison_ranges

        aggregate = decision.aggregation is not None or decision.metric is not None
        executor = self._aggregate if aggregate else self._count

        tasks = [
            asyncio.ensure_future(executor.execute(decision, user_id, timeout=timeout, date_range=period))
            for period in (period_a, period_b)
        ]
        try:
            result_a, result_b = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        if result_a.value is None or result_b.value is None:
            diff = None
        else:
            diff = _as_python_number(
                result_a.value - result_b.value,
                isinstance(result_a.value, int) and isinstance(result_b.value, int),
            )

        value = {"periodA": result_a.value, "periodB": result_b.value, "diff": diff}
        logger.info(
            "Compared %s (%s) vs %s (%s): diff=%s",
            period_a.describe(), result_a.value, period_b.describe(), result_b.value, diff,
        )

        sources = (result_a.sources + result_b.sources)[: self._config.max_sources]
        return DirectResult(
            strategy=Strategy.DIRECT_COMPARISON,
            data_type=decision.data_type,
            value=value,
            sources=sources,
            record_count=result_a.record_count + result_b.record_count,
            details={
                "measure": executor.name,
                "periodA": period_a.describe(),
                "periodB": period_b.describe(),
                **({"operation": (decision.aggregation or AggregationOp.SUM).value} if aggregate else {}),
                **({"metric_unresolved": True} if result_a.details.get("metric_unresolved") else {}),
            },
        )


class PatternExecutor(_Executor):
    """Day-of-week and hour-of-day frequency tables"""

    name = "pattern"

    def window(self, decision: RoutingDecision, now: Optional[datetime] = None) -> DateRange:
        if decision.date_range is not None:
            return decision.date_range
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        days = self._config.pattern_window_days
        return DateRange(now - timedelta(days=days), now, label=f"last {days} days")

    async def execute(
        self,
        decision: RoutingDecision,
        user_id: str,
        timeout: Optional[float] = None,
        date_range: Optional[DateRange] = None,
        now: Optional[datetime] = None,
    ) -> DirectResult:
        date_range = date_range if date_range is not None else self.window(decision, now)
        records = list((await self._merge(user_id, decision, date_range, timeout)).values())

        moments = [m for m in (record_time(r, self._store_config.date_field) for r in records) if m]
        weekdays = np.array([(m.weekday() + 1) % 7 for m in moments], dtype=np.int64)
        hours = np.array([m.hour for m in moments], dtype=np.int64)
        by_weekday = np.bincount(weekdays, minlength=7)
        by_hour = np.bincount(hours, minlength=24)

        total = len(moments)
        value = {
            "by_weekday": {WEEKDAYS[i]: int(c) for i, c in enumerate(by_weekday)},
            "by_hour": [int(c) for c in by_hour],
            "peak_weekday": WEEKDAYS[int(np.argmax(by_weekday))] if total else None,
            "peak_hour": int(np.argmax(by_hour)) if total else None,
            "total": total,
        }
        logger.info(
            "Pattern over %d %s records (%s): peak %s at %s:00",
            total, decision.data_type.value, date_range.describe(), value["peak_weekday"], value["peak_hour"],
        )
        return DirectResult(
            strategy=Strategy.DIRECT_PATTERN,
            data_type=decision.data_type,
            value=value,
            sources=self._sources(records),
            date_range=date_range,
            record_count=len(records),
        )


class DirectQueryExecutors:
    """Dispatches a direct RoutingDecision to its executor"""

    def __init__(
        self,
        merger: DualDateQueryMerger,
        router_config: Optional[RouterConfig] = None,
        store_config: Optional[StoreConfig] = None,
    ):
        self.count = CountExecutor(merger, router_config, store_config)
        self.aggregation = AggregationExecutor(merger, router_config, store_config)
        self.comparison = ComparisonExecutor(merger, router_config, store_config)
        self.pattern = PatternExecutor(merger, router_config, store_config)
        self._by_strategy = {
            Strategy.DIRECT_COUNT: self.count,
            Strategy.DIRECT_AGGREGATION: self.aggregation,
            Strategy.DIRECT_COMPARISON: self.comparison,
            Strategy.DIRECT_PATTERN: self.pattern,
        }

    async def execute(
        self,
        decision: RoutingDecision,
        user_id: str,
        timeout: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> DirectResult:
        if decision.data_type is None:
            raise ValueError("Direct execution requires a data type")
        executor = self._by_strategy.get(decision.strategy)
        if executor is None:
            raise ValueError(f"{decision.strategy.value} is not a direct strategy")
        return await executor.execute(decision, user_id, timeout=timeout, now=now)
