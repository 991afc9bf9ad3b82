"""
Tests for Direct Query Executors

Tests count, aggregation, comparison and pattern execution over the
in-memory store, plus source building and numeric reduction helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

UTC = timezone.utc


@pytest.fixture
def executors(fake_store):
    from lifelog.router.date_merger import DualDateQueryMerger
    from lifelog.router.executors import DirectQueryExecutors
    return DirectQueryExecutors(DualDateQueryMerger(fake_store))


def _decision(strategy, data_type, **kwargs):
    from lifelog.common.schemas.query import RoutingDecision
    return RoutingDecision(strategy=strategy, data_type=data_type, **kwargs)


class TestHelpers:
    def test_reduce_values(self):
        from lifelog.common.schemas.query import AggregationOp
        from lifelog.router.executors import reduce_values

        assert reduce_values([1, 2, 3], AggregationOp.SUM) == 6
        assert isinstance(reduce_values([1, 2, 3], AggregationOp.SUM), int)
        assert reduce_values([1, 2], AggregationOp.AVG) == 1.5
        assert reduce_values([1.5, 2.25], AggregationOp.SUM) == 3.75
        assert reduce_values([4, 9, 2], AggregationOp.MIN) == 2
        assert reduce_values([4, 9, 2], AggregationOp.MAX) == 9
        assert reduce_values([], AggregationOp.SUM) is None

    def test_record_snippet_by_type(self):
        from lifelog.common.firestore_store import StoreRecord
        from lifelog.common.schemas.query import DataType
        from lifelog.router.executors import record_snippet

        health = StoreRecord("h1", DataType.HEALTH, {"type": "steps", "value": 1000, "unit": "count"})
        place = StoreRecord("l1", DataType.LOCATION, {"name": "Sports Hall", "activityTag": "badminton"})
        bare = StoreRecord("p1", DataType.PHOTO, {})

        assert record_snippet(health) == "steps 1000 count"
        assert record_snippet(place) == "Sports Hall (badminton)"
        assert record_snippet(bare) == "photo record"

    def test_record_snippet_truncates(self):
        from lifelog.common.firestore_store import StoreRecord
        from lifelog.common.schemas.query import DataType
        from lifelog.router.executors import record_snippet

        note = StoreRecord("t1", DataType.TEXT, {"content": "word " * 100})

        snippet = record_snippet(note, limit=20)

        assert len(snippet) <= 20
        assert snippet.endswith("...")

    def test_build_sources_newest_first(self):
        from lifelog.common.firestore_store import StoreRecord
        from lifelog.common.schemas.query import DataType
        from lifelog.router.executors import build_sources

        records = [
            StoreRecord("old", DataType.VOICE, {"createdAt": "2026-10-01T08:00:00.000Z"}),
            StoreRecord("new", DataType.VOICE, {"createdAt": datetime(2026, 10, 13, tzinfo=UTC)}),
        ]

        sources = build_sources(records)

        assert [s.id for s in sources] == ["new", "old"]
        assert all(s.score == 1.0 for s in sources)
        assert sources[0].source_id == "new"
        assert sources[0].created_at.startswith("2026-10-13")


class TestCountExecutor:
    @pytest.mark.asyncio
    async def test_count_across_encodings(self, executors, fake_store, now):
        from lifelog.common.schemas.query import DataType, Strategy
        from lifelog.router.temporal_parser import resolve_period

        noon = datetime(2026, 10, 13, 12, 0, tzinfo=UTC)
        fake_store.add("v1", DataType.VOICE, "2026-10-13T09:00:00.000Z", transcription="plan")
        fake_store.add("v2", DataType.VOICE, "2026-10-13T10:00:00.000Z", transcription="list")
        fake_store.add("v3", DataType.VOICE, noon, transcription="reminder")
        fake_store.add("v4", DataType.VOICE, noon - timedelta(days=1))

        decision = _decision(Strategy.DIRECT_COUNT, DataType.VOICE, date_range=resolve_period("yesterday", now))
        result = await executors.execute(decision, "user-1", now=now)

        assert result.value == 3
        assert result.record_count == 3
        assert result.direct_query_type == "count"
        assert [s.id for s in result.sources] == ["v3", "v2", "v1"]
        assert result.sources[0].snippet == "reminder"

    @pytest.mark.asyncio
    async def test_sources_capped(self, executors, fake_store):
        from lifelog.common.schemas.query import DataType, Strategy

        start = datetime(2026, 10, 1, tzinfo=UTC)
        for i in range(15):
            fake_store.add(f"p{i}", DataType.PHOTO, start + timedelta(hours=i))

        result = await executors.execute(_decision(Strategy.DIRECT_COUNT, DataType.PHOTO), "user-1")

        assert result.value == 15
        assert len(result.sources) == 10
        assert result.sources[0].id == "p14"

    @pytest.mark.asyncio
    async def test_empty_range_counts_zero(self, executors, now):
        from lifelog.common.schemas.query import DataType, Strategy
        from lifelog.router.temporal_parser import resolve_period

        decision = _decision(Strategy.DIRECT_COUNT, DataType.EVENT, date_range=resolve_period("today", now))
        result = await executors.execute(decision, "user-1", now=now)

        assert result.value == 0
        assert result.sources == []


class TestAggregationExecutor:
    @pytest.fixture
    def health_store(self, fake_store):
        from lifelog.common.schemas.query import DataType

        fake_store.add("h1", DataType.HEALTH, "2026-10-14T08:00:00.000Z", type="steps", value=1000)
        fake_store.add("h2", DataType.HEALTH, datetime(2026, 10, 14, 12, tzinfo=UTC), type="steps", steps=2000)
        fake_store.add("h3", DataType.HEALTH, "2026-10-14T09:00:00.000Z", type="heart_rate", value=70)
        return fake_store

    @pytest.mark.asyncio
    async def test_sum_of_steps(self, executors, health_store):
        from lifelog.common.schemas.query import AggregationOp, DataType, Strategy

        decision = _decision(
            Strategy.DIRECT_AGGREGATION, DataType.HEALTH, aggregation=AggregationOp.SUM, metric="steps",
        )
        result = await executors.execute(decision, "user-1")

        assert result.value == 3000
        assert result.details["operation"] == "sum"
        assert result.details["values_used"] == 2
        assert result.record_count == 3

    @pytest.mark.asyncio
    async def test_average_of_steps(self, executors, health_store):
        from lifelog.common.schemas.query import AggregationOp, DataType, Strategy

        decision = _decision(
            Strategy.DIRECT_AGGREGATION, DataType.HEALTH, aggregation=AggregationOp.AVG, metric="steps",
        )
        result = await executors.execute(decision, "user-1")

        assert result.value == 1500.0

    @pytest.mark.asyncio
    async def test_health_kinds_are_never_mixed(self, executors, health_store):
        from lifelog.common.schemas.query import AggregationOp, DataType, Strategy

        health_store.add("h4", DataType.HEALTH, "2026-10-14T07:00:00.000Z", type="sleep", value=7)
        health_store.add("h5", DataType.HEALTH, "2026-10-14T10:00:00.000Z", value=500)

        unresolved = await executors.execute(
            _decision(Strategy.DIRECT_AGGREGATION, DataType.HEALTH, aggregation=AggregationOp.SUM), "user-1",
        )
        steps = await executors.execute(
            _decision(Strategy.DIRECT_AGGREGATION, DataType.HEALTH, aggregation=AggregationOp.SUM, metric="steps"),
            "user-1",
        )

        assert unresolved.value is None
        assert unresolved.details["metric_unresolved"] is True
        assert unresolved.record_count == 5
        assert steps.value == 3000
        assert steps.details["metric_unresolved"] is False

    @pytest.mark.asyncio
    async def test_no_numeric_values(self, executors, fake_store):
        from lifelog.common.schemas.query import AggregationOp, DataType, Strategy

        fake_store.add("p1", DataType.PHOTO, "2026-10-14T08:00:00.000Z")

        decision = _decision(Strategy.DIRECT_AGGREGATION, DataType.PHOTO, aggregation=AggregationOp.SUM)
        result = await executors.execute(decision, "user-1")

        assert result.value is None
        assert result.record_count == 1


class TestComparisonExecutor:
    @pytest.mark.asyncio
    async def test_diff_is_a_minus_b(self, executors, fake_store, now):
        from lifelog.common.schemas.query import DataType, Strategy
        from lifelog.router.temporal_parser import resolve_period

        this_week = resolve_period("this_week", now)
        last_week = resolve_period("last_week", now)
        for i in range(3):
            fake_store.add(f"a{i}", DataType.PHOTO, this_week.start + timedelta(hours=i + 1))
        for i in range(5):
            fake_store.add(f"b{i}", DataType.PHOTO, f"2026-10-0{i + 4}T10:00:00.000Z")

        decision = _decision(Strategy.DIRECT_COMPARISON, DataType.PHOTO, comparison_ranges=(this_week, last_week))
        result = await executors.execute(decision, "user-1", now=now)

        assert result.value == {"periodA": 3, "periodB": 5, "diff": -2}
        assert result.details["measure"] == "count"
        assert len(result.sources) == 8

    @pytest.mark.asyncio
    async def test_aggregated_comparison(self, executors, fake_store, now):
        from lifelog.common.schemas.query import AggregationOp, DataType, Strategy
        from lifelog.router.temporal_parser import resolve_period

        fake_store.add("t", DataType.HEALTH, "2026-10-14T08:00:00.000Z", type="steps", value=4000)
        fake_store.add("y", DataType.HEALTH, "2026-10-13T08:00:00.000Z", type="steps", value=2500)

        decision = _decision(
            Strategy.DIRECT_COMPARISON, DataType.HEALTH, aggregation=AggregationOp.SUM, metric="steps",
            comparison_ranges=(resolve_period("today", now), resolve_period("yesterday", now)),
        )
        result = await executors.execute(decision, "user-1", now=now)

        assert result.value == {"periodA": 4000, "periodB": 2500, "diff": 1500}
        assert result.details["measure"] == "aggregation"
        assert result.details["operation"] == "sum"

    @pytest.mark.asyncio
    async def test_requires_two_periods(self, executors):
        from lifelog.common.schemas.query import DataType, Strategy

        with pytest.raises(ValueError):
            await executors.execute(_decision(Strategy.DIRECT_COMPARISON, DataType.PHOTO), "user-1")

    @pytest.mark.asyncio
    async def test_failure_propagates(self, executors, fake_store, now):
        from lifelog.common.errors import StoreQueryError
        from lifelog.common.schemas.query import DataType, Strategy, TimestampRepresentation
        from lifelog.router.temporal_parser import resolve_period

        fake_store.failures[TimestampRepresentation.NATIVE] = RuntimeError("unavailable")
        decision = _decision(
            Strategy.DIRECT_COMPARISON, DataType.PHOTO,
            comparison_ranges=(resolve_period("this_week", now), resolve_period("last_week", now)),
        )

        with pytest.raises(StoreQueryError):
            await executors.execute(decision, "user-1", now=now)


class TestPatternExecutor:
    @pytest.mark.asyncio
    async def test_weekday_and_hour_tables(self, executors, fake_store, now):
        from lifelog.common.schemas.query import DataType, Strategy

        # Three Monday mornings and one Wednesday evening
        for day in ("2026-10-12", "2026-10-05", "2026-09-28"):
            fake_store.add(f"m{day}", DataType.LOCATION, f"{day}T09:00:00.000Z", activityTag="gym")
        fake_store.add("w", DataType.LOCATION, datetime(2026, 10, 7, 18, tzinfo=UTC), activityTag="gym")

        decision = _decision(Strategy.DIRECT_PATTERN, DataType.LOCATION, activity="gym")
        result = await executors.execute(decision, "user-1", now=now)

        assert result.value["total"] == 4
        assert result.value["peak_weekday"] == "Monday"
        assert result.value["peak_hour"] == 9
        assert result.value["by_weekday"]["Monday"] == 3
        assert result.value["by_weekday"]["Wednesday"] == 1
        assert result.value["by_hour"][18] == 1
        assert len(result.value["by_hour"]) == 24
        assert result.date_range.label == "last 90 days"

    @pytest.mark.asyncio
    async def test_no_records(self, executors, now):
        from lifelog.common.schemas.query import DataType, Strategy

        result = await executors.execute(_decision(Strategy.DIRECT_PATTERN, DataType.EVENT), "user-1", now=now)

        assert result.value["total"] == 0
        assert result.value["peak_weekday"] is None


class TestDispatch:
    @pytest.mark.asyncio
    async def test_requires_data_type(self, executors):
        from lifelog.common.schemas.query import Strategy

        with pytest.raises(ValueError):
            await executors.execute(_decision(Strategy.DIRECT_COUNT, None), "user-1")

    @pytest.mark.asyncio
    async def test_rejects_vector_strategy(self, executors):
        from lifelog.common.schemas.query import DataType, Strategy

        with pytest.raises(ValueError):
            await executors.execute(_decision(Strategy.VECTOR_SEARCH, DataType.PHOTO), "user-1")
