"""
End-to-end scenarios for QueryEngine

Runs real analysis, routing, merging and assembly over the in-memory store,
with the embedding service and vector index mocked.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

UTC = timezone.utc


@pytest.fixture
def embedding():
    service = Mock()
    service.embed_single = Mock(return_value=[0.1, 0.2])
    return service


@pytest.fixture
def index():
    idx = Mock()
    idx.query = Mock(return_value=[
        {"id": "n1", "score": 0.82, "metadata": {"type": "text", "text": "Lunch with Sarah, talked about Kyoto"}},
    ])
    return idx


@pytest.fixture
def engine(fake_store, embedding, index):
    from lifelog.router.engine import QueryEngine
    return QueryEngine(store=fake_store, embedding_service=embedding, index=index)


@pytest.fixture
def voice_notes(fake_store):
    """Three notes yesterday (string timestamps) and three the day before (native)"""
    from lifelog.common.firestore_store import to_iso_z
    from lifelog.common.schemas.query import DataType

    yesterday = datetime(2026, 10, 13, 9, 0, tzinfo=UTC)
    for i in range(3):
        fake_store.add(f"y{i}", DataType.VOICE, to_iso_z(yesterday + timedelta(hours=i)), transcription=f"memo {i}")
        fake_store.add(f"d{i}", DataType.VOICE, yesterday - timedelta(days=1, hours=i), transcription=f"old {i}")
    return fake_store


class TestCountScenario:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", [
        "How many voice notes did I record yesterday?",
        "昨天我记录了几个语音信息",
    ])
    async def test_voice_notes_yesterday(self, engine, voice_notes, embedding, now, query):
        context = await engine.run(query, "user-1", now=now)

        assert context.routing.was_direct_query is True
        assert context.routing.direct_query_type == "count"
        assert context.routing.exact_value == 3
        assert len(context.sources) == 3
        assert all(s.type == "voice" for s in context.sources)
        assert {s.id for s in context.sources} == {"y0", "y1", "y2"}
        embedding.embed_single.assert_not_called()

    @pytest.mark.asyncio
    async def test_mixed_encodings_counted_once(self, engine, fake_store, now):
        from lifelog.common.schemas.query import DataType

        fake_store.add("a", DataType.VOICE, "2026-10-13T08:00:00.000Z")
        fake_store.add("b", DataType.VOICE, "2026-10-13T09:00:00.000Z")
        fake_store.add("c", DataType.VOICE, datetime(2026, 10, 13, 10, tzinfo=UTC))

        context = await engine.run("How many voice notes did I record yesterday?", "user-1", now=now)

        assert context.routing.exact_value == 3

    @pytest.mark.asyncio
    async def test_payload_shape(self, engine, voice_notes, now):
        context = await engine.run("昨天我记录了几个语音信息", "user-1", now=now)

        payload = context.to_payload()

        assert set(payload) == {"context", "sources", "routing"}
        assert payload["routing"]["wasDirectQuery"] is True
        assert payload["routing"]["language"] == "zh"
        assert payload["routing"]["dataType"] == "voice"


class TestOtherScenarios:
    @pytest.mark.asyncio
    async def test_open_question_uses_vector_search(self, engine, index, now):
        context = await engine.run("What did I talk about with Sarah?", "user-1", now=now)

        assert context.routing.was_direct_query is False
        assert context.routing.strategy == "VECTOR_SEARCH"
        _vector, top_k, query_filter = index.query.call_args.args
        assert top_k == 10
        assert query_filter == {"userId": {"$eq": "user-1"}}
        assert "Kyoto" in context.text
        assert context.sources[0].score == 0.82

    @pytest.mark.asyncio
    async def test_numeric_question_without_type_widens_search(self, engine, index, now):
        await engine.run("How many things did I do yesterday?", "user-1", now=now)

        _vector, top_k, _filter = index.query.call_args.args
        assert top_k == 50

    @pytest.mark.asyncio
    async def test_badminton_week_over_week(self, engine, fake_store, now):
        from lifelog.common.schemas.query import DataType

        fake_store.add("b1", DataType.LOCATION, "2026-10-12T18:00:00.000Z", name="Sports Hall", activityTag="badminton")
        fake_store.add("b2", DataType.LOCATION, datetime(2026, 10, 13, 19, tzinfo=UTC),
                       name="Sports Hall", activityTag="badminton")
        fake_store.add("g1", DataType.LOCATION, "2026-10-12T07:00:00.000Z", name="City Gym", activityTag="gym")

        context = await engine.run("Compare badminton this week vs last week", "user-1", now=now)

        assert context.routing.direct_query_type == "comparison"
        assert context.routing.exact_value == {"periodA": 2, "periodB": 0, "diff": 2}
        assert {s.id for s in context.sources} == {"b1", "b2"}

    @pytest.mark.asyncio
    async def test_steps_today(self, engine, fake_store, now):
        from lifelog.common.schemas.query import DataType

        fake_store.add("s1", DataType.HEALTH, "2026-10-14T08:00:00.000Z", type="steps", steps=4000)
        fake_store.add("s2", DataType.HEALTH, datetime(2026, 10, 14, 12, tzinfo=UTC), type="steps", value=2500)

        context = await engine.run("How many steps did I take today?", "user-1", now=now)

        assert context.routing.direct_query_type == "aggregation"
        assert context.routing.exact_value == 6500

    @pytest.mark.asyncio
    async def test_unscoped_health_total_is_not_guessed(self, engine, fake_store, now):
        from lifelog.common.schemas.query import DataType

        fake_store.add("s1", DataType.HEALTH, "2026-10-12T08:00:00.000Z", type="steps", value=8000)
        fake_store.add("r1", DataType.HEALTH, "2026-10-12T09:00:00.000Z", type="heart_rate", value=70)
        fake_store.add("z1", DataType.HEALTH, datetime(2026, 10, 13, 6, tzinfo=UTC), type="sleep", value=7)

        context = await engine.run("What was my total workout time this week?", "user-1", now=now)

        assert context.routing.direct_query_type == "aggregation"
        assert context.routing.exact_value is None
        assert "Could not tell which health measurement" in context.text

    @pytest.mark.asyncio
    async def test_recall_question_mentioning_mean(self, engine, index, now):
        context = await engine.run("What did I mean in my notes about the trip?", "user-1", now=now)

        assert context.routing.strategy == "VECTOR_SEARCH"
        index.query.assert_called_once()

    @pytest.mark.asyncio
    async def test_store_failure_is_not_downgraded(self, engine, fake_store, index, now):
        from lifelog.common.errors import StoreQueryError
        from lifelog.common.schemas.query import TimestampRepresentation

        fake_store.failures[TimestampRepresentation.NATIVE] = RuntimeError("permission denied")

        with pytest.raises(StoreQueryError):
            await engine.run("How many voice notes did I record yesterday?", "user-1", now=now)
        index.query.assert_not_called()

    def test_plan_has_no_side_effects(self, engine, fake_store, now):
        from lifelog.common.schemas.query import Strategy

        trace = engine.plan("How many photos did I take today?", now=now)

        assert trace.decision.strategy == Strategy.DIRECT_COUNT
        assert trace.temporal.matched_pattern == "today"
        assert fake_store.calls == []
