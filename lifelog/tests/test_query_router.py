"""
Tests for Query Router

Tests the fixed decision order, comparison period resolution and the
widened topK for numeric questions without a data type.
"""

from datetime import datetime, timezone

import pytest


@pytest.fixture
def route(now):
    from lifelog.router.query_analyzer import QueryAnalyzer
    from lifelog.router.query_router import QueryRouter
    from lifelog.router.temporal_parser import TemporalParser

    analyzer = QueryAnalyzer()
    parser = TemporalParser()
    router = QueryRouter(temporal_parser=parser)

    def _route(query):
        return router.route(analyzer.analyze(query), parser.parse(query, now=now), now=now)

    return _route


class TestDirectStrategies:
    def test_count_with_type(self, route):
        from lifelog.common.schemas.query import DataType, Intent, Strategy

        decision = route("How many voice notes did I record yesterday?")

        assert decision.strategy == Strategy.DIRECT_COUNT
        assert decision.intent == Intent.COUNT
        assert decision.data_type == DataType.VOICE
        assert decision.date_range.label == "yesterday"
        assert decision.is_direct is True

    def test_aggregation(self, route):
        from lifelog.common.schemas.query import AggregationOp, Strategy

        decision = route("What was my average heart rate last week?")

        assert decision.strategy == Strategy.DIRECT_AGGREGATION
        assert decision.aggregation == AggregationOp.AVG
        assert decision.metric == "heart_rate"

    def test_pattern(self, route):
        from lifelog.common.schemas.query import DataType, Strategy

        decision = route("When do I usually go to the gym?")

        assert decision.strategy == Strategy.DIRECT_PATTERN
        assert decision.data_type == DataType.LOCATION
        assert decision.activity == "gym"

    def test_count_beats_comparison(self, route):
        from lifelog.common.schemas.query import Strategy

        decision = route("How many photos this week vs last week?")

        assert decision.strategy == Strategy.DIRECT_COUNT


class TestComparison:
    def test_two_explicit_periods(self, route):
        from lifelog.common.schemas.query import Strategy

        decision = route("Compare badminton this week vs last week")

        assert decision.strategy == Strategy.DIRECT_COMPARISON
        assert decision.activity == "badminton"
        assert decision.date_range is None
        period_a, period_b = decision.comparison_ranges
        assert period_a.label == "this_week"
        assert period_b.label == "last_week"

    def test_single_previous_period_pairs_with_current(self, route):
        from lifelog.common.schemas.query import Strategy

        decision = route("Did I take more photos than last month?")

        assert decision.strategy == Strategy.DIRECT_COMPARISON
        period_a, period_b = decision.comparison_ranges
        assert period_a.label == "this_month"
        assert period_b.label == "last_month"
        assert period_a.start == datetime(2026, 10, 1, tzinfo=timezone.utc)

    def test_unresolvable_periods_fall_back(self, route):
        from lifelog.common.schemas.query import Intent, Strategy

        decision = route("Compare my photos")

        assert decision.strategy == Strategy.VECTOR_SEARCH
        assert decision.intent == Intent.COMPARISON
        assert decision.top_k == 10
        assert any("two periods" in r for r in decision.reasons)

    def test_comparison_periods_none_without_time(self, now):
        from lifelog.router.query_router import QueryRouter

        assert QueryRouter().comparison_periods("compare my photos", now) is None


class TestVectorFallback:
    def test_open_question(self, route):
        from lifelog.common.schemas.query import Intent, Strategy

        decision = route("What did I talk about with Sarah?")

        assert decision.strategy == Strategy.VECTOR_SEARCH
        assert decision.intent == Intent.OTHER
        assert decision.top_k == 10
        assert decision.is_direct is False

    def test_recall_question_mentioning_mean(self, route):
        from lifelog.common.schemas.query import Strategy

        assert route("What did I mean in my notes about the trip?").strategy == Strategy.VECTOR_SEARCH
        assert route("What did I talk about on social media in my voice notes?").strategy == Strategy.VECTOR_SEARCH

    def test_aggregation_needs_numeric_fields(self, route):
        from lifelog.common.schemas.query import DataType, Intent, Strategy

        decision = route("What was the total of my photos last week?")

        assert decision.strategy == Strategy.VECTOR_SEARCH
        assert decision.intent == Intent.AGGREGATION
        assert decision.data_type == DataType.PHOTO
        assert "no numeric fields to aggregate for photo" in decision.reasons

    def test_numeric_without_type_widens_top_k(self, route):
        from lifelog.common.schemas.query import Intent, Strategy

        decision = route("How many things did I do yesterday?")

        assert decision.strategy == Strategy.VECTOR_SEARCH
        assert decision.intent == Intent.COUNT
        assert decision.top_k == 50
        assert decision.date_range.label == "yesterday"

    def test_correlation_uses_vector_search(self, route):
        from lifelog.common.schemas.query import Strategy

        decision = route("Is there a correlation between coffee and my mood?")

        assert decision.strategy == Strategy.VECTOR_SEARCH
        assert any("correlation" in r for r in decision.reasons)

    def test_configured_top_k(self, now):
        from lifelog.common.config import RouterConfig
        from lifelog.router.query_analyzer import QueryAnalysis
        from lifelog.router.query_router import QueryRouter
        from lifelog.router.temporal_parser import TemporalMatch

        router = QueryRouter(RouterConfig(top_k=5, degraded_top_k=25))

        assert router.route(QueryAnalysis(original="hello"), TemporalMatch(), now).top_k == 5
        assert router.route(QueryAnalysis(original="how many", is_count=True), TemporalMatch(), now).top_k == 25
