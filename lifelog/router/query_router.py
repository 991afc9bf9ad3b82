"""
Query Router

Turns an analysis plus resolved time phrases into exactly one RoutingDecision.

Decision order (first satisfied wins):
1. count intent with a data type         -> DIRECT_COUNT
2. aggregation intent with a data type
   that has numeric fields               -> DIRECT_AGGREGATION
3. comparison intent with two periods
   and a data type                       -> DIRECT_COMPARISON
4. pattern intent with a data type       -> DIRECT_PATTERN
5. anything else                         -> VECTOR_SEARCH

Numeric questions are only answered directly when a data type is known,
because the executors need it to pick a collection.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from ..common.config import RouterConfig
from ..common.schemas.query import DateRange, Intent, RoutingDecision, Strategy
from .language_packs import PERIOD_COUNTERPARTS
from .query_analyzer import QueryAnalysis
from .temporal_parser import TemporalMatch, TemporalParser, resolve_period

logger = logging.getLogger("lifelog.router.query_router")


class QueryRouter:
    """Fixed-priority decision table over QueryAnalysis and TemporalMatch"""

    def __init__(self, config: Optional[RouterConfig] = None, temporal_parser: Optional[TemporalParser] = None):
        self._config = config or RouterConfig()
        self._temporal = temporal_parser or TemporalParser()

    def route(
        self,
        analysis: QueryAnalysis,
        temporal: TemporalMatch,
        now: Optional[datetime] = None,
    ) -> RoutingDecision:
        """
        Pick one strategy for a question.

        Args:
            analysis: Output of QueryAnalyzer.analyze
            temporal: Output of TemporalParser.parse for the same text
            now: Reference instant used to resolve comparison periods

        Returns:
            RoutingDecision
        """
        data_type = analysis.suggested_data_type
        date_range = temporal.range
        reasons: List[str] = []

        decision = RoutingDecision(
            strategy=Strategy.VECTOR_SEARCH,
            data_type=data_type,
            date_range=date_range,
            activity=analysis.activity,
            aggregation=analysis.aggregation,
            metric=analysis.metric,
            top_k=self._config.top_k,
            language=analysis.language,
            reasons=reasons,
        )

        if analysis.is_count and data_type is not None:
            decision.strategy = Strategy.DIRECT_COUNT
            decision.intent = Intent.COUNT
            reasons.append("count intent with data type %s" % data_type.value)
            return self._log(decision)

        if analysis.is_aggregation and data_type is not None:
            if self._config.aggregation_fields.get(data_type.value):
                decision.strategy = Strategy.DIRECT_AGGREGATION
                decision.intent = Intent.AGGREGATION
                reasons.append("aggregation intent with data type %s" % data_type.value)
                return self._log(decision)
            reasons.append("no numeric fields to aggregate for %s" % data_type.value)

        if analysis.is_comparison:
            periods = self.comparison_periods(analysis.original, now)
            if periods is not None and data_type is not None:
                decision.strategy = Strategy.DIRECT_COMPARISON
                decision.intent = Intent.COMPARISON
                decision.comparison_ranges = periods
                decision.date_range = None
                reasons.append(
                    "comparison of %s vs %s for %s"
                    % (periods[0].describe(), periods[1].describe(), data_type.value)
                )
                return self._log(decision)
            reasons.append(
                "comparison intent without %s" % ("two periods" if periods is None else "a data type")
            )

        if analysis.is_pattern and data_type is not None:
            decision.strategy = Strategy.DIRECT_PATTERN
            decision.intent = Intent.PATTERN
            reasons.append("pattern intent with data type %s" % data_type.value)
            return self._log(decision)

        decision.intent = analysis.primary_intent
        if analysis.is_correlation:
            reasons.append("correlation questions use vector search")
        if analysis.has_numeric_intent and data_type is None:
            decision.top_k = self._config.degraded_top_k
            reasons.append("numeric intent without data type, widened topK")
        elif not analysis.has_numeric_intent:
            reasons.append("no numeric intent")
        return self._log(decision)

    def comparison_periods(
        self,
        text: str,
        now: Optional[datetime] = None,
    ) -> Optional[Tuple[DateRange, DateRange]]:
        """
        Resolve (period A, period B) for a comparison.

        Two distinct periods in the text are taken in the order written. A
        single "previous" period (yesterday, last week, last month, last
        year) is compared against its current counterpart, which becomes
        period A. Anything else is unresolvable.
        """
        matches = self._temporal.parse_all(text, now=now)
        if len(matches) >= 2:
            return matches[0].range, matches[1].range

        if len(matches) == 1:
            key = matches[0].matched_pattern
            counterpart = PERIOD_COUNTERPARTS.get(key)
            if counterpart is not None:
                return resolve_period(counterpart, now), matches[0].range
        return None

    @staticmethod
    def _log(decision: RoutingDecision) -> RoutingDecision:
        logger.info(
            "Routed to %s (type=%s, range=%s, activity=%s, topK=%d): %s",
            decision.strategy.value,
            decision.data_type.value if decision.data_type else None,
            decision.date_range.describe() if decision.date_range else None,
            decision.activity,
            decision.top_k,
            "; ".join(decision.reasons),
        )
        return decision
