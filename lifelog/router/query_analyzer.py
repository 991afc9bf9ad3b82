"""
Query Analyzer

Classifies a question's intent (count / aggregation / comparison / pattern)
and the kind of personal data it is about, using the static language packs.
Every pack is evaluated against every question; the detected language is
recorded for diagnostics and never selects a pack.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..common.language import detect_language
from ..common.schemas.query import AggregationOp, DataType, Intent
from .language_packs import (
    ACTIVITIES,
    AGGREGATION_PRECEDENCE,
    DATA_TYPE_PRECEDENCE,
    HEALTH_METRICS,
    LANGUAGE_PACKS,
    LanguagePack,
)

logger = logging.getLogger("lifelog.router.query_analyzer")

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class QueryAnalysis:
    """What a question asks for, independent of its language"""
    original: str = ""
    is_count: bool = False
    is_aggregation: bool = False
    is_comparison: bool = False
    is_pattern: bool = False
    is_correlation: bool = False
    suggested_data_type: Optional[DataType] = None
    activity: Optional[str] = None
    aggregation: Optional[AggregationOp] = None
    metric: Optional[str] = None
    language: Optional[str] = None
    matched_packs: List[str] = field(default_factory=list)

    @property
    def has_numeric_intent(self) -> bool:
        return self.is_count or self.is_aggregation or self.is_comparison or self.is_pattern

    @property
    def intents(self) -> List[Intent]:
        """Fired intents in routing priority order"""
        fired = [
            (self.is_count, Intent.COUNT),
            (self.is_aggregation, Intent.AGGREGATION),
            (self.is_comparison, Intent.COMPARISON),
            (self.is_pattern, Intent.PATTERN),
        ]
        return [intent for flag, intent in fired if flag]

    @property
    def primary_intent(self) -> Intent:
        intents = self.intents
        return intents[0] if intents else Intent.OTHER


class QueryAnalyzer:
    """
    Keyword-table classifier for personal-data questions.

    Responsibilities:
    1. Detect numeric intents (count, aggregation, comparison, pattern)
    2. Pick one data type by keyword precedence
    3. Apply the activity override (activity tags live on location records)
    4. Pick the aggregation operation and the health sub-metric
    """

    def __init__(self, packs: Optional[List[LanguagePack]] = None):
        self._packs = list(packs) if packs is not None else list(LANGUAGE_PACKS)

    def analyze(self, query) -> QueryAnalysis:
        """
        Analyze a raw question.

        Never raises: empty, blank or non-string input yields an empty
        analysis (no intent, no data type).

        Args:
            query: Raw question text, any supported language

        Returns:
            QueryAnalysis
        """
        if not isinstance(query, str) or not query.strip():
            logger.debug("Empty or non-text query, returning empty analysis")
            return QueryAnalysis(original=query if isinstance(query, str) else "")

        text = _WHITESPACE_RE.sub(" ", query.strip())
        analysis = QueryAnalysis(original=query, language=detect_language(text).code)
        matched_packs = set()

        type_hits: Dict[DataType, int] = {}
        op_hits = set()
        metric_hits: List[Tuple[int, str]] = []
        activity_hits: List[Tuple[int, int, str]] = []

        for pack in self._packs:
            hit = False
            for flag, regex in (
                ("is_count", pack.count),
                ("is_comparison", pack.comparison),
                ("is_pattern", pack.pattern),
                ("is_correlation", pack.correlation),
            ):
                if regex is not None and regex.search(text):
                    setattr(analysis, flag, True)
                    hit = True

            for op, regex in pack.aggregation.items():
                if regex.search(text):
                    op_hits.add(op)
                    hit = True

            for data_type, regex in pack.data_types.items():
                match = regex.search(text)
                if match:
                    type_hits.setdefault(data_type, match.start())
                    hit = True

            for metric, regex in pack.metrics.items():
                match = regex.search(text)
                if match:
                    metric_hits.append((match.start(), metric))

            for activity, regex in pack.activities.items():
                match = regex.search(text)
                if match:
                    activity_hits.append((match.start(), ACTIVITIES.index(activity), activity))
                    hit = True

            if hit:
                matched_packs.add(pack.code)

        analysis.matched_packs = sorted(matched_packs)

        for op in AGGREGATION_PRECEDENCE:
            if op in op_hits:
                analysis.aggregation = op
                analysis.is_aggregation = True
                break

        for data_type in DATA_TYPE_PRECEDENCE:
            if data_type in type_hits:
                analysis.suggested_data_type = data_type
                break

        if metric_hits:
            metric_hits.sort(key=lambda h: (h[0], HEALTH_METRICS.index(h[1])))
            analysis.metric = metric_hits[0][1]

        # Earliest activity mention wins; activity tags live on location records
        if activity_hits:
            activity_hits.sort()
            analysis.activity = activity_hits[0][2]
            if analysis.suggested_data_type != DataType.LOCATION:
                logger.debug(
                    "Activity %r overrides data type %s -> location",
                    analysis.activity,
                    analysis.suggested_data_type.value if analysis.suggested_data_type else None,
                )
            analysis.suggested_data_type = DataType.LOCATION

        # Metrics only apply to health records
        if analysis.suggested_data_type != DataType.HEALTH:
            analysis.metric = None

        # "How many steps" asks for a quantity, not for a number of records
        if analysis.is_count and analysis.metric:
            analysis.is_count = False
            analysis.is_aggregation = True
            if analysis.aggregation is None:
                analysis.aggregation = AggregationOp.SUM

        if analysis.is_correlation:
            logger.info("Correlation question detected; no exact executor exists for it")

        logger.debug(
            "Analyzed %r: intents=%s type=%s activity=%s op=%s metric=%s lang=%s packs=%s",
            text,
            [i.value for i in analysis.intents],
            analysis.suggested_data_type.value if analysis.suggested_data_type else None,
            analysis.activity,
            analysis.aggregation.value if analysis.aggregation else None,
            analysis.metric,
            analysis.language,
            analysis.matched_packs,
        )
        return analysis
