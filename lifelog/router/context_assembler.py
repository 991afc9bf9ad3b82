"""
Context Assembler

Packages either path's output into the fixed shape the downstream LLM call
consumes: bounded context text, at most max_sources SourceItems, and routing
metadata. Direct results open with the exact value and an instruction not to
recompute it.

Bounds: lowest-ranked source lines are dropped first; if even the top line
does not fit, it is truncated.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple, Union

from ..common.config import RouterConfig
from ..common.errors import EmbeddingError, LifelogError, StoreQueryError, VectorIndexError
from ..common.firestore_store import parse_timestamp
from ..common.schemas.context import AssembledContext, RoutingMetadata, SourceItem
from ..common.schemas.query import DataType, RoutingDecision, Strategy
from .executors import DirectResult
from .vector_fallback import VectorMatch, VectorResult

logger = logging.getLogger("lifelog.router.context_assembler")

EMPTY_VECTOR_TEXT = (
    "No matching data found in the user's personal history. "
    "Let the user know more data is needed to answer this question."
)

EXACT_VALUE_INSTRUCTION = (
    "EXACT ANSWER (computed directly from the user's records). "
    "State this value as given; do not recount, recompute or estimate it."
)

_TYPE_LABELS = {
    DataType.VOICE: "voice notes",
    DataType.TEXT: "text notes",
    DataType.PHOTO: "photos",
    DataType.HEALTH: "health records",
    DataType.LOCATION: "location visits",
    DataType.EVENT: "events",
}

_ELLIPSIS = "..."


def format_date(moment: Optional[datetime]) -> str:
    """'Oct 13, 2026'"""
    if moment is None:
        return ""
    return f"{moment.strftime('%b')} {moment.day}, {moment.year}"


def _label(decision: RoutingDecision) -> str:
    label = _TYPE_LABELS.get(decision.data_type, "records")
    if decision.activity and decision.data_type == DataType.LOCATION:
        return f"{decision.activity} visits"
    if decision.metric and decision.data_type == DataType.HEALTH:
        return decision.metric.replace("_", " ")
    return label


class ContextAssembler:
    """Bounded context + sources + routing metadata for the answer layer"""

    def __init__(self, config: Optional[RouterConfig] = None):
        self._config = config or RouterConfig()

    def assemble(
        self,
        decision: RoutingDecision,
        result: Union[DirectResult, VectorResult],
    ) -> AssembledContext:
        """
        Build the answer-layer context for an executed decision.

        Args:
            decision: The routing decision that was executed
            result: DirectResult for direct strategies, VectorResult otherwise

        Returns:
            AssembledContext within the configured bounds
        """
        if isinstance(result, DirectResult):
            context = self._assemble_direct(decision, result)
        else:
            context = self._assemble_vector(decision, result)

        logger.debug(
            "Assembled %d chars, %d sources (direct=%s)",
            len(context.text), len(context.sources), context.routing.was_direct_query,
        )
        return context

    def assemble_failure(self, decision: RoutingDecision, error: LifelogError) -> AssembledContext:
        """
        Context for a request whose execution failed.

        The answer layer is told the exact figure is unavailable; it is never
        handed a guess.
        """
        if isinstance(error, StoreQueryError):
            text = (
                "Could not compute an exact answer: the structured query for "
                f"{_label(decision)}"
                + (f" ({error.date_range})" if error.date_range else "")
                + " failed. Tell the user the exact figure is unavailable right now; do not estimate it."
            )
        elif isinstance(error, (EmbeddingError, VectorIndexError)):
            text = (
                "Could not search the user's personal data right now. "
                "Tell the user the search is temporarily unavailable; do not guess an answer."
            )
        else:
            text = "Could not answer from the user's personal data right now; do not guess an answer."

        return AssembledContext(
            text=self._clip(text),
            sources=[],
            routing=self._routing(decision, exact_value=None),
        )

    def _assemble_direct(self, decision: RoutingDecision, result: DirectResult) -> AssembledContext:
        header = "\n".join([EXACT_VALUE_INSTRUCTION, self._value_statement(decision, result)])

        entries = []
        for i, source in enumerate(result.sources[: self._config.max_sources], start=1):
            date = format_date(parse_timestamp(source.created_at))
            prefix = f"[{i}] " + (f"[{date}] " if date else "")
            entries.append((prefix, source.snippet, source))

        def render(count: int) -> str:
            if not count:
                return header
            return f"{header}\n\nSupporting records ({count} most recent):"

        text, sources = self._bounded(render, entries)
        return AssembledContext(
            text=text,
            sources=sources,
            routing=self._routing(decision, exact_value=result.value),
        )

    def _assemble_vector(self, decision: RoutingDecision, result: VectorResult) -> AssembledContext:
        if result.is_empty:
            return AssembledContext(
                text=self._clip(EMPTY_VECTOR_TEXT),
                sources=[],
                routing=self._routing(decision, exact_value=None),
            )

        by_id = {s.id: s for s in result.sources}
        entries = []
        ranked: List[VectorMatch] = sorted(result.matches, key=lambda m: m.score, reverse=True)
        for i, match in enumerate(ranked[: self._config.max_sources], start=1):
            source = by_id.get(match.id)
            if source is None:
                continue
            date = format_date(match.created_at)
            prefix = f"[{i}] ({match.score * 100:.1f}% relevant) " + (f"[{date}] " if date else "")
            if match.is_photo:
                prefix += "📸 Photo: "
            entries.append((prefix, match.text or source.snippet, source))

        def render(count: int) -> str:
            return f"Relevant information from the user's personal data ({count} items):"

        text, sources = self._bounded(render, entries)
        return AssembledContext(
            text=text,
            sources=sources,
            routing=self._routing(decision, exact_value=None),
        )

    def _bounded(
        self,
        render,
        entries: List[Tuple[str, str, SourceItem]],
    ) -> Tuple[str, List[SourceItem]]:
        """Keep the highest-ranked entries that fit; truncate the first if it alone overflows"""
        limit = self._config.context_max_chars
        entries = entries[: self._config.max_sources]

        # Header measured at its widest (all entries)
        header_len = len(render(len(entries)))
        used = header_len
        kept: List[Tuple[str, SourceItem]] = []

        for prefix, body, source in entries:
            line = prefix + body
            cost = 2 + len(line)  # blank line separator
            if used + cost <= limit:
                kept.append((line, source))
                used += cost
                continue
            if not kept:
                room = limit - used - 2 - len(prefix) - len(_ELLIPSIS)
                if room > 0:
                    kept.append((prefix + body[:room].rstrip() + _ELLIPSIS, source))
                    logger.info("Top source truncated to fit %d-char context", limit)
            break

        dropped = len(entries) - len(kept)
        if dropped:
            logger.info("Dropped %d lowest-ranked sources to fit %d-char context", dropped, limit)

        text = render(len(kept))
        if kept:
            text += "\n\n" + "\n\n".join(line for line, _ in kept)
        return self._clip(text), [source for _, source in kept]

    def _clip(self, text: str) -> str:
        limit = self._config.context_max_chars
        if len(text) <= limit:
            return text
        return text[: max(limit - len(_ELLIPSIS), 0)] + _ELLIPSIS

    def _value_statement(self, decision: RoutingDecision, result: DirectResult) -> str:
        label = _label(decision)
        span = result.date_range.describe() if result.date_range else "all time"
        value = result.value

        if result.details.get("metric_unresolved"):
            return (
                f"Could not tell which health measurement (steps, heart rate or sleep) was asked about ({span}), "
                "so no exact value is available. Ask the user which measurement they mean; do not estimate it."
            )

        if result.strategy == Strategy.DIRECT_COUNT:
            return f"Number of {label} ({span}): {value}"

        if result.strategy == Strategy.DIRECT_AGGREGATION:
            operation = result.details.get("operation", "sum")
            if value is None:
                return f"No numeric values were recorded for {label} ({span}); the {operation} is unavailable."
            return f"{operation.upper()} of {label} ({span}): {value}"

        if result.strategy == Strategy.DIRECT_COMPARISON:
            measure = result.details.get("operation", "count")
            return (
                f"{measure.upper()} of {label}: "
                f"period A {result.details.get('periodA')}: {value['periodA']}; "
                f"period B {result.details.get('periodB')}: {value['periodB']}; "
                f"difference (A - B): {value['diff']}"
            )

        if result.strategy == Strategy.DIRECT_PATTERN:
            if not value["total"]:
                return f"No {label} found ({span}), so there is no pattern to report."
            weekdays = ", ".join(f"{day} {count}" for day, count in value["by_weekday"].items())
            return (
                f"Pattern of {label} ({span}, {value['total']} records): "
                f"most frequent day {value['peak_weekday']}, most frequent hour {value['peak_hour']:02d}:00. "
                f"By weekday: {weekdays}."
            )

        return f"{label} ({span}): {value}"

    @staticmethod
    def _routing(decision: RoutingDecision, exact_value) -> RoutingMetadata:
        return RoutingMetadata(
            was_direct_query=decision.is_direct,
            direct_query_type=decision.strategy.direct_query_type,
            exact_value=exact_value,
            strategy=decision.strategy.value,
            data_type=decision.data_type.value if decision.data_type else None,
            language=decision.language,
        )
