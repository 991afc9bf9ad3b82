"""
Vector Search Fallback

Nearest-neighbour retrieval for open-ended and recall questions, and for
numeric questions whose data type could not be resolved.

Pipeline: embed question -> filtered top-k query -> rank by score -> SourceItems.
The embedding call must finish before the index query, so the two steps run
sequentially, each under the caller's timeout.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..common.config import RouterConfig, VectorIndexConfig
from ..common.embedding_service import EmbeddingService
from ..common.errors import EmbeddingError, VectorIndexError
from ..common.firestore_store import parse_timestamp
from ..common.schemas.context import SourceItem
from ..common.schemas.query import DataType, DateRange, RoutingDecision
from ..common.vector_index import VectorIndex

logger = logging.getLogger("lifelog.router.vector_fallback")

# Metadata keys tried in order for a match's display text
_TEXT_FIELDS = ("text", "content", "transcription", "description", "title", "name")


@dataclass
class VectorMatch:
    """A single neighbour from the vector index"""
    id: str
    score: float
    data_type: str
    text: str
    created_at: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def source_id(self) -> str:
        return str(self.metadata.get("sourceId") or self.metadata.get("source_id") or self.id)

    @property
    def is_photo(self) -> bool:
        return self.data_type == DataType.PHOTO.value


@dataclass
class VectorResult:
    """Ranked neighbours plus what was asked"""
    matches: List[VectorMatch] = field(default_factory=list)
    sources: List[SourceItem] = field(default_factory=list)
    top_k: int = 10
    filter: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.matches


def build_filter(
    user_id: str,
    data_type: Optional[DataType] = None,
    date_range: Optional[DateRange] = None,
    activity: Optional[str] = None,
    date_fields: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Pinecone metadata filter for one user's vectors.

    Date bounds are epoch seconds, tried against every date-field name that
    ingestion has used over time.
    """
    clauses: List[Dict[str, Any]] = [{"userId": {"$eq": user_id}}]

    if data_type is not None:
        clauses.append({"type": {"$eq": data_type.value}})

    if activity:
        clauses.append({"activity": {"$eq": activity}})

    if date_range is not None:
        low = int(date_range.start.timestamp())
        high = int(date_range.end.timestamp())
        fields = date_fields or ["date", "createdAt", "timestamp"]
        clauses.append({"$or": [{name: {"$gte": low, "$lte": high}} for name in fields]})

    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


class VectorSearchFallback:
    """
    Searches a user's embedded personal data.

    Features:
    - Filter by user, data type, activity and date range
    - Wider top-k for numeric questions without a data type
    - Typed errors for embedding and index failures
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        index: VectorIndex,
        router_config: Optional[RouterConfig] = None,
        index_config: Optional[VectorIndexConfig] = None,
    ):
        """
        Initialize the fallback.

        Args:
            embedding_service: For embedding questions
            index: Vector index to query
            router_config: topK and source limits
            index_config: Date-field names used in metadata
        """
        self._embedding = embedding_service
        self._index = index
        self._config = router_config or RouterConfig()
        self._index_config = index_config or VectorIndexConfig()

    async def search(
        self,
        query: str,
        user_id: str,
        decision: RoutingDecision,
        timeout: Optional[float] = None,
    ) -> VectorResult:
        """
        Retrieve the nearest neighbours for a question.

        Args:
            query: Question text
            user_id: Owner of the data
            decision: Supplies topK, data type, date range and activity
            timeout: Seconds for each external call (default from config)

        Returns:
            VectorResult sorted by score; empty when nothing matched

        Raises:
            EmbeddingError: embedding failed or timed out
            VectorIndexError: index query failed or timed out

        Note:
            Both calls run in worker threads. A timeout or cancellation stops
            waiting for them, but cannot interrupt the thread: an abandoned
            embedding or index call runs to completion and its result is dropped.
        """
        timeout = self._config.timeout_seconds if timeout is None else timeout
        top_k = decision.top_k or self._config.top_k

        query_filter = build_filter(
            user_id,
            data_type=decision.data_type,
            date_range=decision.date_range,
            activity=decision.activity,
            date_fields=self._index_config.date_fields,
        )

        if not isinstance(query, str) or not query.strip():
            logger.info("Empty question, nothing to search for")
            return VectorResult(top_k=top_k, filter=query_filter)

        vector = await self._embed(query, timeout)

        try:
            raw_matches = await asyncio.wait_for(
                asyncio.to_thread(self._index.query, vector, top_k, query_filter),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.error("Vector index query timed out after %.1fs", timeout)
            raise VectorIndexError(f"Vector index query timed out after {timeout}s")
        except VectorIndexError:
            raise
        except Exception as e:
            logger.error("Vector index query failed: %s", e, exc_info=True)
            raise VectorIndexError(f"Vector index query failed: {e}") from e

        matches = [self._to_match(raw) for raw in raw_matches]
        matches.sort(key=lambda m: m.score, reverse=True)
        matches = matches[:top_k]

        logger.info(
            "Vector search returned %d matches (topK=%d, filter=%s)", len(matches), top_k, query_filter
        )
        return VectorResult(
            matches=matches,
            sources=[self._to_source(m) for m in matches[: self._config.max_sources]],
            top_k=top_k,
            filter=query_filter,
        )

    async def _embed(self, query: str, timeout: float) -> List[float]:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._embedding.embed_single, query),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.error("Embedding timed out after %.1fs", timeout)
            raise EmbeddingError(f"Embedding timed out after {timeout}s")
        except EmbeddingError:
            raise
        except Exception as e:
            logger.error("Embedding failed: %s", e, exc_info=True)
            raise EmbeddingError(f"Embedding failed: {e}") from e

    def _to_match(self, raw: Dict[str, Any]) -> VectorMatch:
        """Convert a raw index match to VectorMatch"""
        metadata = raw.get("metadata") or {}

        text = ""
        for key in _TEXT_FIELDS:
            candidate = metadata.get(key)
            if isinstance(candidate, str) and candidate.strip():
                text = candidate
                break

        created_at = None
        for name in self._index_config.date_fields:
            created_at = parse_timestamp(metadata.get(name))
            if created_at:
                break

        return VectorMatch(
            id=str(raw.get("id", "")),
            score=float(raw.get("score") or 0.0),
            data_type=str(metadata.get("type", "unknown")),
            text=text,
            created_at=created_at,
            metadata=metadata,
        )

    def _to_source(self, match: VectorMatch) -> SourceItem:
        snippet = " ".join(match.text.split())
        limit = self._config.snippet_max_chars
        if len(snippet) > limit:
            snippet = snippet[: max(limit - 3, 0)].rstrip() + "..."
        return SourceItem(
            id=match.id,
            type=match.data_type,
            snippet=snippet,
            score=match.score,
            source_id=match.source_id,
            created_at=match.created_at.isoformat() if match.created_at else None,
        )
