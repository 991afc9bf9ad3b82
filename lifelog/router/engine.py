"""
Query Engine

Analyze -> Temporal -> Route -> Execute (direct or vector) -> Assemble.

One request, no shared mutable state. No retries, and a failed direct query
is never downgraded to a vector search: typed errors propagate to the caller,
which may turn them into a "could not compute" context with
ContextAssembler.assemble_failure.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.config import LifelogConfig
from ..common.embedding_service import EmbeddingService
from ..common.firestore_store import FirestoreStore, StructuredStore
from ..common.schemas.context import AssembledContext
from ..common.schemas.query import RoutingDecision
from ..common.vector_index import PineconeIndex, VectorIndex
from .context_assembler import ContextAssembler
from .date_merger import DualDateQueryMerger
from .executors import DirectQueryExecutors
from .query_analyzer import QueryAnalysis, QueryAnalyzer
from .query_router import QueryRouter
from .temporal_parser import TemporalMatch, TemporalParser
from .vector_fallback import VectorSearchFallback

logger = logging.getLogger("lifelog.router.engine")


@dataclass
class EngineTrace:
    """Intermediate results of one run, for logging and tests"""
    analysis: QueryAnalysis
    temporal: TemporalMatch
    decision: RoutingDecision
    elapsed_ms: float = 0.0


class QueryEngine:
    """
    End-to-end question handling over one user's personal data.

    Usage:
        engine = QueryEngine.from_config(load_config())
        context = await engine.run("How many voice notes did I record yesterday?", user_id)
    """

    def __init__(
        self,
        store: StructuredStore,
        embedding_service: EmbeddingService,
        index: VectorIndex,
        config: Optional[LifelogConfig] = None,
    ):
        self._config = config or LifelogConfig()
        router_config = self._config.router

        self.analyzer = QueryAnalyzer()
        self.temporal = TemporalParser()
        self.router = QueryRouter(router_config, self.temporal)
        self.merger = DualDateQueryMerger(store, timeout_seconds=router_config.timeout_seconds)
        self.executors = DirectQueryExecutors(self.merger, router_config, self._config.store)
        self.vector = VectorSearchFallback(embedding_service, index, router_config, self._config.vector_index)
        self.assembler = ContextAssembler(router_config)

    @classmethod
    def from_config(cls, config: LifelogConfig) -> "QueryEngine":
        """Wire Firestore, fastembed and Pinecone from configuration"""
        return cls(
            store=FirestoreStore(config.store),
            embedding_service=EmbeddingService(model=config.embedding.model),
            index=PineconeIndex(
                api_key=config.vector_index.api_key,
                index_name=config.vector_index.index_name,
                namespace=config.vector_index.namespace,
            ),
            config=config,
        )

    def plan(self, query: str, now: Optional[datetime] = None) -> EngineTrace:
        """Analyze, resolve time and route without touching any store"""
        analysis = self.analyzer.analyze(query)
        temporal = self.temporal.parse(query, now=now)
        decision = self.router.route(analysis, temporal, now=now)
        return EngineTrace(analysis=analysis, temporal=temporal, decision=decision)

    async def run(
        self,
        query: str,
        user_id: str,
        now: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> AssembledContext:
        """
        Answer-layer context for one question.

        Args:
            query: Raw question, any supported language
            user_id: Owner of the data
            now: Reference instant for relative dates (default: current UTC time)
            timeout: Seconds per external call (default from config)

        Returns:
            AssembledContext

        Raises:
            StoreQueryError: a direct-path query failed or timed out
            EmbeddingError / VectorIndexError: the vector path failed
        """
        started = time.perf_counter()
        trace = self.plan(query, now=now)
        decision = trace.decision

        if decision.is_direct:
            result = await self.executors.execute(decision, user_id, timeout=timeout, now=now)
        else:
            text = query if isinstance(query, str) else ""
            result = await self.vector.search(text, user_id, decision, timeout=timeout)

        context = self.assembler.assemble(decision, result)

        trace.elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "Answered with %s in %.0fms (%d sources, %d chars)",
            decision.strategy.value, trace.elapsed_ms, len(context.sources), len(context.text),
        )
        return context
