"""
Router - Question routing and execution

Key Components:
- QueryAnalyzer: Intent, data type and activity from nine language packs
- TemporalParser: Relative time phrases to UTC date ranges
- QueryRouter: One strategy per question, fixed priority
- DualDateQueryMerger: String + native timestamp queries merged by ID
- DirectQueryExecutors: Exact count / aggregation / comparison / pattern
- VectorSearchFallback: Filtered nearest-neighbour search
- ContextAssembler: Bounded context for the answer layer

Pipeline:
1. Analyze the question and resolve its time phrase
2. Route to a direct executor or to vector search
3. Execute against Firestore or Pinecone
4. Assemble context, sources and routing metadata
"""

from .query_analyzer import QueryAnalyzer, QueryAnalysis
from .temporal_parser import TemporalParser, TemporalMatch
from .query_router import QueryRouter
from .date_merger import DualDateQueryMerger
from .executors import (
    AggregationExecutor,
    ComparisonExecutor,
    CountExecutor,
    DirectQueryExecutors,
    DirectResult,
    PatternExecutor,
)
from .vector_fallback import VectorSearchFallback, VectorResult
from .context_assembler import ContextAssembler
from .engine import QueryEngine

__all__ = [
    "QueryAnalyzer",
    "QueryAnalysis",
    "TemporalParser",
    "TemporalMatch",
    "QueryRouter",
    "DualDateQueryMerger",
    "CountExecutor",
    "AggregationExecutor",
    "ComparisonExecutor",
    "PatternExecutor",
    "DirectQueryExecutors",
    "DirectResult",
    "VectorSearchFallback",
    "VectorResult",
    "ContextAssembler",
    "QueryEngine",
]
