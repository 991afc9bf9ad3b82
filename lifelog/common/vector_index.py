"""
Vector Index Client

Wraps a Pinecone index for nearest-neighbour search over embedded personal
data. Metadata filters use Pinecone's filter language ($eq, $gte, $lte, $or).
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

from .errors import VectorIndexError

logger = logging.getLogger("lifelog.common.vector_index")


class VectorIndex(Protocol):
    """Anything that can answer a filtered top-k query"""

    def query(
        self,
        vector: List[float],
        top_k: int,
        filter: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        ...


class PineconeIndex:
    """
    Direct client to a Pinecone index.

    The Pinecone client is created lazily so that configuration errors surface
    on the first query rather than at import time.
    """

    def __init__(self, api_key: str, index_name: str, namespace: str = ""):
        """
        Initialize Pinecone index client.

        Args:
            api_key: Pinecone API key
            index_name: Name of the index holding lifelog vectors
            namespace: Optional namespace within the index
        """
        self._api_key = api_key
        self._index_name = index_name
        self._namespace = namespace
        self._index = None

    def _ensure_initialized(self):
        """Lazily connect to the index"""
        if self._index is not None:
            return self._index

        if not self._api_key:
            raise VectorIndexError("Pinecone API key is not configured")

        try:
            from pinecone import Pinecone

            client = Pinecone(api_key=self._api_key)
            self._index = client.Index(self._index_name)
            logger.info("Connected to Pinecone index %s", self._index_name)
        except Exception as e:
            raise VectorIndexError(f"Could not open Pinecone index {self._index_name}: {e}") from e
        return self._index

    def query(
        self,
        vector: List[float],
        top_k: int,
        filter: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Query the index.

        Args:
            vector: Query embedding
            top_k: Maximum number of matches
            filter: Pinecone metadata filter

        Returns:
            List of {"id", "score", "metadata"} dicts in index order
        """
        index = self._ensure_initialized()

        kwargs: Dict[str, Any] = {
            "vector": vector,
            "top_k": top_k,
            "include_metadata": True,
        }
        if filter:
            kwargs["filter"] = filter
        if self._namespace:
            kwargs["namespace"] = self._namespace

        try:
            response = index.query(**kwargs)
        except Exception as e:
            logger.error("Pinecone query failed on %s: %s", self._index_name, e, exc_info=True)
            raise VectorIndexError(f"Pinecone query failed: {e}") from e

        return [self._to_match(m) for m in self._matches(response)]

    @staticmethod
    def _matches(response: Any) -> List[Any]:
        if isinstance(response, dict):
            return response.get("matches", []) or []
        return getattr(response, "matches", None) or []

    @staticmethod
    def _to_match(raw: Any) -> Dict[str, Any]:
        """Convert a Pinecone match (object or dict) to a plain dict"""
        if isinstance(raw, dict):
            return {
                "id": raw.get("id", ""),
                "score": float(raw.get("score") or 0.0),
                "metadata": dict(raw.get("metadata") or {}),
            }
        return {
            "id": getattr(raw, "id", ""),
            "score": float(getattr(raw, "score", 0.0) or 0.0),
            "metadata": dict(getattr(raw, "metadata", None) or {}),
        }
