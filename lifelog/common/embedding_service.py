"""
Embedding Service

On-device query embedding with fastembed. The default model is multilingual
so that a question in any of the nine supported languages lands in the same
space as content written in another.
"""

import logging
from typing import List

import numpy as np

from .errors import EmbeddingError

logger = logging.getLogger("lifelog.common.embedding_service")

DEFAULT_MODEL = "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"


class EmbeddingService:
    """
    Thin wrapper over fastembed's TextEmbedding.

    The model is loaded lazily on first use; construction never touches disk
    or network.
    """

    def __init__(self, model: str = DEFAULT_MODEL):
        self._model_name = model
        self._model = None

    @property
    def model_name(self) -> str:
        return self._model_name

    def _ensure_model(self):
        if self._model is None:
            try:
                from fastembed import TextEmbedding
                self._model = TextEmbedding(model_name=self._model_name)
                logger.info("Loaded embedding model %s", self._model_name)
            except Exception as e:
                raise EmbeddingError(f"Could not load embedding model {self._model_name}: {e}") from e
        return self._model

    def embed(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for a list of texts.

        Args:
            texts: List of strings to embed

        Returns:
            List of L2-normalized embedding vectors
        """
        if not texts:
            return []

        model = self._ensure_model()
        try:
            vectors = np.array(list(model.embed(texts)), dtype=np.float32)
        except Exception as e:
            raise EmbeddingError(f"Embedding failed: {e}") from e

        norms = np.linalg.norm(vectors, axis=1, keepdims=True)
        norms[norms == 0] = 1.0
        return (vectors / norms).tolist()

    def embed_single(self, text: str) -> List[float]:
        """Generate embedding for a single text."""
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")
        return self.embed([text])[0]

