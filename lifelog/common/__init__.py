"""
Lifelog Common Module

Configuration, schemas, errors and the external-service adapters
(Firestore, fastembed, Pinecone) shared by the router.
"""

from .config import LifelogConfig, load_config, save_config
from .embedding_service import EmbeddingService
from .errors import EmbeddingError, LifelogError, StoreQueryError, VectorIndexError
from .firestore_store import FirestoreStore, StoreRecord, StructuredStore
from .language import LanguageInfo, detect_language
from .vector_index import PineconeIndex, VectorIndex

__all__ = [
    "LifelogConfig",
    "load_config",
    "save_config",
    "EmbeddingService",
    "LifelogError",
    "StoreQueryError",
    "EmbeddingError",
    "VectorIndexError",
    "FirestoreStore",
    "StoreRecord",
    "StructuredStore",
    "LanguageInfo",
    "detect_language",
    "PineconeIndex",
    "VectorIndex",
]
