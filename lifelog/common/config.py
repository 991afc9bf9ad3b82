"""
Configuration Management for the Lifelog query core

Loads configuration from ~/.lifelog/config.json and environment variables.
Every limit the router and executors use (topK, context length, timeouts,
collection names) lives here and is passed in at construction time.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, List

from dotenv import load_dotenv

logger = logging.getLogger("lifelog.common.config")

# Default config paths
CONFIG_DIR = Path.home() / ".lifelog"
CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULT_COLLECTIONS = {
    "health": "healthData",
    "location": "locationData",
    "voice": "voiceNotes",
    "photo": "photoMemories",
    "text": "textNotes",
    "event": "events",
}

# Numeric fields tried in order when aggregating a data type
DEFAULT_AGGREGATION_FIELDS = {
    "health": ["value", "steps"],
    "location": ["visitCount"],
    "voice": ["duration"],
    "event": ["duration"],
    "photo": [],
    "text": [],
}


@dataclass
class StoreConfig:
    """Structured store (Firestore) configuration"""
    project: str = ""
    database: str = "(default)"
    user_field: str = "userId"
    date_field: str = "createdAt"
    activity_field: str = "activityTag"
    collections: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLLECTIONS))


@dataclass
class VectorIndexConfig:
    """Pinecone configuration"""
    api_key: str = ""
    index_name: str = "lifelog-index"
    namespace: str = ""
    date_fields: List[str] = field(default_factory=lambda: ["date", "createdAt", "timestamp"])


@dataclass
class EmbeddingConfig:
    """Embedding model configuration"""
    model: str = "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"


@dataclass
class RouterConfig:
    """Limits for routing, execution and context assembly"""
    top_k: int = 10
    degraded_top_k: int = 50  # numeric question, but no data type resolved
    max_sources: int = 10
    context_max_chars: int = 8000
    snippet_max_chars: int = 200
    timeout_seconds: float = 10.0
    pattern_window_days: int = 90
    aggregation_fields: Dict[str, List[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_AGGREGATION_FIELDS.items()}
    )


@dataclass
class LifelogConfig:
    """Main configuration"""
    store: StoreConfig = field(default_factory=StoreConfig)
    vector_index: VectorIndexConfig = field(default_factory=VectorIndexConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    router: RouterConfig = field(default_factory=RouterConfig)
    _env_sourced_keys: set = field(default_factory=set, repr=False)


def _parse_store_config(data: dict) -> StoreConfig:
    """Parse store section from config dict"""
    store_data = data.get("store", {})
    collections = dict(DEFAULT_COLLECTIONS)
    collections.update(store_data.get("collections", {}))
    return StoreConfig(
        project=store_data.get("project", ""),
        database=store_data.get("database", "(default)"),
        user_field=store_data.get("user_field", "userId"),
        date_field=store_data.get("date_field", "createdAt"),
        activity_field=store_data.get("activity_field", "activityTag"),
        collections=collections,
    )


def _parse_vector_index_config(data: dict) -> VectorIndexConfig:
    """Parse vector_index section; accepts the older "pinecone" key"""
    index_data = data.get("vector_index") or data.get("pinecone", {})
    return VectorIndexConfig(
        api_key=index_data.get("api_key", ""),
        index_name=index_data.get("index_name", "lifelog-index"),
        namespace=index_data.get("namespace", ""),
        date_fields=index_data.get("date_fields", ["date", "createdAt", "timestamp"]),
    )


def _parse_embedding_config(data: dict) -> EmbeddingConfig:
    embedding_data = data.get("embedding", {})
    return EmbeddingConfig(
        model=embedding_data.get("model", "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2"),
    )


def _parse_router_config(data: dict) -> RouterConfig:
    """Parse router section from config dict"""
    router_data = data.get("router", {})
    aggregation_fields = {k: list(v) for k, v in DEFAULT_AGGREGATION_FIELDS.items()}
    aggregation_fields.update(router_data.get("aggregation_fields", {}))
    return RouterConfig(
        top_k=router_data.get("top_k", 10),
        degraded_top_k=router_data.get("degraded_top_k", 50),
        max_sources=router_data.get("max_sources", 10),
        context_max_chars=router_data.get("context_max_chars", 8000),
        snippet_max_chars=router_data.get("snippet_max_chars", 200),
        timeout_seconds=router_data.get("timeout_seconds", 10.0),
        pattern_window_days=router_data.get("pattern_window_days", 90),
        aggregation_fields=aggregation_fields,
    )


def load_config() -> LifelogConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (a local .env file is honoured)
    2. Config file (~/.lifelog/config.json)
    3. Default values
    """
    load_dotenv()
    config = LifelogConfig()

    if CONFIG_PATH.exists():
        try:
            with open(CONFIG_PATH) as f:
                data = json.load(f)

            config.store = _parse_store_config(data)
            config.vector_index = _parse_vector_index_config(data)
            config.embedding = _parse_embedding_config(data)
            config.router = _parse_router_config(data)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Failed to load config file %s: %s", CONFIG_PATH, e)

    # Environment variable overrides
    if os.getenv("FIRESTORE_PROJECT"):
        config.store.project = os.getenv("FIRESTORE_PROJECT")
    if os.getenv("FIRESTORE_DATABASE"):
        config.store.database = os.getenv("FIRESTORE_DATABASE")

    if os.getenv("PINECONE_API_KEY"):
        config.vector_index.api_key = os.getenv("PINECONE_API_KEY")
        config._env_sourced_keys.add("vector_index.api_key")
    if os.getenv("PINECONE_INDEX_NAME"):
        config.vector_index.index_name = os.getenv("PINECONE_INDEX_NAME")
    if os.getenv("PINECONE_NAMESPACE"):
        config.vector_index.namespace = os.getenv("PINECONE_NAMESPACE")

    if os.getenv("EMBEDDING_MODEL"):
        config.embedding.model = os.getenv("EMBEDDING_MODEL")

    if os.getenv("LIFELOG_TOP_K"):
        config.router.top_k = int(os.getenv("LIFELOG_TOP_K"))
    if os.getenv("LIFELOG_QUERY_TIMEOUT"):
        config.router.timeout_seconds = float(os.getenv("LIFELOG_QUERY_TIMEOUT"))

    return config


def save_config(config: LifelogConfig) -> None:
    """Save configuration to file.

    The Pinecone API key is written as an empty string when it came from the
    environment so that secrets are not persisted to disk.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    env_sourced = getattr(config, "_env_sourced_keys", set())
    api_key = "" if "vector_index.api_key" in env_sourced else config.vector_index.api_key

    data = {
        "store": {
            "project": config.store.project,
            "database": config.store.database,
            "user_field": config.store.user_field,
            "date_field": config.store.date_field,
            "activity_field": config.store.activity_field,
            "collections": config.store.collections,
        },
        "vector_index": {
            "api_key": api_key,
            "index_name": config.vector_index.index_name,
            "namespace": config.vector_index.namespace,
            "date_fields": config.vector_index.date_fields,
        },
        "embedding": {
            "model": config.embedding.model,
        },
        "router": {
            "top_k": config.router.top_k,
            "degraded_top_k": config.router.degraded_top_k,
            "max_sources": config.router.max_sources,
            "context_max_chars": config.router.context_max_chars,
            "snippet_max_chars": config.router.snippet_max_chars,
            "timeout_seconds": config.router.timeout_seconds,
            "pattern_window_days": config.router.pattern_window_days,
            "aggregation_fields": config.router.aggregation_fields,
        },
    }

    with open(CONFIG_PATH, "w") as f:
        json.dump(data, f, indent=2)

    # Set secure permissions
    CONFIG_PATH.chmod(0o600)
