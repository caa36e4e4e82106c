"""
Singleton resource management for the store, embedders and LLM client.

Provides cached instances of expensive resources that should only be
created once per application lifecycle. Uses @lru_cache pattern (same
as config.py settings singleton) so every request shares them.

Key resources:
    - DebateStore (SQLAlchemy engine and session factory)
    - LocalEmbedder (sentence-transformer model, ~130MB, a few seconds to load)
    - HuggingFaceEmbedder (API client, instant)
    - LLM client (OpenAI-compatible endpoint or HuggingFace endpoint)

Vector indexes are never cached here: each question builds its own.

Usage:
    # In API handlers or the CLI
    deps = get_pipeline_dependencies()

    # In API startup (explicit initialization)
    status = initialize_resources()

    # In tests (reset cache)
    clear_resource_cache()
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy.engine import make_url

from debaterag.config import settings

if TYPE_CHECKING:
    from debaterag.graph.state import PipelineDependencies
    from debaterag.llm.factory import LLMProtocol
    from debaterag.retrieval.embeddings import (
        EmbedderProtocol,
        HuggingFaceEmbedder,
        LocalEmbedder,
    )
    from debaterag.store.repository import DebateStore

logger = logging.getLogger(__name__)


def _ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_debate_store() -> "DebateStore":
    """
    Get or create the global DebateStore instance.

    First call creates the engine and the debates table if needed.

    Returns:
        DebateStore: Store ready for queries

    Raises:
        StoreError: If the schema cannot be created
    """
    from debaterag.store.repository import DebateStore

    _ensure_sqlite_directory(settings.database_url)

    store = DebateStore.from_url(settings.database_url)
    store.init_schema()

    logger.info(f"Debate store ready ({make_url(settings.database_url).get_backend_name()})")

    return store


@lru_cache(maxsize=1)
def get_local_embedder() -> "LocalEmbedder":
    """
    Get or create the global LocalEmbedder instance.

    First call loads the sentence-transformer model.
    Subsequent calls return the cached instance (instant).

    Example:
        >>> embedder = get_local_embedder()
        >>> embedding = embedder.embed_query("Which motions did I oppose?")
    """
    from debaterag.retrieval.embeddings import LocalEmbedder

    logger.info(
        f"Loading local embedder model: {settings.embedding_model} "
        "(this may take a few seconds)..."
    )

    embedder = LocalEmbedder(
        model=settings.embedding_model,
        batch_size=settings.embedding_batch_size,
        show_progress=False,
    )

    logger.info(f"Local embedder loaded successfully ({embedder.model_name}, dim={embedder.dimension})")

    return embedder


@lru_cache(maxsize=1)
def get_hf_embedder() -> "HuggingFaceEmbedder":
    """
    Get or create the global HuggingFaceEmbedder instance.

    Initializes the HuggingFace Inference API client (instant).
    """
    from debaterag.retrieval.embeddings import HuggingFaceEmbedder

    logger.info(
        f"Initializing HuggingFace embedder for model: {settings.embedding_model}"
    )

    return HuggingFaceEmbedder(
        model=settings.embedding_model,
        api_key=settings.hf_api_key_value,
        batch_size=settings.embedding_batch_size,
        timeout=settings.external_call_timeout,
    )


def get_embedder() -> "EmbedderProtocol":
    """Return the configured embedder (local model or HF Inference API)."""
    if settings.use_local_embeddings:
        return get_local_embedder()
    return get_hf_embedder()


@lru_cache(maxsize=1)
def get_llm() -> "LLMProtocol":
    """Get or create the global LLM client."""
    from debaterag.llm.factory import create_llm

    llm = create_llm()
    logger.info(f"LLM client initialized ({type(llm).__name__}, model={settings.llm_model})")
    return llm


def get_pipeline_dependencies() -> "PipelineDependencies":
    """
    Assemble the dependencies for one pipeline run from the cached resources.

    Returns:
        PipelineDependencies with tuning values taken from settings
    """
    from debaterag.graph.state import PipelineDependencies

    return PipelineDependencies.from_settings(
        store=get_debate_store(),
        embedder=get_embedder(),
        llm=get_llm(),
        settings=settings,
    )


def initialize_resources() -> dict[str, bool]:
    """
    Explicitly initialize all resources for eager loading.

    Called at API server startup to front-load expensive operations
    before handling requests. For CLI, resources lazy-load instead.

    Returns:
        dict: Status of each resource initialization
            - "store": True if the schema is ready
            - "embedder": True if loaded successfully
            - "llm": True if the client was created

    Raises:
        RuntimeError: If any resource fails to initialize
    """
    status = {}

    try:
        get_debate_store()
        status["store"] = True
    except Exception as e:
        status["store"] = False
        raise RuntimeError(f"Failed to initialise debate store: {e}") from e

    try:
        embedder = get_embedder()
        status["embedder"] = embedder.dimension > 0
    except Exception as e:
        status["embedder"] = False
        raise RuntimeError(f"Failed to load embedder: {e}") from e

    try:
        get_llm()
        status["llm"] = True
    except Exception as e:
        status["llm"] = False
        raise RuntimeError(f"Failed to create LLM client: {e}") from e

    return status


def clear_resource_cache() -> None:
    """
    Clear all cached resources.

    Used in tests to reset state between test cases.
    In production, resources persist for application lifetime.
    """
    get_debate_store.cache_clear()
    get_local_embedder.cache_clear()
    get_hf_embedder.cache_clear()
    get_llm.cache_clear()
    logger.debug("Resource cache cleared")
