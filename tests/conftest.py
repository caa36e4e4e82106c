"""
Pytest configuration and shared fixtures.

Provides common fixtures for:
    - Configuration with test values
    - An in-memory SQLite debate store
    - Sample debates and chunks
    - Deterministic fake embedder and LLM providers
    - Temporary directories for indexes
"""

import asyncio
import re
import sys
import types
import zlib
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

import numpy as np
import pytest


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def mock_settings():
    """Provide test settings without requiring .env file."""
    with patch.dict(
        "os.environ",
        {
            "HF_API_KEY": "test-api-key",
            "GROQ_API_KEY": "test-groq-key",
            "EMBEDDING_MODEL": "sentence-transformers/all-MiniLM-L6-v2",
            "CHUNK_SIZE": "512",
            "CHUNK_OVERLAP": "64",
            "ENABLE_TRACING": "false",
        },
    ):
        from debaterag.config import Settings
        yield Settings(_env_file=None)


# =============================================================================
# Fake Providers
# =============================================================================

class HashEmbedder:
    """
    Deterministic bag-of-words embedder.

    Every lowercase word is hashed into one of `dimension` buckets, so texts
    sharing words get similar vectors and identical texts get identical ones.
    """

    def __init__(self, dimension: int = 64) -> None:
        self.model = "test/hash-embedder"
        self.dimension = dimension
        self.calls: list[list[str]] = []

    def _embed(self, text: str) -> np.ndarray:
        vector = np.zeros(self.dimension, dtype=np.float32)
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            vector[zlib.crc32(word.encode()) % self.dimension] += 1.0
        norm = np.linalg.norm(vector)
        if norm == 0:
            vector[0] = 1.0
            return vector
        return vector / norm

    def embed_texts(self, texts: list[str]) -> np.ndarray:
        self.calls.append(list(texts))
        if not texts:
            return np.empty((0, self.dimension), dtype=np.float32)
        return np.vstack([self._embed(text) for text in texts]).astype(np.float32)

    async def aembed_texts(self, texts: list[str]) -> np.ndarray:
        return self.embed_texts(texts)

    def embed_query(self, query: str) -> np.ndarray:
        return self.embed_texts([query])[0]


class FakeLLM:
    """Records prompts and answers with a fixed reply."""

    def __init__(self, reply: str = "  You argued that nuclear power is clean.  ") -> None:
        self.reply = reply
        self.calls: list[list[dict[str, str]]] = []

    def complete(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        return self.reply

    async def acomplete(self, messages: list[dict[str, str]]) -> str:
        return self.complete(messages)


@pytest.fixture
def hash_embedder():
    """Provide a deterministic embedder."""
    return HashEmbedder()


@pytest.fixture
def fake_llm():
    """Provide an LLM that records its prompts."""
    return FakeLLM()


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def debate_store():
    """Provide an empty in-memory SQLite debate store."""
    from debaterag.store import DebateStore

    store = DebateStore.from_url("sqlite://")
    store.init_schema()
    return store


@pytest.fixture
def sample_debates():
    """Provide debate payloads for two clients, oldest first."""
    from debaterag.store import ChatTurn, DebateCreate

    base = datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)
    return [
        DebateCreate(
            client_id="u1",
            topic="Nuclear power should replace fossil fuels",
            user_role="for",
            chat_history=[
                ChatTurn(speaker="user", content="Nuclear plants emit almost no carbon during operation."),
                ChatTurn(speaker="AI Opponent", content="The waste stays dangerous for thousands of years."),
            ],
            adjudication_result={"winner": "user"},
            created_at=base,
        ),
        DebateCreate(
            client_id="u1",
            topic="Social media does more harm than good",
            user_role="against",
            chat_history=[
                ChatTurn(speaker="AI Opponent", content="Feeds are tuned for outrage and anxiety."),
                ChatTurn(speaker="user", content="Small businesses reach customers through social platforms."),
            ],
            created_at=base + timedelta(days=4),
        ),
        DebateCreate(
            client_id="u2",
            topic="Homework should be abolished",
            user_role="for",
            chat_history=[
                ChatTurn(speaker="user", content="Unstructured time builds creativity."),
            ],
            created_at=base + timedelta(days=6),
        ),
    ]


@pytest.fixture
def seeded_store(debate_store, sample_debates):
    """Provide a store holding the sample debates."""
    for debate in sample_debates:
        debate_store.create(debate)
    return debate_store


@pytest.fixture
def pipeline_deps(seeded_store, hash_embedder, fake_llm):
    """Provide pipeline dependencies wired to fakes."""
    from debaterag.graph.state import PipelineDependencies

    return PipelineDependencies(
        store=seeded_store,
        embedder=hash_embedder,
        llm=fake_llm,
        chunk_size=2000,
        chunk_overlap=200,
        vector_store="memory",
        top_k=5,
        timeout=5.0,
    )


# =============================================================================
# Sample Data Fixtures
# =============================================================================

@pytest.fixture
def sample_chunks():
    """Provide sample debate chunks for testing."""
    from debaterag.retrieval.chunker import Chunk

    texts = [
        "user: Nuclear plants emit almost no carbon during operation.",
        "AI Opponent: The waste stays dangerous for thousands of years.",
        "user: Small businesses reach customers through social platforms.",
        "AI Opponent: Feeds are tuned for outrage and anxiety.",
        "user: Unstructured time builds creativity.",
    ]
    return [
        Chunk(content=text, metadata={"topic": "sample", "client_id": "u1", "chunk_index": i})
        for i, text in enumerate(texts)
    ]


@pytest.fixture
def sample_embeddings():
    """Provide sample embeddings for testing."""
    rng = np.random.default_rng(42)
    embeddings = rng.random((5, 384)).astype(np.float32)
    norms = np.linalg.norm(embeddings, axis=1, keepdims=True)
    return embeddings / norms


@pytest.fixture
def sample_question():
    """Provide a sample question about the debate history."""
    return "What did I say about nuclear carbon emissions?"


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def tmp_index_dir(tmp_path: Path) -> Path:
    """Provide temporary directory for FAISS index."""
    index_dir = tmp_path / "index"
    index_dir.mkdir()
    return index_dir


# =============================================================================
# Helpers
# =============================================================================

@pytest.fixture
def run():
    """Run a coroutine to completion."""
    return asyncio.run


@pytest.fixture
def fake_sentence_transformers():
    """Install a stand-in sentence_transformers module for the duration of a test."""
    model = MagicMock()
    model.get_sentence_embedding_dimension.return_value = 3
    model.encode.side_effect = lambda texts, **kwargs: np.array(
        [[float(len(t)), 0.0, 1.0] for t in texts], dtype=np.float32
    )

    module = types.ModuleType("sentence_transformers")
    module.SentenceTransformer = MagicMock(return_value=model)

    with patch.dict(sys.modules, {"sentence_transformers": module}):
        yield module
