"""
Vector index strategies and the request-scoped index builder.

Two interchangeable strategies share the VectorIndex protocol:
    - "faiss": FAISSIndex (approximate HNSW or exact flat search)
    - "memory": InMemoryVectorIndex (numpy brute-force cosine scan)

build_index() embeds every chunk and returns a freshly built index. The
index belongs to the caller and is dropped with it; nothing is cached.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from debaterag.config import VectorStoreName, settings
from debaterag.errors import EmbeddingError
from debaterag.retrieval.chunker import Chunk
from debaterag.retrieval.embeddings import EmbedderProtocol, normalize_embeddings
from debaterag.retrieval.indexer import FAISSIndex

logger = logging.getLogger(__name__)


@runtime_checkable
class VectorIndex(Protocol):
    """Protocol that all vector index strategies implement."""

    dimension: int

    @property
    def is_built(self) -> bool: ...

    @property
    def size(self) -> int: ...

    def build(self, chunks: list[Chunk], embeddings: NDArray[np.float32]) -> None: ...

    def search(
        self, query_embedding: NDArray[np.float32], k: int = 5
    ) -> list[tuple[Chunk, float]]: ...


class InMemoryVectorIndex:
    """
    Brute-force cosine similarity over vectors held in a numpy matrix.

    Functionally equivalent to FAISSIndex with a flat index; query cost is
    linear in the number of entries.

    Example:
        >>> index = InMemoryVectorIndex(dimension=384)
        >>> index.build(chunks, embeddings)
        >>> index.search(query_embedding, k=5)
    """

    def __init__(self, dimension: Optional[int] = None) -> None:
        self.dimension = dimension or settings.embedding_dimension
        self._matrix: NDArray[np.float32] | None = None
        self._chunks: list[Chunk] = []

    @property
    def is_built(self) -> bool:
        return self._matrix is not None

    @property
    def size(self) -> int:
        return len(self._chunks) if self._matrix is not None else 0

    def build(self, chunks: list[Chunk], embeddings: NDArray[np.float32]) -> None:
        """
        Store chunks and their normalised embeddings.

        Raises:
            ValueError: If chunks and embeddings have different lengths
            ValueError: If embeddings have wrong dimension
        """
        if len(chunks) != len(embeddings):
            raise ValueError(
                f"Chunks and embeddings must have same length: "
                f"got {len(chunks)} chunks and {len(embeddings)} embeddings"
            )

        if len(embeddings) > 0 and embeddings.shape[1] != self.dimension:
            raise ValueError(
                f"Embeddings must have dimension {self.dimension}, "
                f"got {embeddings.shape[1]}"
            )

        if len(embeddings) > 0:
            self._matrix = normalize_embeddings(np.asarray(embeddings, dtype=np.float32))
        else:
            self._matrix = np.empty((0, self.dimension), dtype=np.float32)
        self._chunks = list(chunks)

    def search(
        self, query_embedding: NDArray[np.float32], k: int = 5
    ) -> list[tuple[Chunk, float]]:
        """
        Return the k most similar chunks, score descending.

        Equal scores keep insertion order (stable sort).

        Raises:
            RuntimeError: If index has not been built
        """
        if self._matrix is None:
            raise RuntimeError("Index has not been built. Call build() first.")

        if k <= 0 or self.size == 0:
            return []

        query = normalize_embeddings(
            np.asarray(query_embedding, dtype=np.float32).reshape(1, -1)
        )[0]
        scores = self._matrix @ query

        order = np.argsort(-scores, kind="stable")[:k]
        return [(self._chunks[i], float(scores[i])) for i in order]


def create_vector_index(
    strategy: Optional[VectorStoreName] = None,
    dimension: Optional[int] = None,
) -> VectorIndex:
    """
    Create an empty vector index for the configured strategy.

    Args:
        strategy: "faiss" or "memory" (default from settings / preset)
        dimension: Vector dimension (default from settings)

    Raises:
        ValueError: If the strategy is unknown
    """
    strategy = strategy or settings.effective_vector_store

    if strategy == "faiss":
        return FAISSIndex(dimension=dimension)
    if strategy == "memory":
        return InMemoryVectorIndex(dimension=dimension)

    raise ValueError(f"Unknown vector store strategy: {strategy!r}")


async def build_index(
    chunks: list[Chunk],
    embedder: EmbedderProtocol,
    strategy: Optional[VectorStoreName] = None,
) -> VectorIndex:
    """
    Embed every chunk and build a fresh index.

    All chunk texts go to the embedder in one call (the provider batches and
    may issue batches concurrently). Either every chunk gets an entry or the
    build fails; there is no partial index.

    Args:
        chunks: Chunks to index
        embedder: Embedding provider (must be the one used for the question)
        strategy: Index strategy (default from settings / preset)

    Returns:
        Built index with exactly len(chunks) entries

    Raises:
        EmbeddingError: If the embedder fails or returns the wrong shape
    """
    texts = [chunk.content for chunk in chunks]

    try:
        embeddings = await embedder.aembed_texts(texts)
    except Exception as e:
        raise EmbeddingError(f"Failed to embed {len(texts)} chunks: {e}") from e

    embeddings = np.asarray(embeddings, dtype=np.float32)
    if len(texts) > 0 and (embeddings.ndim != 2 or embeddings.shape[0] != len(texts)):
        raise EmbeddingError(
            f"Embedder returned {embeddings.shape} for {len(texts)} chunks"
        )

    dimension = int(embeddings.shape[1]) if len(texts) > 0 else embedder.dimension
    index = create_vector_index(strategy, dimension=dimension)
    index.build(chunks, embeddings.reshape(len(texts), dimension))

    logger.debug(f"Built {type(index).__name__} with {index.size} entries (dim={dimension})")
    return index
