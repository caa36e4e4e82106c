"""
Question retrieval over a built vector index.
"""

import numpy as np

from debaterag.errors import EmbeddingError
from debaterag.retrieval.embeddings import EmbedderProtocol
from debaterag.retrieval.vectorstore import VectorIndex


async def retrieve(
    index: VectorIndex,
    embedder: EmbedderProtocol,
    question: str,
    k: int,
) -> list[str]:
    """
    Return the texts of the k chunks most similar to the question.

    The question must be embedded by the same embedder that built the index;
    a dimension mismatch means the vectors live in different spaces.

    Args:
        index: Built vector index
        embedder: Embedding provider used to build the index
        question: Raw question text
        k: Maximum number of chunks

    Returns:
        Chunk texts, most similar first (possibly fewer than k)

    Raises:
        EmbeddingError: If the embedder fails or its output does not match
            the index dimension
    """
    try:
        vectors = await embedder.aembed_texts([question])
    except Exception as e:
        raise EmbeddingError(f"Failed to embed question: {e}") from e

    query_embedding = np.asarray(vectors, dtype=np.float32).reshape(-1)
    if query_embedding.shape[0] != index.dimension:
        raise EmbeddingError(
            f"Question embedding has dimension {query_embedding.shape[0]}, "
            f"index expects {index.dimension}"
        )

    return [chunk.content for chunk, _score in index.search(query_embedding, k=k)]
