"""
FAISS index management for vector similarity search.

Approximate (HNSW) or exact (flat) inner-product search over normalised
chunk embeddings, with chunk metadata kept alongside the vectors and
optional persistence to disk.
"""

import json
from pathlib import Path
from typing import Literal, Optional

import faiss
import numpy as np
from numpy.typing import NDArray

from debaterag.config import settings
from debaterag.retrieval.chunker import Chunk
from debaterag.retrieval.embeddings import normalize_embeddings


class FAISSIndex:
    """
    FAISS-based vector index for chunk retrieval.

    Uses IndexHNSWFlat (approximate, inner product) by default or IndexFlatIP
    (exact). Vectors are normalised so inner product equals cosine similarity.

    Example:
        >>> index = FAISSIndex(dimension=384)
        >>> index.build(chunks, embeddings)
        >>> results = index.search(query_embedding, k=5)
        >>> index.save("data/index/debates.index")
    """

    def __init__(
        self,
        dimension: Optional[int] = None,
        index_type: Optional[Literal["hnsw", "flat"]] = None,
        hnsw_m: Optional[int] = None,
        ef_search: Optional[int] = None,
    ) -> None:
        """
        Initialize the FAISS index.

        Args:
            dimension: Vector dimension (default from settings)
            index_type: "hnsw" or "flat" (default from settings)
            hnsw_m: HNSW graph degree (default from settings)
            ef_search: HNSW search breadth (default from settings)
        """
        self.dimension = dimension or settings.embedding_dimension
        self.index_type = index_type or settings.faiss_index_type
        self.hnsw_m = hnsw_m or settings.hnsw_m
        self.ef_search = ef_search or settings.hnsw_ef_search
        self._index: faiss.Index | None = None
        self._chunks: list[Chunk] = []

    @property
    def is_built(self) -> bool:
        """Check if index has been built."""
        return self._index is not None

    @property
    def size(self) -> int:
        """Number of vectors in the index."""
        if self._index is None:
            return 0
        return int(self._index.ntotal)

    def _new_index(self) -> faiss.Index:
        if self.index_type == "hnsw":
            index = faiss.IndexHNSWFlat(self.dimension, self.hnsw_m, faiss.METRIC_INNER_PRODUCT)
            index.hnsw.efSearch = self.ef_search
            return index
        return faiss.IndexFlatIP(self.dimension)

    def build(
        self,
        chunks: list[Chunk],
        embeddings: NDArray[np.float32],
    ) -> None:
        """
        Build the index from chunks and their embeddings.

        Args:
            chunks: List of chunks
            embeddings: Array of shape (len(chunks), dimension)

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

        self._index = self._new_index()

        if len(embeddings) > 0:
            vectors = np.ascontiguousarray(normalize_embeddings(embeddings))
            self._index.add(vectors)

        self._chunks = list(chunks)

    def search(
        self,
        query_embedding: NDArray[np.float32],
        k: int = 5,
    ) -> list[tuple[Chunk, float]]:
        """
        Search for similar chunks.

        Args:
            query_embedding: Query vector of shape (dimension,)
            k: Number of results to return

        Returns:
            List of (chunk, similarity_score) tuples, sorted by score
            descending; equal scores keep insertion order

        Raises:
            RuntimeError: If index has not been built
        """
        if not self.is_built:
            raise RuntimeError("Index has not been built. Call build() first.")

        assert self._index is not None

        if k <= 0 or self.size == 0:
            return []

        query = np.ascontiguousarray(
            normalize_embeddings(np.asarray(query_embedding, dtype=np.float32).reshape(1, -1))
        )

        # Wider candidate pool; ties at the k-th position resolve by insertion order.
        fetch = min(self.size, max(k, self.ef_search))
        if self.index_type == "hnsw":
            self._index.hnsw.efSearch = max(self.ef_search, fetch)

        scores, indices = self._index.search(query, fetch)

        candidates = [
            (int(idx), float(score))
            for idx, score in zip(indices[0], scores[0])
            if idx >= 0
        ]
        candidates.sort(key=lambda pair: (-pair[1], pair[0]))

        return [(self._chunks[idx], score) for idx, score in candidates[:k]]

    def save(self, path: str | Path | None = None) -> None:
        """
        Save index and chunk metadata to disk.

        Args:
            path: Base path for index files (default from settings)

        Raises:
            RuntimeError: If index has not been built
        """
        if not self.is_built:
            raise RuntimeError("Index has not been built. Call build() first.")

        assert self._index is not None

        if path is None:
            path = settings.faiss_index_path

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        faiss.write_index(self._index, str(path.with_suffix(".index")))

        chunks_data = [
            {"content": chunk.content, "metadata": chunk.metadata}
            for chunk in self._chunks
        ]
        with path.with_suffix(".json").open("w", encoding="utf-8") as f:
            json.dump(chunks_data, f, indent=2, ensure_ascii=False)

    def load(self, path: str | Path | None = None) -> None:
        """
        Load index and chunk metadata from disk.

        Args:
            path: Base path to index files (default from settings)

        Raises:
            FileNotFoundError: If index files don't exist
        """
        if path is None:
            path = settings.faiss_index_path

        path = Path(path)

        index_file = path.with_suffix(".index")
        if not index_file.exists():
            raise FileNotFoundError(f"Index file not found: {index_file}")

        metadata_file = path.with_suffix(".json")
        if not metadata_file.exists():
            raise FileNotFoundError(f"Metadata file not found: {metadata_file}")

        self._index = faiss.read_index(str(index_file))
        self.dimension = int(self._index.d)
        self.index_type = "hnsw" if hasattr(self._index, "hnsw") else "flat"

        with metadata_file.open(encoding="utf-8") as f:
            chunks_data = json.load(f)

        self._chunks = [
            Chunk(content=item["content"], metadata=item["metadata"])
            for item in chunks_data
        ]

    @classmethod
    def from_disk(cls, path: str | Path | None = None) -> "FAISSIndex":
        """
        Create index instance from saved files.

        Args:
            path: Path to index file

        Returns:
            FAISSIndex with loaded data
        """
        index = cls()
        index.load(path)
        return index
