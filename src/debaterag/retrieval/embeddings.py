"""
Embedding generation for debate chunks and questions.

Two interchangeable providers:
    - LocalEmbedder: sentence-transformers model loaded in-process
    - HuggingFaceEmbedder: HuggingFace Inference API (feature-extraction)

Both return L2-normalised float32 vectors so that inner product equals
cosine similarity.
"""

import asyncio
import logging
from typing import Optional, Protocol, runtime_checkable

import httpx
import numpy as np
from numpy.typing import NDArray

from debaterag.config import settings

logger = logging.getLogger(__name__)


@runtime_checkable
class EmbedderProtocol(Protocol):
    """Protocol that all embedding providers must implement."""

    model: str
    dimension: int

    def embed_texts(self, texts: list[str]) -> NDArray[np.float32]:
        """Embed a batch of texts, one row per text."""
        ...

    async def aembed_texts(self, texts: list[str]) -> NDArray[np.float32]:
        """Async version of embed_texts."""
        ...

    def embed_query(self, query: str) -> NDArray[np.float32]:
        """Embed a single text."""
        ...


def normalize_embeddings(embeddings: NDArray[np.float32]) -> NDArray[np.float32]:
    """
    Normalize embeddings to unit length for cosine similarity.

    Args:
        embeddings: Array of shape (n, dimension)

    Returns:
        Normalized embeddings of same shape
    """
    norms = np.linalg.norm(embeddings, axis=1, keepdims=True)
    # Avoid division by zero
    norms = np.where(norms == 0, 1, norms)
    return (embeddings / norms).astype(np.float32)


class LocalEmbedder:
    """
    Generate embeddings with a local sentence-transformers model.

    Example:
        >>> embedder = LocalEmbedder()
        >>> vectors = embedder.embed_texts(["Pro: nuclear power is clean"])
        >>> vectors.shape
        (1, 384)
    """

    def __init__(
        self,
        model: Optional[str] = None,
        batch_size: Optional[int] = None,
        show_progress: bool = False,
    ) -> None:
        from sentence_transformers import SentenceTransformer

        self.model_name = model or settings.embedding_model
        self.model = self.model_name
        self.batch_size = batch_size or settings.embedding_batch_size
        self.show_progress = show_progress

        self._model = SentenceTransformer(self.model_name)
        self.dimension = int(self._model.get_sentence_embedding_dimension())

    def embed_texts(self, texts: list[str]) -> NDArray[np.float32]:
        """
        Generate embeddings for a list of texts.

        Args:
            texts: List of texts to embed

        Returns:
            Array of shape (len(texts), dimension)
        """
        if not texts:
            return np.empty((0, self.dimension), dtype=np.float32)

        embeddings = self._model.encode(
            texts,
            batch_size=self.batch_size,
            show_progress_bar=self.show_progress,
            convert_to_numpy=True,
        )
        return normalize_embeddings(np.asarray(embeddings, dtype=np.float32))

    async def aembed_texts(self, texts: list[str]) -> NDArray[np.float32]:
        """Run embed_texts in a worker thread so the event loop stays free."""
        return await asyncio.to_thread(self.embed_texts, texts)

    def embed_query(self, query: str) -> NDArray[np.float32]:
        """
        Generate embedding for a single query.

        Returns:
            Array of shape (dimension,)
        """
        return self.embed_texts([query])[0]


class HuggingFaceEmbedder:
    """
    Generate embeddings using HuggingFace Inference API.

    Batches are sent concurrently from aembed_texts; a failed request fails
    the whole call.

    Example:
        >>> embedder = HuggingFaceEmbedder()
        >>> vectors = embedder.embed_texts(["Which debates did I lose?"])
        >>> vectors.shape
        (1, 384)
    """

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        batch_size: int = 32,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize the embedder.

        Args:
            model: HuggingFace model ID (default from settings)
            api_key: HuggingFace API key (default from settings)
            batch_size: Number of texts per API call
            timeout: HTTP timeout in seconds
        """
        self.model = model or settings.embedding_model
        self.api_key = api_key or settings.hf_api_key_value
        self.batch_size = batch_size
        self.timeout = timeout
        self.dimension = settings.embedding_dimension
        self.base_url = "https://api-inference.huggingface.co/pipeline/feature-extraction"

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.model}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _batches(self, texts: list[str]) -> list[list[str]]:
        return [
            texts[i : i + self.batch_size]
            for i in range(0, len(texts), self.batch_size)
        ]

    def embed_texts(self, texts: list[str]) -> NDArray[np.float32]:
        """
        Generate embeddings for a list of texts.

        Args:
            texts: List of texts to embed

        Returns:
            Array of shape (len(texts), embedding_dimension)

        Raises:
            httpx.HTTPStatusError: If the API returns an error status
            httpx.HTTPError: If a network error occurs
        """
        if not texts:
            return np.empty((0, self.dimension), dtype=np.float32)

        with httpx.Client(timeout=self.timeout) as client:
            results = []
            for batch in self._batches(texts):
                response = client.post(self.url, json={"inputs": batch}, headers=self._headers())
                response.raise_for_status()
                results.append(self._parse(response))

        return np.vstack(results)

    async def aembed_texts(self, texts: list[str]) -> NDArray[np.float32]:
        """
        Async version of embed_texts for concurrent processing.

        asyncio.gather keeps batch order, so row i always belongs to texts[i]
        whatever order the responses arrive in.
        """
        if not texts:
            return np.empty((0, self.dimension), dtype=np.float32)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            tasks = [self._embed_batch_async(client, batch) for batch in self._batches(texts)]
            batch_results = await asyncio.gather(*tasks)

        return np.vstack(batch_results)

    async def _embed_batch_async(
        self, client: httpx.AsyncClient, texts: list[str]
    ) -> NDArray[np.float32]:
        response = await client.post(self.url, json={"inputs": texts}, headers=self._headers())
        response.raise_for_status()
        return self._parse(response)

    def _parse(self, response: httpx.Response) -> NDArray[np.float32]:
        embeddings = np.array(response.json(), dtype=np.float32)
        if embeddings.ndim != 2:
            raise ValueError(
                f"Unexpected embedding payload shape {embeddings.shape} from {self.model}"
            )
        return normalize_embeddings(embeddings)

    def embed_query(self, query: str) -> NDArray[np.float32]:
        """
        Generate embedding for a single query.

        Returns:
            Array of shape (embedding_dimension,)
        """
        return self.embed_texts([query])[0]
