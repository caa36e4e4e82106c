"""
Indexer node: Embeds every chunk into a fresh, request-scoped vector index.
"""

import logging

from debaterag.errors import EmbeddingError
from debaterag.graph.state import PipelineDependencies, RagState
from debaterag.nodes.utils import bounded
from debaterag.retrieval.vectorstore import build_index
from debaterag.tracing import add_span_attributes

logger = logging.getLogger(__name__)


async def indexer_node(state: RagState, deps: PipelineDependencies) -> RagState:
    """
    Build the vector index for this question.

    Args:
        state: Current graph state with chunks
        deps: Pipeline dependencies (embedder, strategy, timeout)

    Returns:
        Updated state with index populated (index.size == len(chunks))
    """
    chunks = state.get("chunks", [])

    index = await bounded(
        build_index(chunks, deps.embedder, strategy=deps.vector_store),
        deps.timeout,
        EmbeddingError,
        f"Embedding {len(chunks)} chunks",
    )

    logger.debug(f"Indexed {index.size} chunks with the {deps.vector_store} strategy")
    add_span_attributes(chunks_indexed=index.size, vector_store=deps.vector_store)

    state["index"] = index
    return state
