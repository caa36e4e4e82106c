"""
Retriever node: Fetches the chunks most relevant to the question.

Embeds the user's question with the same embedder that built the index and
takes the top-k most similar chunks (k = 5 by default).
"""

from debaterag.errors import EmbeddingError
from debaterag.graph.state import PipelineDependencies, RagState
from debaterag.nodes.utils import bounded
from debaterag.retrieval.retriever import retrieve


async def retriever_node(state: RagState, deps: PipelineDependencies) -> RagState:
    """
    Retrieve relevant chunk texts for the question.

    Args:
        state: Current graph state with question and index
        deps: Pipeline dependencies (embedder, top_k, timeout)

    Returns:
        Updated state with retrieved_chunks populated (0..top_k texts)
    """
    state["retrieved_chunks"] = await bounded(
        retrieve(state["index"], deps.embedder, state["question"], deps.top_k),
        deps.timeout,
        EmbeddingError,
        "Retrieving chunks",
    )
    return state
