"""
Chunker node: Splits every flattened debate into overlapping chunks.
"""

from debaterag.graph.state import PipelineDependencies, RagState
from debaterag.retrieval.chunker import chunk_documents


async def chunker_node(state: RagState, deps: PipelineDependencies) -> RagState:
    """Populate state["chunks"] from state["source_texts"]."""
    state["chunks"] = chunk_documents(
        state.get("source_texts", []),
        chunk_size=deps.chunk_size,
        overlap=deps.chunk_overlap,
    )
    return state
