"""
LangGraph nodes for the debate RAG pipeline.

Each node represents one working state of the pipeline:
    - loader: Fetches the client's debates and flattens them to text
    - chunker: Splits the texts into overlapping chunks
    - indexer: Embeds every chunk into a fresh vector index
    - retriever: Embeds the question and takes the top-k chunks
    - generator: Renders the prompt and calls the LLM

All nodes follow the signature:
    async def node_name(state: RagState, deps: PipelineDependencies) -> RagState
"""

from debaterag.nodes.chunking import chunker_node
from debaterag.nodes.generator import generator_node
from debaterag.nodes.indexing import indexer_node
from debaterag.nodes.loader import loader_node
from debaterag.nodes.retriever import retriever_node

__all__ = [
    "loader_node",
    "chunker_node",
    "indexer_node",
    "retriever_node",
    "generator_node",
]
