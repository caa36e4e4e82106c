"""
DebateRAG: question answering over stored debate transcripts

This package stores debate transcripts in a document store and answers
natural-language questions about a client's debate history with a
retrieval-augmented generation (RAG) pipeline that is rebuilt for every
question.

Key Components:
    - store: SQLAlchemy-backed debate document store
    - retrieval: Chunking, embeddings, FAISS / in-memory vector indexes
    - nodes: LangGraph nodes (load, chunk, index, retrieve, generate)
    - graph: LangGraph state machine and orchestration entry point
    - llm: Pluggable chat-completion providers
    - api: FastAPI REST endpoints
    - tracing: Arize Phoenix observability integration

Example:
    >>> import asyncio
    >>> from debaterag.graph import run_question
    >>> from debaterag.retrieval.resources import get_pipeline_dependencies
    >>> result = asyncio.run(
    ...     run_question("Which side did I argue most often?", "u1", get_pipeline_dependencies())
    ... )
    >>> print(result.reply)
"""

__version__ = "0.1.0"

from debaterag.config import settings

__all__ = [
    "__version__",
    "settings",
]
