"""
Graph state definition for the debate RAG pipeline.

The RagState TypedDict defines all data that flows through the LangGraph
workflow. Each node reads from and writes to this state, which is created
for one question and dropped when the answer is returned.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, TypedDict

from debaterag.retrieval.chunker import Chunk
from debaterag.retrieval.vectorstore import VectorIndex
from debaterag.store.schemas import DebateRecord

if TYPE_CHECKING:
    from debaterag.config import Settings, VectorStoreName
    from debaterag.llm.factory import LLMProtocol
    from debaterag.retrieval.embeddings import EmbedderProtocol
    from debaterag.store.repository import DebateStore


class PipelineStage(str, Enum):
    """States of the per-question pipeline."""

    LOADING = "loading"
    CHUNKING = "chunking"
    INDEXING = "indexing"
    RETRIEVING = "retrieving"
    GENERATING = "generating"
    DONE = "done"
    EMPTY_HISTORY = "empty_history"
    FAILED = "failed"


TERMINAL_STAGES = frozenset(
    {PipelineStage.DONE, PipelineStage.EMPTY_HISTORY, PipelineStage.FAILED}
)


class RagState(TypedDict, total=False):
    """
    State schema for the debate RAG workflow.

    All fields are optional (total=False) to allow incremental population
    as the workflow progresses through nodes.

    Flow:
        1. Loader fetches the client's debates (populates debates, source_texts)
           or short-circuits with the no-history reply
        2. Chunker splits each debate text (populates chunks)
        3. Indexer embeds every chunk into a fresh index (populates index)
        4. Retriever embeds the question and takes the top-k (populates retrieved_chunks)
        5. Generator renders the prompt and calls the LLM (populates messages, reply)
    """

    # ==========================================================================
    # Input
    # ==========================================================================
    question: str
    """The user's question, verbatim."""

    client_id: Optional[str]
    """Restricts loading to one client's debates when set."""

    # ==========================================================================
    # State machine
    # ==========================================================================
    stage: PipelineStage
    """Current (or terminal) pipeline stage."""

    # ==========================================================================
    # Loading / chunking
    # ==========================================================================
    debates: list[DebateRecord]
    """Matching debate records, newest first."""

    source_texts: list[tuple[str, dict[str, str]]]
    """One flattened (text, metadata) blob per debate."""

    chunks: list[Chunk]
    """Chunks of all source texts, in source order."""

    # ==========================================================================
    # Indexing / retrieval
    # ==========================================================================
    index: VectorIndex
    """Request-scoped vector index, one entry per chunk."""

    retrieved_chunks: list[str]
    """Texts of the most similar chunks, most similar first."""

    # ==========================================================================
    # Generation
    # ==========================================================================
    messages: list[dict[str, str]]
    """Rendered prompt messages sent to the LLM."""

    reply: Optional[str]
    """Answer text (or the no-history reply)."""

    # ==========================================================================
    # Metadata
    # ==========================================================================
    error: Optional[str]
    """Error message if a stage failed (server-side only)."""

    error_type: Optional[str]
    """Class name of the error that failed the pipeline."""

    failed_stage: Optional[PipelineStage]
    """Stage that raised."""

    node_timings: dict[str, float]
    """Execution time per node in milliseconds."""

    processing_time_ms: float
    """Total processing time in milliseconds."""


def create_initial_state(question: str, client_id: Optional[str] = None) -> RagState:
    """
    Create an initial graph state from a user question.

    Args:
        question: The user's natural language question
        client_id: Optional client filter

    Returns:
        RagState with inputs populated and defaults set
    """
    return RagState(
        question=question,
        client_id=client_id,
        stage=PipelineStage.LOADING,
        debates=[],
        source_texts=[],
        chunks=[],
        retrieved_chunks=[],
        messages=[],
        reply=None,
        error=None,
        error_type=None,
        failed_stage=None,
        node_timings={},
    )


@dataclass
class PipelineDependencies:
    """External collaborators and tuning values for one pipeline run."""

    store: "DebateStore"
    embedder: "EmbedderProtocol"
    llm: "LLMProtocol"
    chunk_size: int = 2000
    chunk_overlap: int = 200
    vector_store: "VectorStoreName" = "memory"
    top_k: int = 5
    timeout: float = 60.0

    @classmethod
    def from_settings(
        cls,
        store: "DebateStore",
        embedder: "EmbedderProtocol",
        llm: "LLMProtocol",
        settings: Optional["Settings"] = None,
    ) -> "PipelineDependencies":
        if settings is None:
            from debaterag.config import settings

        return cls(
            store=store,
            embedder=embedder,
            llm=llm,
            chunk_size=settings.effective_chunk_size,
            chunk_overlap=settings.effective_chunk_overlap,
            vector_store=settings.effective_vector_store,
            top_k=settings.retrieval_top_k,
            timeout=settings.external_call_timeout,
        )


@dataclass
class RagResult:
    """Outcome of one question."""

    reply: Optional[str]
    stage: PipelineStage
    error: Optional[str] = None
    error_type: Optional[str] = None
    failed_stage: Optional[PipelineStage] = None
    chunk_count: int = 0
    retrieved_count: int = 0
    node_timings: dict[str, float] = field(default_factory=dict)
    processing_time_ms: float = 0.0
    index: Any = field(default=None, repr=False)

    @property
    def succeeded(self) -> bool:
        return self.stage in (PipelineStage.DONE, PipelineStage.EMPTY_HISTORY)

    @classmethod
    def from_state(cls, state: RagState) -> "RagResult":
        return cls(
            reply=state.get("reply"),
            stage=state.get("stage", PipelineStage.FAILED),
            error=state.get("error"),
            error_type=state.get("error_type"),
            failed_stage=state.get("failed_stage"),
            chunk_count=len(state.get("chunks", [])),
            retrieved_count=len(state.get("retrieved_chunks", [])),
            node_timings=dict(state.get("node_timings", {})),
            processing_time_ms=state.get("processing_time_ms", 0.0),
            index=state.get("index"),
        )
