"""
LangGraph workflow construction and execution.

Defines the per-question RAG state machine:
    - Loader ends the run early when the client has no debate history
    - Every stage that raises ends the run in FAILED
    - Otherwise the stages run in order and the generator finishes in DONE

Graph visualization can be exported via get_graph_visualization().
"""

import logging
import time
from typing import Awaitable, Callable, Literal, Optional

from langgraph.graph import END, START, StateGraph
from langgraph.graph.state import CompiledStateGraph

from debaterag import errors
from debaterag.errors import DebateRagError, InternalError, ValidationError
from debaterag.graph.state import (
    TERMINAL_STAGES,
    PipelineDependencies,
    PipelineStage,
    RagResult,
    RagState,
    create_initial_state,
)
from debaterag.nodes import (
    chunker_node,
    generator_node,
    indexer_node,
    loader_node,
    retriever_node,
)
from debaterag.tracing import add_span_attributes, record_exception, traced

logger = logging.getLogger(__name__)

StageFunc = Callable[[RagState, PipelineDependencies], Awaitable[RagState]]

# Node name, working stage, node function; in execution order.
PIPELINE: list[tuple[str, PipelineStage, StageFunc]] = [
    ("loader", PipelineStage.LOADING, loader_node),
    ("chunker", PipelineStage.CHUNKING, chunker_node),
    ("indexer", PipelineStage.INDEXING, indexer_node),
    ("retriever", PipelineStage.RETRIEVING, retriever_node),
    ("generator", PipelineStage.GENERATING, generator_node),
]


def create_stage_node(
    node_func: StageFunc,
    node_name: str,
    stage: PipelineStage,
    deps: PipelineDependencies,
) -> Callable[[RagState], Awaitable[RagState]]:
    """
    Wrap a node function with stage tracking, timing and failure capture.

    The wrapped node marks the state with its working stage, records its
    execution time in state['node_timings'] and turns any exception into the
    FAILED stage. Unexpected exceptions become InternalError.

    Args:
        node_func: The node function
        node_name: Name of the node for timing tracking
        stage: Working stage the node represents
        deps: Dependencies bound to this graph

    Returns:
        Single-argument async node suitable for StateGraph.add_node
    """
    async def stage_node(state: RagState) -> RagState:
        state["stage"] = stage
        start_time = time.perf_counter()
        try:
            state = await node_func(state, deps)
        except Exception as exc:
            error = exc if isinstance(exc, DebateRagError) else InternalError(str(exc))
            logger.exception(f"Stage {stage.value} failed: {error.message}")
            record_exception(exc)
            state["stage"] = PipelineStage.FAILED
            state["failed_stage"] = stage
            state["error"] = error.message
            state["error_type"] = type(error).__name__
        finally:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            timings = state.setdefault("node_timings", {})
            timings[node_name] = timings.get(node_name, 0.0) + elapsed_ms

        return state

    stage_node.__name__ = f"{node_name}_stage"
    return stage_node


def route_after_stage(state: RagState) -> Literal["continue", "stop"]:
    """
    Conditional edge: Stop on a terminal stage.

    Returns:
        "stop" on DONE, EMPTY_HISTORY or FAILED, "continue" otherwise
    """
    if state.get("stage") in TERMINAL_STAGES:
        return "stop"
    return "continue"


def build_graph(deps: PipelineDependencies) -> CompiledStateGraph:
    """
    Build and compile the debate RAG graph.

    Graph structure:
        START
          │
          ▼
        [loader] ── empty history / failed ──────────► END
          │
          ▼
        [chunker] ── failed ─────────────────────────► END
          │
          ▼
        [indexer] ── failed ─────────────────────────► END
          │
          ▼
        [retriever] ── failed ───────────────────────► END
          │
          ▼
        [generator] ── done / failed ────────────────► END

    Args:
        deps: Store, embedder, LLM and tuning values for this run

    Returns:
        Compiled LangGraph ready for execution
    """
    workflow = StateGraph(RagState)

    for node_name, stage, node_func in PIPELINE:
        workflow.add_node(node_name, create_stage_node(node_func, node_name, stage, deps))

    workflow.add_edge(START, PIPELINE[0][0])

    for (node_name, _, _), (next_name, _, _) in zip(PIPELINE, PIPELINE[1:]):
        workflow.add_conditional_edges(
            node_name,
            route_after_stage,
            {
                "continue": next_name,
                "stop": END,
            },
        )

    workflow.add_edge(PIPELINE[-1][0], END)

    return workflow.compile()


@traced("rag.question")
async def run_question(
    question: Optional[str],
    client_id: Optional[str],
    deps: PipelineDependencies,
) -> RagResult:
    """
    Execute a question through the debate RAG pipeline.

    Args:
        question: User's natural language question
        client_id: Restrict the history to this client (None means all debates)
        deps: Store, embedder, LLM and tuning values

    Returns:
        RagResult with the reply, final stage, failure details and timings

    Raises:
        ValidationError: If the question is missing or blank (the store is
            never queried)
    """
    if question is None or not question.strip():
        raise ValidationError("Question is required.")

    state = create_initial_state(question, client_id)
    graph = build_graph(deps)

    start_time = time.perf_counter()
    final_state = await graph.ainvoke(state)
    elapsed_ms = (time.perf_counter() - start_time) * 1000

    final_state["processing_time_ms"] = elapsed_ms

    result = RagResult.from_state(final_state)
    add_span_attributes(
        stage=result.stage.value,
        chunk_count=result.chunk_count,
        retrieved_count=result.retrieved_count,
    )
    logger.info(
        f"Question finished in {result.stage.value} after {elapsed_ms:.1f}ms "
        f"({result.chunk_count} chunks, {result.retrieved_count} retrieved)"
    )
    return result


def raise_for_failure(result: RagResult) -> RagResult:
    """
    Re-raise a FAILED result as the application error that caused it.

    Returns the result unchanged when the run succeeded.
    """
    if result.stage != PipelineStage.FAILED:
        return result

    error_cls = getattr(errors, result.error_type or "", None)
    if not (isinstance(error_cls, type) and issubclass(error_cls, DebateRagError)):
        error_cls = InternalError
    raise error_cls(result.error or "")


def get_graph_visualization(deps: PipelineDependencies) -> str:
    """
    Generate Mermaid diagram of the workflow.

    Returns:
        Mermaid diagram string for visualization
    """
    graph = build_graph(deps)
    return graph.get_graph().draw_mermaid()
