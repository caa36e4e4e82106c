"""
LangGraph workflow definition and state management.

Components:
    - state: TypedDict defining the graph state schema
    - workflow: Graph construction and execution
"""

from debaterag.graph.state import (
    PipelineDependencies,
    PipelineStage,
    RagResult,
    RagState,
    create_initial_state,
)

__all__ = [
    "PipelineDependencies",
    "PipelineStage",
    "RagResult",
    "RagState",
    "create_initial_state",
    "build_graph",
    "raise_for_failure",
    "run_question",
]


def __getattr__(name: str):
    # The nodes import graph.state, so the workflow is loaded on first use.
    if name in ("build_graph", "raise_for_failure", "run_question"):
        from debaterag.graph import workflow

        return getattr(workflow, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
