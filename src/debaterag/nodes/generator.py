"""
Generator node: Answers the question from the retrieved debate chunks.

The prompt is fixed: a system message that restricts the model to the
supplied context (and tells it to say so when the context is not enough),
the retrieved chunks as CONTEXT, and the user's question as the human turn.
"""

from debaterag.errors import GenerationError
from debaterag.graph.state import PipelineDependencies, PipelineStage, RagState
from debaterag.nodes.utils import bounded

RAG_SYSTEM_PROMPT = (
    "You are an expert assistant who analyzes a user's debate history. "
    "Answer the user's question based ONLY on the context provided below. "
    "If the information is not in the context, explicitly state that you "
    "cannot answer based on their history. Be concise and helpful.\n\n"
    "CONTEXT:\n{context}"
)


def format_context(chunks: list[str]) -> str:
    """Join chunk texts in retrieval order, separated by a blank line."""
    return "\n\n".join(chunks)


def build_prompt_messages(chunks: list[str], question: str) -> list[dict[str, str]]:
    """
    Render the prompt as chat messages.

    Args:
        chunks: Retrieved chunk texts, most similar first
        question: The user's question, verbatim

    Returns:
        [system message with CONTEXT, user message with the question]
    """
    return [
        {"role": "system", "content": RAG_SYSTEM_PROMPT.format(context=format_context(chunks))},
        {"role": "user", "content": question},
    ]


async def generator_node(state: RagState, deps: PipelineDependencies) -> RagState:
    """
    Generate the answer.

    Args:
        state: Current graph state with question and retrieved_chunks
        deps: Pipeline dependencies (llm, timeout)

    Returns:
        Updated state with messages, reply and stage DONE
    """
    messages = build_prompt_messages(state.get("retrieved_chunks", []), state["question"])
    state["messages"] = messages

    generation = await bounded(
        deps.llm.acomplete(messages),
        deps.timeout,
        GenerationError,
        "Generating answer",
    )

    state["reply"] = generation.strip() if isinstance(generation, str) else str(generation).strip()
    state["stage"] = PipelineStage.DONE
    return state
