"""
Loader node: Fetches the client's debates and flattens them to text.

Each debate becomes one blob: a header naming the topic and client, then one
"<speaker>: <content>" line per chat turn. When no debate matches, the
pipeline ends with the no-history reply and nothing is embedded.
"""

import asyncio
import logging

from debaterag.errors import StoreError
from debaterag.graph.state import PipelineDependencies, PipelineStage, RagState
from debaterag.nodes.utils import bounded
from debaterag.store.schemas import DebateRecord

logger = logging.getLogger(__name__)

NO_HISTORY_MESSAGE = (
    "I couldn't find any debate history. Once you complete a debate, "
    "you can ask me questions about it."
)


def format_debate(debate: DebateRecord) -> str:
    """Flatten one debate into the text blob that gets chunked."""
    chat_history_text = "\n".join(
        f"{turn.speaker}: {turn.content}" for turn in debate.chat_history
    )
    return f'Debate on "{debate.topic}" (Client: {debate.client_id}):\n{chat_history_text}'


def debate_metadata(debate: DebateRecord) -> dict[str, str]:
    """Back-reference carried by every chunk of a debate."""
    return {
        "debate_id": debate.id,
        "topic": debate.topic,
        "client_id": debate.client_id,
    }


async def loader_node(state: RagState, deps: PipelineDependencies) -> RagState:
    """
    Load matching debates from the store.

    Args:
        state: Current graph state with question and optional client_id
        deps: Pipeline dependencies (store, timeout)

    Returns:
        Updated state with debates and source_texts populated, or with
        stage EMPTY_HISTORY and the no-history reply
    """
    client_id = state.get("client_id")

    debates = await bounded(
        asyncio.to_thread(deps.store.find, client_id),
        deps.timeout,
        StoreError,
        "Loading debates",
    )

    if not debates:
        logger.info(f"No debate history for client {client_id!r}")
        state["debates"] = []
        state["reply"] = NO_HISTORY_MESSAGE
        state["stage"] = PipelineStage.EMPTY_HISTORY
        return state

    state["debates"] = debates
    state["source_texts"] = [
        (format_debate(debate), debate_metadata(debate)) for debate in debates
    ]
    return state
