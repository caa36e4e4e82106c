"""
HuggingFace Inference API generation through langchain-huggingface.
"""

import asyncio
from typing import Any


def render_messages(messages: list[dict[str, str]]) -> str:
    """Flatten chat messages into one text prompt for text-generation models."""
    parts = []
    for message in messages:
        role = message.get("role", "user")
        label = "System" if role == "system" else "Assistant" if role == "assistant" else "User"
        parts.append(f"{label}: {message.get('content', '')}")
    parts.append("Assistant:")
    return "\n\n".join(parts)


class HuggingFaceLLM:
    """Adapts a langchain HuggingFaceEndpoint to the chat-message protocol."""

    def __init__(self, endpoint: Any) -> None:
        self.endpoint = endpoint

    def complete(self, messages: list[dict[str, str]]) -> str:
        result = self.endpoint.invoke(render_messages(messages))
        return result if isinstance(result, str) else str(result)

    async def acomplete(self, messages: list[dict[str, str]]) -> str:
        return await asyncio.to_thread(self.complete, messages)
