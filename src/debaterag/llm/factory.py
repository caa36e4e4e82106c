"""
LLM factory for creating LLM instances based on configuration.

Provides a unified interface for creating chat-completion clients regardless
of backend (OpenAI-compatible endpoint such as Groq, or HuggingFace).
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LLMProtocol(Protocol):
    """Protocol that all LLM clients must implement."""

    def complete(self, messages: list[dict[str, str]]) -> str:
        """Call the LLM with chat messages and return the response text."""
        ...

    async def acomplete(self, messages: list[dict[str, str]]) -> str:
        """Async version of complete."""
        ...


def create_llm(temperature: float | None = None) -> LLMProtocol:
    """
    Create an LLM client based on configuration settings.

    Args:
        temperature: Optional temperature override. If None, uses settings.llm_temperature

    Returns:
        LLM client that implements the LLMProtocol

    The function checks settings in this order:
        1. use_custom_endpoint → CustomEndpointLLM
        2. default → HuggingFaceEndpoint wrapped in HuggingFaceLLM
    """
    from debaterag.config import settings

    temp = temperature if temperature is not None else settings.llm_temperature

    if settings.use_custom_endpoint:
        from debaterag.llm.custom_endpoint import CustomEndpointLLM

        return CustomEndpointLLM(
            endpoint_url=settings.custom_endpoint_url,
            model=settings.llm_model,
            api_key=settings.llm_api_key_value,
            temperature=temp,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.external_call_timeout,
        )

    from langchain_huggingface import HuggingFaceEndpoint

    from debaterag.llm.huggingface import HuggingFaceLLM

    return HuggingFaceLLM(
        HuggingFaceEndpoint(
            repo_id=settings.llm_model,
            huggingfacehub_api_token=settings.hf_api_key_value,
            temperature=temp,
            max_new_tokens=settings.llm_max_tokens,
        )
    )
