"""LLM clients for debaterag."""

from debaterag.llm.custom_endpoint import CustomEndpointLLM
from debaterag.llm.factory import LLMProtocol, create_llm
from debaterag.llm.huggingface import HuggingFaceLLM

__all__ = ["CustomEndpointLLM", "HuggingFaceLLM", "LLMProtocol", "create_llm"]
