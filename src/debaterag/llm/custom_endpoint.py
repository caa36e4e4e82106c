"""
Chat-completion client for OpenAI-compatible inference endpoints.

Works with any endpoint that implements the OpenAI chat completions API
(Groq, vLLM, llama.cpp server, ...).
"""

import asyncio
import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)


class CustomEndpointLLM:
    """LLM client for OpenAI-compatible endpoints."""

    def __init__(
        self,
        endpoint_url: str,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: float = 0.1,
        max_tokens: int = 1024,
        timeout: float = 120,
    ):
        """
        Initialize custom endpoint client.

        Args:
            endpoint_url: Full URL to the /v1/chat/completions endpoint
            model: Model name sent in the payload (omitted when None)
            api_key: Bearer token (omitted when None)
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate
            timeout: Request timeout in seconds
        """
        self.endpoint_url = endpoint_url
        self.model = model
        self.api_key = api_key
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def complete(self, messages: list[dict[str, str]]) -> str:
        """
        Send one chat completion request.

        A single attempt is made; errors propagate to the caller.

        Args:
            messages: Chat messages, e.g. [{"role": "system", "content": ...}, ...]

        Returns:
            The generated response text

        Raises:
            requests.HTTPError: If the endpoint returns an error status
            requests.RequestException: On connection errors or timeouts
            ValueError: If the response has no choices
        """
        payload: dict = {
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if self.model:
            payload["model"] = self.model

        logger.debug(f"POST {self.endpoint_url} model={self.model} messages={len(messages)}")
        response = requests.post(
            self.endpoint_url, json=payload, headers=self._headers(), timeout=self.timeout
        )
        response.raise_for_status()

        result = response.json()
        choices = result.get("choices") or []
        if not choices:
            raise ValueError("Endpoint returned no choices")
        return choices[0]["message"]["content"] or ""

    async def acomplete(self, messages: list[dict[str, str]]) -> str:
        """Run complete() in a worker thread."""
        return await asyncio.to_thread(self.complete, messages)

