"""
Error taxonomy shared by the store, the RAG pipeline and the API.

Every error carries the HTTP status it maps to. Messages of 5xx errors are
for the server log only; the API answers those with a generic message.
"""


class DebateRagError(Exception):
    """Base class for all application errors."""

    status_code: int = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DebateRagError):
    """Malformed or missing required input."""

    status_code = 400


class NotFoundError(DebateRagError):
    """Unknown identifier."""

    status_code = 404


class StoreError(DebateRagError):
    """Document store unreachable, or a read/write failed."""


class EmbeddingError(DebateRagError):
    """Embedding provider failed, timed out or is misconfigured."""


class GenerationError(DebateRagError):
    """Language model provider failed or timed out."""


class InternalError(DebateRagError):
    """Unexpected failure."""
