"""
Pydantic models for API request and response schemas.

Every response is wrapped in a {success, ...} envelope. Debate payloads use
camelCase field names.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from debaterag.store.schemas import CamelModel, DebateRecord, DebateSummary


class ChatRequest(CamelModel):
    """Request schema for the /api/chat/rag endpoint."""

    question: Optional[str] = Field(
        default=None,
        description="Natural language question about the debate history",
        examples=["Which arguments did I use against nuclear power?"],
    )
    client_id: Optional[str] = Field(
        default=None,
        description="Restrict the history to this client; all debates when omitted",
        examples=["u1"],
    )


class ChatResponse(CamelModel):
    """Response schema for the /api/chat/rag endpoint."""

    success: bool = True
    reply: str = Field(description="Generated answer or the no-history message")


class DebateListResponse(CamelModel):
    success: bool = True
    data: list[DebateSummary] = Field(default_factory=list)


class DebateResponse(CamelModel):
    success: bool = True
    data: DebateRecord


class HealthResponse(CamelModel):
    """Response schema for the /api/health endpoint."""

    success: bool = True
    message: str = Field(default="Server is running")
    timestamp: datetime


class ErrorResponse(CamelModel):
    """Schema for error responses."""

    success: bool = False
    message: str = Field(
        description="Human-readable error message",
        examples=["Debate not found.", "Question is required."],
    )
    error: Optional[str] = Field(
        default=None,
        description="Validation details for 400 'Validation Error' responses",
    )
