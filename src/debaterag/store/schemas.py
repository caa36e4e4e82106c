"""
Pydantic schemas for debate records.

JSON uses camelCase field names (clientId, userRole, chatHistory, ...);
Python code uses snake_case attributes.
"""

import re
import secrets
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    Base64Bytes,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_serializer,
)
from pydantic.alias_generators import to_camel

# Same shape as a MongoDB ObjectId: 12 bytes rendered as 24 hex characters
DEBATE_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def new_debate_id() -> str:
    """Generate a new store identifier."""
    return secrets.token_hex(12)


def is_valid_debate_id(value: str) -> bool:
    """Check whether a string has the shape of a store identifier."""
    return bool(DEBATE_ID_PATTERN.match(value or ""))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Convert to UTC; naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ChatTurn(CamelModel):
    """One message of a debate transcript."""

    speaker: str = Field(default="", description="Who spoke (e.g. 'user', 'AI Opponent')")
    content: str = Field(default="", description="What was said")
    timestamp: Optional[datetime] = Field(default=None)

    @model_serializer(mode="wrap")
    def _omit_missing_timestamp(self, handler):
        data = handler(self)
        if self.timestamp is None:
            data.pop("timestamp", None)
        return data


class UploadedFile(CamelModel):
    """A file attached to a debate, carried as base64 in JSON."""

    filename: str = ""
    data: Base64Bytes = b""
    mimetype: str = ""


class DebateCreate(CamelModel):
    """Body of POST /api/debates: a full record minus its id."""

    client_id: str = Field(..., min_length=1)
    topic: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("topic", "debateTopic"),
    )
    user_role: str = Field(..., min_length=1)
    chat_history: list[ChatTurn] = Field(default_factory=list)
    adjudication_result: dict[str, Any] = Field(default_factory=dict)
    uploaded_files: list[UploadedFile] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at")
    @classmethod
    def _normalize_created_at(cls, value: datetime) -> datetime:
        return as_utc(value)


class DebateRecord(DebateCreate):
    """A stored debate record."""

    id: str


class DebateSummary(CamelModel):
    """Projection returned by GET /api/debates."""

    id: str
    topic: str
    user_role: str
    created_at: datetime
    client_id: str

    @field_validator("created_at")
    @classmethod
    def _normalize_created_at(cls, value: datetime) -> datetime:
        return as_utc(value)
