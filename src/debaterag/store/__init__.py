"""
Debate document store.

Components:
    - schemas: Pydantic debate record / summary models
    - models: SQLAlchemy table definition
    - repository: DebateStore (create, list, get, find)
"""

from debaterag.store.repository import DebateStore
from debaterag.store.schemas import (
    ChatTurn,
    DebateCreate,
    DebateRecord,
    DebateSummary,
    UploadedFile,
    is_valid_debate_id,
    new_debate_id,
)

__all__ = [
    "ChatTurn",
    "DebateCreate",
    "DebateRecord",
    "DebateStore",
    "DebateSummary",
    "UploadedFile",
    "is_valid_debate_id",
    "new_debate_id",
]
