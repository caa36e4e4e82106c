"""
Debate document store.

Wraps SQLAlchemy sessions behind the four operations the API and the RAG
pipeline need: create, list summaries, get by id, and find by client.
All methods are synchronous; async callers run them in a worker thread.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from debaterag.errors import NotFoundError, StoreError, ValidationError
from debaterag.store.db import create_session_factory, create_store_engine, init_db
from debaterag.store.models import Debate
from debaterag.store.schemas import (
    DebateCreate,
    DebateRecord,
    DebateSummary,
    is_valid_debate_id,
    new_debate_id,
)

logger = logging.getLogger(__name__)


def _to_record(row: Debate) -> DebateRecord:
    return DebateRecord(
        id=row.id,
        client_id=row.client_id,
        topic=row.topic,
        user_role=row.user_role,
        chat_history=row.chat_history or [],
        adjudication_result=row.adjudication_result or {},
        uploaded_files=row.uploaded_files or [],
        created_at=row.created_at,
    )


class DebateStore:
    """
    SQLAlchemy-backed store for debate records.

    Example:
        >>> store = DebateStore.from_url("sqlite://")
        >>> store.init_schema()
        >>> record = store.create(DebateCreate(client_id="u1", topic="AI", user_role="for"))
        >>> store.get(record.id).topic
        'AI'
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str) -> "DebateStore":
        engine = create_store_engine(database_url)
        return cls(create_session_factory(engine))

    def init_schema(self) -> None:
        """Create the debates table if it does not exist."""
        try:
            init_db(self._session_factory.kw["bind"])
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to initialise schema: {e}") from e

    def create(self, debate: DebateCreate) -> DebateRecord:
        """Persist a new debate and return it with its assigned id."""
        payload = debate.model_dump(mode="json")
        row = Debate(
            id=new_debate_id(),
            client_id=debate.client_id,
            topic=debate.topic,
            user_role=debate.user_role,
            chat_history=payload["chat_history"],
            adjudication_result=payload["adjudication_result"],
            uploaded_files=payload["uploaded_files"],
            created_at=debate.created_at,
        )
        try:
            with self._session_factory() as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                return _to_record(row)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create debate for client {debate.client_id}: {e}")
            raise StoreError(f"Failed to create debate: {e}") from e

    def list_summaries(self, client_id: Optional[str] = None) -> list[DebateSummary]:
        """
        Debates as summaries, newest first.

        Filters to one client when client_id is given, otherwise lists everyone.
        """
        try:
            with self._session_factory() as session:
                query = session.query(
                    Debate.id,
                    Debate.topic,
                    Debate.user_role,
                    Debate.created_at,
                    Debate.client_id,
                )
                if client_id:
                    query = query.filter(Debate.client_id == client_id)
                rows = query.order_by(Debate.created_at.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list debates: {e}")
            raise StoreError(f"Failed to list debates: {e}") from e

        return [
            DebateSummary(
                id=row.id,
                topic=row.topic,
                user_role=row.user_role,
                created_at=row.created_at,
                client_id=row.client_id,
            )
            for row in rows
        ]

    def get(self, debate_id: str) -> DebateRecord:
        """
        Fetch one debate.

        Raises:
            ValidationError: If debate_id is not a well-formed identifier
            NotFoundError: If no debate has that id
            StoreError: If the store cannot be read
        """
        if not is_valid_debate_id(debate_id):
            raise ValidationError("Invalid debate ID format.")

        try:
            with self._session_factory() as session:
                row = session.get(Debate, debate_id.lower())
                if row is None:
                    raise NotFoundError("Debate not found.")
                return _to_record(row)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch debate {debate_id}: {e}")
            raise StoreError(f"Failed to fetch debate: {e}") from e

    def find(self, client_id: Optional[str] = None) -> list[DebateRecord]:
        """
        Full records for one client (or for everyone when client_id is empty),
        newest first.
        """
        try:
            with self._session_factory() as session:
                query = session.query(Debate)
                if client_id:
                    query = query.filter(Debate.client_id == client_id)
                rows = query.order_by(Debate.created_at.desc()).all()
                return [_to_record(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to query debates for client {client_id!r}: {e}")
            raise StoreError(f"Failed to query debates: {e}") from e
