"""
SQLAlchemy model for debate storage.
"""

from sqlalchemy import JSON, Column, DateTime, Index, String, Text

from debaterag.store.db import Base


class Debate(Base):
    """
    One stored debate.

    chat_history: JSON list of {speaker, content, timestamp}
    adjudication_result: opaque JSON object produced by the adjudicator
    uploaded_files: JSON list of {filename, data (base64), mimetype}
    """
    __tablename__ = "debates"

    id = Column(String(24), primary_key=True)
    client_id = Column(String(255), nullable=False, index=True)
    topic = Column(Text, nullable=False)
    user_role = Column(String(255), nullable=False)
    chat_history = Column(JSON, nullable=False, default=list)
    adjudication_result = Column(JSON, nullable=False, default=dict)
    uploaded_files = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_debates_client_created", "client_id", "created_at"),
    )
