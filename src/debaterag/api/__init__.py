"""
FastAPI REST API for DebateRAG.

Endpoints:
    GET  /api/debates - List debate summaries
    GET  /api/debates/{id} - Fetch one debate
    POST /api/debates - Store a debate
    POST /api/chat/rag - Ask a question about the debate history
    GET  /api/health - Liveness check
"""

from debaterag.api.main import app, create_app

__all__ = ["app", "create_app"]
