"""
Document retrieval components for the RAG pipeline.

Components:
    - chunker: Split debate texts into overlapping chunks with metadata
    - embeddings: Generate vector embeddings (local model or HuggingFace API)
    - indexer: FAISS index management for similarity search
    - vectorstore: Strategy selection and per-question index building
    - retriever: Top-k lookup for a question
"""

from debaterag.retrieval.chunker import Chunk, chunk_documents, chunk_text
from debaterag.retrieval.embeddings import HuggingFaceEmbedder, LocalEmbedder
from debaterag.retrieval.indexer import FAISSIndex
from debaterag.retrieval.retriever import retrieve
from debaterag.retrieval.vectorstore import InMemoryVectorIndex, build_index, create_vector_index

__all__ = [
    "Chunk",
    "chunk_documents",
    "chunk_text",
    "HuggingFaceEmbedder",
    "LocalEmbedder",
    "FAISSIndex",
    "InMemoryVectorIndex",
    "build_index",
    "create_vector_index",
    "retrieve",
]
