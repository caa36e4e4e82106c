"""
Configuration management using Pydantic Settings.

All configuration is loaded from environment variables with sensible defaults.
Use a .env file for local development.

Environment Variables:
    DATABASE_URL: SQLAlchemy URL of the debate document store
    PIPELINE_PRESET: "in_memory" (memory index, 2000/200) or "persistent" (FAISS, 1000/200)
    VECTOR_STORE: Override the preset's index strategy ("faiss" or "memory")
    CHUNK_SIZE: Override the preset's chunk size in characters
    CHUNK_OVERLAP: Override the preset's chunk overlap in characters
    EMBEDDING_MODEL: Sentence transformer model for embeddings
    CUSTOM_ENDPOINT_URL: OpenAI-compatible chat completions URL
    LLM_API_KEY / GROQ_API_KEY: Bearer token for the chat completions endpoint
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VectorStoreName = Literal["faiss", "memory"]
PipelinePreset = Literal["in_memory", "persistent"]

# (vector store, chunk size, chunk overlap) per pipeline preset
PIPELINE_PRESETS: dict[str, tuple[VectorStoreName, int, int]] = {
    "in_memory": ("memory", 2000, 200),
    "persistent": ("faiss", 1000, 200),
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Document Store
    # ==========================================================================
    database_url: str = Field(
        default="sqlite:///./data/debates.db",
        description="SQLAlchemy URL for the debate document store",
    )

    # ==========================================================================
    # API Keys
    # ==========================================================================
    hf_api_key: Optional[SecretStr] = Field(
        default=None,
        description="HuggingFace API key (for API-based embeddings or HF generation)",
    )
    llm_api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("llm_api_key", "groq_api_key"),
        description="Bearer token for the OpenAI-compatible chat endpoint",
    )

    # ==========================================================================
    # Embedding Configuration
    # ==========================================================================
    embedding_model: str = Field(
        default="BAAI/bge-small-en-v1.5",
        description="Sentence transformer model for chunk/question embeddings",
    )
    embedding_dimension: int = Field(
        default=384,
        ge=1,
        description="Dimension of embedding vectors (must match model)",
    )
    use_local_embeddings: bool = Field(
        default=True,
        description="Use local sentence-transformers instead of HF API",
    )
    embedding_batch_size: int = Field(
        default=32,
        ge=1,
        le=256,
        description="Number of texts per embedding call",
    )

    # ==========================================================================
    # LLM Configuration
    # ==========================================================================
    use_custom_endpoint: bool = Field(
        default=True,
        description="Use an OpenAI-compatible endpoint instead of HuggingFace",
    )
    custom_endpoint_url: str = Field(
        default="https://api.groq.com/openai/v1/chat/completions",
        description="OpenAI-compatible chat completions URL",
    )
    llm_model: str = Field(
        default="openai/gpt-oss-20b",
        description="Model name sent to the endpoint (or HF repo id)",
    )
    llm_temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=2.0,
        description="Temperature for LLM generation (lower = more deterministic)",
    )
    llm_max_tokens: int = Field(
        default=1024,
        ge=1,
        le=8192,
        description="Maximum tokens for LLM response",
    )

    # ==========================================================================
    # Pipeline Configuration
    # ==========================================================================
    pipeline_preset: PipelinePreset = Field(
        default="in_memory",
        description="Chunking / index preset for the RAG pipeline",
    )
    vector_store: Optional[VectorStoreName] = Field(
        default=None,
        description="Vector index strategy override",
    )
    chunk_size: Optional[int] = Field(
        default=None,
        ge=50,
        le=8000,
        description="Maximum chunk size in characters (overrides preset)",
    )
    chunk_overlap: Optional[int] = Field(
        default=None,
        ge=0,
        le=1000,
        description="Overlap between consecutive chunks (overrides preset)",
    )
    retrieval_top_k: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Number of chunks to retrieve per question",
    )
    faiss_index_type: Literal["hnsw", "flat"] = Field(
        default="hnsw",
        description="FAISS index structure used by the faiss strategy",
    )
    hnsw_m: int = Field(
        default=32,
        ge=4,
        le=128,
        description="HNSW graph degree",
    )
    hnsw_ef_search: int = Field(
        default=64,
        ge=1,
        le=1024,
        description="HNSW search breadth (also the candidate pool for tie ordering)",
    )
    faiss_index_path: Path = Field(
        default=Path("data/index/debates.index"),
        description="Where the CLI saves a FAISS index when asked to",
    )
    external_call_timeout: float = Field(
        default=60.0,
        gt=0.0,
        description="Timeout in seconds for each store, embedding and LLM call",
    )

    # ==========================================================================
    # API Configuration
    # ==========================================================================
    api_host: str = Field(
        default="0.0.0.0",
        description="Host to bind API server",
    )
    api_port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Port for API server",
    )

    # ==========================================================================
    # Observability Configuration
    # ==========================================================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )
    phoenix_endpoint: str = Field(
        default="http://localhost:6006",
        description="Arize Phoenix collector endpoint",
    )
    enable_tracing: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing to Phoenix",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================
    @field_validator("faiss_index_path")
    @classmethod
    def resolve_path(cls, v: Path) -> Path:
        """Resolve paths to absolute paths."""
        return v.resolve()

    @model_validator(mode="after")
    def validate_chunk_overlap(self) -> "Settings":
        """Ensure the effective overlap is less than the effective chunk size."""
        if self.effective_chunk_overlap >= self.effective_chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.effective_chunk_overlap}) must be less than "
                f"chunk_size ({self.effective_chunk_size})"
            )
        return self

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @property
    def effective_vector_store(self) -> VectorStoreName:
        """Index strategy after applying the preset."""
        return self.vector_store or PIPELINE_PRESETS[self.pipeline_preset][0]

    @property
    def effective_chunk_size(self) -> int:
        """Chunk size after applying the preset."""
        if self.chunk_size is not None:
            return self.chunk_size
        return PIPELINE_PRESETS[self.pipeline_preset][1]

    @property
    def effective_chunk_overlap(self) -> int:
        """Chunk overlap after applying the preset."""
        if self.chunk_overlap is not None:
            return self.chunk_overlap
        return PIPELINE_PRESETS[self.pipeline_preset][2]

    @property
    def hf_api_key_value(self) -> Optional[str]:
        """Get the actual HF API key value (use sparingly)."""
        if self.hf_api_key:
            return self.hf_api_key.get_secret_value()
        return None

    @property
    def llm_api_key_value(self) -> Optional[str]:
        """Get the actual LLM API key value (use sparingly)."""
        if self.llm_api_key:
            return self.llm_api_key.get_secret_value()
        return None


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.
    Call `get_settings.cache_clear()` to reload settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the CLI and the API server."""
    logging.basicConfig(
        level=level or get_settings().log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# Convenience alias
settings = get_settings()
