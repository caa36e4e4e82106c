"""
Text chunking with metadata preservation.

Splits flattened debate transcripts into overlapping chunks while preserving:
    - The source debate's identifying metadata (topic, client id, debate id)
    - Chunk position within its source text
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Optional

from langchain_text_splitters import RecursiveCharacterTextSplitter

# Largest natural boundary first: paragraph, line, sentence, word, hard cut
SEPARATORS = ["\n\n", "\n", ". ", " ", ""]


@dataclass
class Chunk:
    """A text chunk with metadata."""

    content: str
    """The text content of the chunk."""

    metadata: dict[str, str | int] = field(default_factory=dict)
    """Source metadata (topic, client_id, debate_id) plus chunk_index."""


def _validate(chunk_size: int, overlap: int) -> None:
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ValueError(f"overlap must be non-negative, got {overlap}")
    if overlap >= chunk_size:
        raise ValueError(
            f"overlap ({overlap}) must be less than chunk_size ({chunk_size})"
        )


def _make_splitter(chunk_size: int, overlap: int) -> RecursiveCharacterTextSplitter:
    # Whitespace is kept so that chunks stay exact substrings of the source
    # and the overlap region is reproduced character for character.
    return RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=overlap,
        length_function=len,
        is_separator_regex=False,
        keep_separator="end",
        strip_whitespace=False,
        separators=SEPARATORS,
    )


def chunk_text(
    text: str,
    chunk_size: int,
    overlap: int,
    metadata: Optional[Mapping[str, str | int]] = None,
) -> list[Chunk]:
    """
    Split one text blob into overlapping chunks.

    Uses LangChain's RecursiveCharacterTextSplitter, breaking at the largest
    boundary that fits: paragraph, line, sentence, word, then a hard cut.

    Args:
        text: Source text to chunk
        chunk_size: Maximum chunk size in characters
        overlap: Number of trailing characters of a chunk repeated at the
            start of the next one
        metadata: Source metadata copied onto every chunk

    Returns:
        List of Chunk objects, in source order

    Raises:
        ValueError: If chunk_size <= 0 or overlap >= chunk_size
    """
    _validate(chunk_size, overlap)

    if not text or not text.strip():
        return []

    base_metadata = dict(metadata or {})

    if len(text) <= chunk_size:
        pieces = [text]
    else:
        pieces = _make_splitter(chunk_size, overlap).split_text(text)

    return [
        Chunk(content=piece, metadata={**base_metadata, "chunk_index": i})
        for i, piece in enumerate(pieces)
    ]


def chunk_documents(
    documents: Iterable[tuple[str, Mapping[str, str | int]]],
    chunk_size: int,
    overlap: int,
) -> list[Chunk]:
    """
    Chunk a sequence of (text, metadata) blobs.

    Chunks of the first blob come first, then those of the second, and so on.
    An empty input yields an empty list.
    """
    _validate(chunk_size, overlap)

    chunks: list[Chunk] = []
    for text, metadata in documents:
        chunks.extend(chunk_text(text, chunk_size, overlap, metadata))
    return chunks
