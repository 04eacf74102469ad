# src/ragindex/chunker.py
"""Markup stripping and overlapping word-window chunking."""

import logging
import re

from bs4 import BeautifulSoup
from markdown_it import MarkdownIt

from ragindex.exceptions import ChunkingInputError
from ragindex.models import Chunk, ChunkMetadata, Document, make_chunk_id

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 300  # words
DEFAULT_CHUNK_OVERLAP = 50  # words

_WHITESPACE = re.compile(r"\s+")
_markdown = MarkdownIt("commonmark")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def strip_markup(raw_text: str) -> str:
    """Render Markdown/HTML source to whitespace-normalized plain text.

    Markdown is rendered to HTML first so that emphasis markers, link syntax
    and headings disappear; BeautifulSoup then drops the tags and decodes
    entities such as ``&amp;`` and ``&nbsp;``.
    """
    if not raw_text.strip():
        return ""
    html = _markdown.render(raw_text)
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return normalize_whitespace(text.replace("\xa0", " "))


def validate_chunking(chunk_size: int, overlap: int) -> None:
    """Raise ChunkingInputError unless chunk_size > overlap >= 0."""
    if chunk_size <= 0:
        raise ChunkingInputError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ChunkingInputError(f"overlap must not be negative, got {overlap}")
    if overlap >= chunk_size:
        raise ChunkingInputError(
            f"overlap ({overlap}) must be less than chunk_size ({chunk_size})"
        )


def chunk_words(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[str]:
    """Split plain text into overlapping windows of ``chunk_size`` words.

    Windows start every ``chunk_size - overlap`` words. A trailing window that
    would hold fewer than ``chunk_size / 2`` words is not emitted once at least
    one chunk exists; the previous window's overlap already covers most of it.

    Example:
        700 words with chunk_size=300, overlap=50 start windows at 0, 250 and 500.
        620 words with the same settings stop after 0 and 250 (120 < 150).

    Raises:
        ChunkingInputError: If chunk_size <= overlap or overlap < 0.
    """
    validate_chunking(chunk_size, overlap)

    words = text.split()
    step = chunk_size - overlap
    chunks: list[str] = []

    offset = 0
    while offset < len(words):
        window = " ".join(words[offset : offset + chunk_size]).strip()
        if window:
            chunks.append(window)

        offset += step

        remaining = len(words) - offset
        if 0 < remaining < chunk_size / 2 and chunks:
            break

    return chunks


class Chunker:
    """Turns documents into chunks with deterministic ids and metadata."""

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        overlap: int = DEFAULT_CHUNK_OVERLAP,
    ) -> None:
        """Initialize the chunker.

        Args:
            chunk_size: Words per chunk.
            overlap: Words shared by consecutive chunks.

        Raises:
            ChunkingInputError: If overlap >= chunk_size or overlap < 0.
        """
        validate_chunking(chunk_size, overlap)
        self.chunk_size = chunk_size
        self.overlap = overlap

    def chunk_text(self, text: str) -> list[str]:
        return chunk_words(text, self.chunk_size, self.overlap)

    def chunk_document(self, document: Document) -> list[Chunk]:
        """Strip markup from a document and split it into chunks.

        ``total_chunks`` is only known once the whole document is chunked, so
        metadata is attached after splitting.
        """
        text = strip_markup(document.raw_text)
        pieces = self.chunk_text(text)
        total = len(pieces)

        chunks = [
            Chunk(
                id=make_chunk_id(document.source_id, index),
                text=piece,
                metadata=ChunkMetadata(
                    source_id=document.source_id,
                    chunk_index=index,
                    total_chunks=total,
                ),
            )
            for index, piece in enumerate(pieces)
        ]
        logger.debug("Chunked %s into %d chunks", document.source_id, total)
        return chunks
