"""Pydantic models for the retrieval corpus.

Hierarchy:
  Document       — one ingested source text (uploaded file, imported repository file, pasted text).
  Chunk          — a bounded, line-tagged slice of a document; the unit of retrieval.
  ChunkMetadata  — required citation fields plus any caller-supplied extras.
  VectorIndex    — the persisted aggregate of all documents and their chunks.
  SearchResult   — a scored chunk produced per query, never persisted.

All models serialise with camelCase keys (``rawText``, ``lineStart`` ...) so the
JSON written by the index store keeps the shape clients already exchange.
"""

import time

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting both snake_case and camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChunkMetadata(BaseModel):
    """Citation metadata attached to each chunk.

    ``source`` and ``index`` are read by the engine itself; every other key the
    document source supplied is kept as an extra field and round-trips through
    serialisation untouched.
    """

    model_config = ConfigDict(extra="allow")

    source: str
    index: int = Field(ge=0)

    @property
    def extras(self) -> dict:
        """Caller-supplied fields beyond ``source`` and ``index``."""
        return dict(self.model_extra or {})


class Chunk(CamelModel):
    id: str
    document_id: str
    content: str
    line_start: int = Field(ge=1)
    line_end: int = Field(ge=1)
    embedding: list[float] | None = None
    metadata: ChunkMetadata


class Document(CamelModel):
    """An ingested source text. Immutable once stored in an index."""

    id: str
    name: str
    raw_text: str
    created_at: int = Field(default_factory=lambda: int(time.time() * 1000))
    chunk_ids: list[str] = []


class VectorIndex(CamelModel):
    """All documents of a corpus plus a flat view of their chunks.

    ``chunks`` is denormalised for full scans. Every chunk must belong to a
    document of the same index and each document lists exactly the chunks
    that reference it.
    """

    version: int = 1
    documents: list[Document] = []
    chunks: list[Chunk] = []

    @model_validator(mode="after")
    def _check_integrity(self) -> "VectorIndex":
        chunk_ids_by_doc: dict[str, list[str]] = {doc.id: [] for doc in self.documents}
        for chunk in self.chunks:
            if chunk.document_id not in chunk_ids_by_doc:
                raise ValueError(f"Chunk {chunk.id} references unknown document {chunk.document_id}")
            chunk_ids_by_doc[chunk.document_id].append(chunk.id)
        for doc in self.documents:
            if doc.chunk_ids != chunk_ids_by_doc[doc.id]:
                raise ValueError(f"Document {doc.id} chunk list does not match the index chunks")
        return self

    def get_document(self, document_id: str) -> Document | None:
        for doc in self.documents:
            if doc.id == document_id:
                return doc
        return None


class SearchResult(BaseModel):
    """A chunk with its blended relevance score, ordered descending in result lists."""

    chunk: Chunk
    score: float
