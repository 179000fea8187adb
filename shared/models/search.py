"""Pydantic models for search requests and responses."""

from enum import Enum

from pydantic import BaseModel, Field


class RagMode(str, Enum):
    """How retrieved context is handed to the language model.

    OFF:    no retrieval context.
    HYBRID: context is preferred, the model may add its own knowledge.
    STRICT: the model may answer only from the context.
    """

    OFF = "off"
    HYBRID = "hybrid"
    STRICT = "strict"


class SearchRequest(BaseModel):
    """Incoming search query. Unset tunables fall back to the configured SearchSettings."""

    query: str
    top_k: int | None = Field(default=None, ge=0)
    threshold: float | None = None
    use_reranker: bool | None = None
    mode: RagMode = RagMode.HYBRID


class Citation(BaseModel):
    """One numbered source, enough to render "[1]" inline and "source 1: <name>"."""

    id: str
    name: str
    content: str
    score: float
    line_start: int
    line_end: int
    metadata: dict


class SearchResponse(BaseModel):
    """Ranked citations plus the context block for the system prompt."""

    query: str
    results: list[Citation]
    total: int
    context: str
