"""Pydantic models for index management requests and responses."""

from pydantic import BaseModel, Field


class IndexSource(BaseModel):
    """One text to index. ``metadata.source`` is the name shown in citations."""

    text: str
    metadata: dict = Field(default_factory=dict)


class IndexBuildRequest(BaseModel):
    documents: list[IndexSource]


class IndexSummary(BaseModel):
    """What the active index currently holds."""

    loaded: bool
    version: int | None = None
    documents: int = 0
    chunks: int = 0
    document_names: list[str] = []


class IndexBuildResponse(BaseModel):
    summary: IndexSummary
    progress: list[str]
