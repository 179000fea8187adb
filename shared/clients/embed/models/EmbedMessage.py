"""Messages exchanged between EmbeddingClient and EmbedWorker."""

from typing import Literal

from pydantic import BaseModel


class EmbedRequestMessage(BaseModel):
    """A batch embedding request. ``id`` correlates every response to its waiter."""

    id: str
    texts: list[str]


class EmbedResponseMessage(BaseModel):
    """A message posted back by the worker.

    Attributes:
        id:       Correlation id of the originating request.
        status:   "progress" (advisory, zero or more times), then exactly one
                  terminal "complete" or "error".
        progress: Backend warm-up percentage for progress messages.
        output:   One vector per input text for "complete".
        error:    Human-readable reason for "error".
    """

    id: str
    status: Literal["progress", "complete", "error"]
    progress: float | None = None
    output: list[list[float]] | None = None
    error: str | None = None
