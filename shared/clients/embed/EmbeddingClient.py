"""Caller-side handle to the embedding worker."""

import asyncio
import uuid
from typing import Callable

from shared.clients.embed.EmbedError import EmbedError
from shared.clients.embed.EmbedWorker import EmbedWorker
from shared.clients.embed.models.EmbedMessage import EmbedRequestMessage, EmbedResponseMessage
from shared.helper.HelperConfig import HelperConfig

ProgressCallback = Callable[[float], None]


class EmbeddingClient:
    """Sends text batches to an EmbedWorker and awaits the matching response.

    Every call gets its own correlation id, so overlapping calls from several
    query paths resolve independently. The client does not cache vectors and
    has no timeout; wrap calls in ``asyncio.wait_for`` where one is needed.
    """

    def __init__(self, helper_config: HelperConfig, worker: EmbedWorker) -> None:
        self.logging = helper_config.get_logger()
        self._worker = worker

    async def embed(self, texts: list[str] | None, on_progress: ProgressCallback | None = None) -> list[list[float]]:
        """Embed a batch of texts.

        Args:
            texts: The texts to embed. An empty or missing list returns ``[]``
                without contacting the worker.
            on_progress: Receives backend warm-up percentages. Advisory only.

        Returns:
            list[list[float]]: One vector per input, same order, same dimension.

        Raises:
            EmbedError: If the batch fails or the backend output is malformed.
        """
        if not texts:
            return []

        request_id = str(uuid.uuid4())
        future: asyncio.Future[list[list[float]]] = asyncio.get_running_loop().create_future()

        def handler(message: EmbedResponseMessage) -> None:
            if message.id != request_id or future.done():
                return
            if message.status == "progress":
                if on_progress is not None and message.progress is not None:
                    on_progress(message.progress)
            elif message.status == "complete":
                future.set_result(message.output or [])
            elif message.status == "error":
                future.set_exception(EmbedError(message.error or "Embedding backend reported an error."))

        self._worker.add_listener(handler)
        try:
            try:
                self._worker.post_message(EmbedRequestMessage(id=request_id, texts=list(texts)))
            except RuntimeError as exc:
                raise EmbedError(str(exc)) from exc
            vectors = await future
        finally:
            self._worker.remove_listener(handler)

        self._validate_output(texts, vectors)
        return vectors

    def _validate_output(self, texts: list[str], vectors: list[list[float]]) -> None:
        if len(vectors) != len(texts):
            raise EmbedError(f"Embedding backend returned {len(vectors)} vectors for {len(texts)} texts.")
        dimension = len(vectors[0])
        if dimension == 0:
            raise EmbedError("Embedding backend returned empty vectors.")
        if any(len(vector) != dimension for vector in vectors):
            raise EmbedError("Embedding backend returned vectors of differing dimension.")
