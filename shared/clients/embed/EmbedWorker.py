"""Background embedding worker.

Owns the embedding backend and processes batch requests from an inbox queue
in its own asyncio task. Callers never touch the backend directly: they post
an EmbedRequestMessage and listen for EmbedResponseMessages carrying the same
correlation id.
"""

import asyncio
from typing import Callable, Protocol

from shared.clients.embed.models.EmbedMessage import EmbedRequestMessage, EmbedResponseMessage
from shared.helper.HelperConfig import HelperConfig

Listener = Callable[[EmbedResponseMessage], None]


class EmbedBackend(Protocol):
    async def boot(self) -> None: ...

    async def do_healthcheck(self) -> object: ...

    async def do_embed(self, texts: list[str]) -> list[list[float]]: ...

    async def close(self) -> None: ...


class EmbedWorker:
    """Serialises embedding batches against one backend."""

    def __init__(self, helper_config: HelperConfig, backend: EmbedBackend) -> None:
        self.logging = helper_config.get_logger()
        self._backend = backend
        self._inbox: asyncio.Queue[EmbedRequestMessage] = asyncio.Queue()
        self._listeners: list[Listener] = []
        self._task: asyncio.Task | None = None
        self._ready = False

    ##########################################
    ############## LIFECYCLE #################
    ##########################################

    async def start(self) -> None:
        """Start the worker task. The backend itself is booted lazily on first request."""
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="embed-worker")
            self.logging.debug("Embed worker started.")

    async def stop(self) -> None:
        """Stop the worker task and release the backend. Queued requests are dropped."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._ready:
            await self._backend.close()
            self._ready = False
        self.logging.debug("Embed worker stopped.")

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    ##########################################
    ############### MESSAGING ################
    ##########################################

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def post_message(self, message: EmbedRequestMessage) -> None:
        """Queue a request without waiting for it to be processed.

        Raises:
            RuntimeError: If the worker has not been started.
        """
        if not self.is_running():
            raise RuntimeError("Embed worker is not running. Call start() first.")
        self._inbox.put_nowait(message)

    def _emit(self, message: EmbedResponseMessage) -> None:
        # iterate over a copy, listeners detach themselves on terminal messages
        for listener in list(self._listeners):
            listener(message)

    ##########################################
    ############### PROCESSING ###############
    ##########################################

    async def _run(self) -> None:
        while True:
            message = await self._inbox.get()
            try:
                await self._handle(message)
            finally:
                self._inbox.task_done()

    async def _ensure_ready(self, request_id: str) -> None:
        if self._ready:
            return
        self._emit(EmbedResponseMessage(id=request_id, status="progress", progress=0.0))
        await self._backend.boot()
        try:
            await self._backend.do_healthcheck()
        except Exception:
            await self._backend.close()
            raise
        self._ready = True
        self.logging.info("Embedding backend ready.")
        self._emit(EmbedResponseMessage(id=request_id, status="progress", progress=100.0))

    async def _handle(self, message: EmbedRequestMessage) -> None:
        try:
            await self._ensure_ready(message.id)
            vectors = await self._backend.do_embed(message.texts)
            response = EmbedResponseMessage(id=message.id, status="complete", output=vectors)
        except Exception as exc:
            # the whole batch fails as a unit; the worker keeps serving
            self.logging.error("Embedding batch %s failed: %s", message.id, exc)
            self._emit(EmbedResponseMessage(id=message.id, status="error", error=str(exc) or type(exc).__name__))
            return
        self._emit(response)
