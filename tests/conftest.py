import logging
import zlib

import pytest
import pytest_asyncio

from shared.clients.embed.EmbeddingClient import EmbeddingClient
from shared.clients.embed.EmbedWorker import EmbedWorker
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import ColorLogger
from shared.models.document import Chunk, ChunkMetadata, Document, VectorIndex

FAKE_DIMENSION = 32


def fake_vector(text: str) -> list[float]:
    """Deterministic bag-of-words vector: each word bumps one crc32 bucket."""
    vector = [0.0] * FAKE_DIMENSION
    for word in text.lower().split():
        vector[zlib.crc32(word.encode("utf-8")) % FAKE_DIMENSION] += 1.0
    return vector


class FakeEmbedBackend:
    """In-process stand-in for an HTTP embedding backend."""

    def __init__(self) -> None:
        self.booted = False
        self.boot_count = 0
        self.calls: list[list[str]] = []
        self.fail_healthcheck = False
        self.fail_embed = False
        self.output_override = None

    async def boot(self) -> None:
        self.booted = True
        self.boot_count += 1

    async def do_healthcheck(self) -> None:
        if self.fail_healthcheck:
            raise ConnectionError("embedding backend unreachable")

    async def do_embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self.fail_embed:
            raise RuntimeError("embedding backend crashed")
        if self.output_override is not None:
            return self.output_override(texts)
        return [fake_vector(text) for text in texts]

    async def close(self) -> None:
        self.booted = False


@pytest.fixture
def helper_config() -> HelperConfig:
    return HelperConfig(logger=ColorLogger(logging.getLogger("tests")))


@pytest.fixture
def fake_backend() -> FakeEmbedBackend:
    return FakeEmbedBackend()


@pytest_asyncio.fixture
async def embed_worker(helper_config, fake_backend):
    worker = EmbedWorker(helper_config=helper_config, backend=fake_backend)
    await worker.start()
    yield worker
    await worker.stop()


@pytest_asyncio.fixture
async def embedding_client(helper_config, embed_worker) -> EmbeddingClient:
    return EmbeddingClient(helper_config=helper_config, worker=embed_worker)


@pytest.fixture
def index_factory():
    """Build a one-document VectorIndex from chunk contents and optional embeddings."""

    def make(contents: list[str], embeddings: list[list[float] | None] | None = None, source: str = "notes.md") -> VectorIndex:
        embeddings = embeddings if embeddings is not None else [None] * len(contents)
        chunks = [
            Chunk(
                id=f"chunk-{position}",
                document_id="doc-1",
                content=content,
                line_start=position + 1,
                line_end=position + 1,
                embedding=embedding,
                metadata=ChunkMetadata(source=source, index=position),
            )
            for position, (content, embedding) in enumerate(zip(contents, embeddings))
        ]
        document = Document(
            id="doc-1",
            name=source,
            raw_text="\n".join(contents),
            chunk_ids=[chunk.id for chunk in chunks],
        )
        return VectorIndex(documents=[document], chunks=chunks)

    return make
