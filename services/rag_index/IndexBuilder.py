"""Index building service.

Splits each source text into chunks, embeds the chunks through the
EmbeddingClient, and assembles a fresh VectorIndex. A build always produces a
new snapshot; existing indexes are never patched.
"""

import uuid
from typing import Callable

from services.rag_index.chunking import chunk_text
from shared.clients.embed.EmbeddingClient import EmbeddingClient
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import ChunkSettings
from shared.models.document import Chunk, ChunkMetadata, Document, VectorIndex

StatusCallback = Callable[[str], None]


class IndexBuilder:
    """Builds VectorIndex snapshots from (text, metadata) pairs."""

    def __init__(
        self,
        helper_config: HelperConfig,
        embedding_client: EmbeddingClient,
        settings: ChunkSettings | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._embedding_client = embedding_client
        self._settings = settings or ChunkSettings()

    ##########################################
    ################ CORE ####################
    ##########################################

    async def build_index(
        self,
        texts: list[str],
        metadatas: list[dict],
        on_progress: StatusCallback | None = None,
    ) -> VectorIndex:
        """Build a new index from source texts.

        Args:
            texts (list[str]): Raw document texts.
            metadatas (list[dict]): One metadata record per text, same order.
                ``source`` names the document for citations; it defaults to
                "Document <n>" when missing.
            on_progress (StatusCallback | None): Receives human-readable status lines.

        Returns:
            VectorIndex: The new snapshot.

        Raises:
            ValueError: If texts and metadatas differ in length.
            EmbedError: If embedding any document's chunks fails.
        """
        if len(texts) != len(metadatas):
            raise ValueError(f"Got {len(texts)} texts but {len(metadatas)} metadata records.")

        notify = on_progress or (lambda status: None)
        documents: list[Document] = []
        all_chunks: list[Chunk] = []

        for position, (text, metadata) in enumerate(zip(texts, metadatas)):
            metadata = dict(metadata or {})
            name = str(metadata.get("source") or f"Document {position + 1}")
            metadata["source"] = name

            notify(f"Processing {name}...")
            document, chunks = await self._build_document(text, name, metadata, notify)
            documents.append(document)
            all_chunks.extend(chunks)

        self.logging.info(
            "Built index: %d documents, %d chunks.", len(documents), len(all_chunks)
        )
        notify("Indexing complete.")
        return VectorIndex(version=1, documents=documents, chunks=all_chunks)

    ##########################################
    ############ DOCUMENT BUILD ##############
    ##########################################

    async def _build_document(
        self,
        text: str,
        name: str,
        metadata: dict,
        notify: StatusCallback,
    ) -> tuple[Document, list[Chunk]]:
        """Chunk and embed a single document."""
        document_id = str(uuid.uuid4())
        text_chunks = chunk_text(text, size=self._settings.size, overlap=self._settings.overlap)
        if not text_chunks:
            self.logging.info("Document '%s' produced no chunks.", name)

        notify(f"Generating embeddings for {name}...")

        def on_model_progress(percent: float) -> None:
            notify(f"Loading model... {round(percent)}%")

        embeddings: list[list[float]] = []
        batch_size = self._settings.embed_batch_size
        contents = [text_chunk.content for text_chunk in text_chunks]
        for batch_start in range(0, len(contents), batch_size):
            batch = contents[batch_start: batch_start + batch_size]
            try:
                embeddings.extend(await self._embedding_client.embed(batch, on_progress=on_model_progress))
            except Exception as exc:
                self.logging.error("Embedding failed for document '%s': %s", name, exc)
                raise

        chunks: list[Chunk] = []
        for index, (text_chunk, embedding) in enumerate(zip(text_chunks, embeddings)):
            chunks.append(
                Chunk(
                    id=str(uuid.uuid4()),
                    document_id=document_id,
                    content=text_chunk.content,
                    line_start=text_chunk.line_start,
                    line_end=text_chunk.line_end,
                    embedding=embedding,
                    metadata=ChunkMetadata(**{**metadata, "index": index}),
                )
            )

        document = Document(
            id=document_id,
            name=name,
            raw_text=text,
            chunk_ids=[chunk.id for chunk in chunks],
        )
        self.logging.debug("Indexed document '%s': %d chunks.", name, len(chunks))
        return document, chunks
