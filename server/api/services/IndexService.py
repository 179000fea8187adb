"""Index service — owns the active VectorIndex snapshot.

Queries read the snapshot by reference. A rebuild assembles a completely new
snapshot and only then swaps the reference, so in-flight queries keep
working on the index they started with.
"""

import asyncio

from services.rag_index.IndexBuilder import IndexBuilder
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import VectorIndex
from shared.models.index import IndexSource, IndexSummary
from shared.store.IndexStoreInterface import IndexStoreInterface


class IndexService:
    """Loads, rebuilds, persists and clears the active index."""

    def __init__(
        self,
        helper_config: HelperConfig,
        index_builder: IndexBuilder,
        index_store: IndexStoreInterface,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._builder = index_builder
        self._store = index_store
        self._index: VectorIndex | None = None
        self._rebuild_lock = asyncio.Lock()

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_index(self) -> VectorIndex | None:
        """Return the current snapshot. Callers must not mutate it."""
        return self._index

    def get_summary(self) -> IndexSummary:
        index = self._index
        if index is None:
            return IndexSummary(loaded=False)
        return IndexSummary(
            loaded=True,
            version=index.version,
            documents=len(index.documents),
            chunks=len(index.chunks),
            document_names=[doc.name for doc in index.documents],
        )

    ##########################################
    ################ CORE ####################
    ##########################################

    def load(self) -> IndexSummary:
        """Activate the persisted index. A missing or broken file leaves no index active."""
        self._index = self._store.load()
        summary = self.get_summary()
        self.logging.info("Active index: %d documents, %d chunks.", summary.documents, summary.chunks)
        return summary

    async def rebuild(self, sources: list[IndexSource]) -> tuple[IndexSummary, list[str]]:
        """Build, persist and activate a new index from the given sources.

        Returns:
            tuple[IndexSummary, list[str]]: The new summary and the status lines
                emitted while building.

        Raises:
            EmbedError: If embedding fails. The previous snapshot stays active.
            OSError: If the new index cannot be persisted. The previous snapshot stays active.
        """
        progress: list[str] = []
        async with self._rebuild_lock:
            index = await self._builder.build_index(
                texts=[source.text for source in sources],
                metadatas=[source.metadata for source in sources],
                on_progress=progress.append,
            )
            self._store.save(index)
            self._index = index
        return self.get_summary(), progress

    async def clear(self) -> None:
        """Drop the active index and its persisted copy.

        Waits for a running rebuild, so a rebuild never reactivates an index
        cleared after it started.
        """
        async with self._rebuild_lock:
            self._store.clear()
            self._index = None
        self.logging.info("Index cleared.")
