import os
import tempfile

from shared.helper.HelperConfig import HelperConfig
from shared.models.document import VectorIndex
from shared.store.IndexStoreInterface import IndexStoreInterface


class IndexStoreFile(IndexStoreInterface):
    """Stores the index as one JSON file, written atomically via a temp file."""

    def __init__(self, helper_config: HelperConfig, path: str | None = None):
        super().__init__(helper_config=helper_config)
        self.path = path or helper_config.get_string_val("RAG_INDEX_PATH", default="data/rag_index.json")

    def save(self, index: VectorIndex) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".rag_index.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(self.serialize(index))
            os.replace(tmp_path, self.path)
        except OSError as exc:
            self.logging.error("Failed to save index to %s: %s", self.path, exc)
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        self.logging.info(
            "Saved index to %s (%d documents, %d chunks).", self.path, len(index.documents), len(index.chunks)
        )

    def load(self) -> VectorIndex | None:
        if not os.path.exists(self.path):
            self.logging.info("No index found at %s.", self.path)
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                return self.deserialize(handle.read())
        except (OSError, ValueError) as exc:
            # pydantic ValidationError is a ValueError
            self.logging.error("Failed to load index from %s: %s", self.path, exc)
            return None

    def clear(self) -> None:
        try:
            os.remove(self.path)
            self.logging.info("Cleared index at %s.", self.path)
        except FileNotFoundError:
            pass
