from abc import ABC, abstractmethod

from shared.helper.HelperConfig import HelperConfig
from shared.models.document import VectorIndex


class IndexStoreInterface(ABC):
    """Persistence for the single VectorIndex aggregate.

    Implementations must round-trip the camelCase JSON shape of VectorIndex
    without loss. A missing or unreadable index is reported as ``None`` by
    load() and logged; it is never raised.
    """

    def __init__(self, helper_config: HelperConfig):
        self.logging = helper_config.get_logger()

    @abstractmethod
    def save(self, index: VectorIndex) -> None:
        """Persist the index, replacing any previously stored one."""
        pass

    @abstractmethod
    def load(self) -> VectorIndex | None:
        """Return the stored index, or None if there is none or it cannot be read."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored index. Clearing an empty store is a no-op."""
        pass

    @staticmethod
    def serialize(index: VectorIndex) -> str:
        return index.model_dump_json(by_alias=True)

    @staticmethod
    def deserialize(raw: str | bytes) -> VectorIndex:
        return VectorIndex.model_validate_json(raw)
