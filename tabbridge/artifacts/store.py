import logging
from abc import ABC, abstractmethod
from typing import Any, List

from ..modeling.base import ModelAdapter

logger = logging.getLogger(__name__)


class ArtifactStore(ABC):
    """Keyed persistence for built adapters and their headers."""

    @abstractmethod
    def save(self, key: str, data: Any) -> None:
        pass

    @abstractmethod
    def load(self, key: str) -> Any:
        """Raises FileNotFoundError for unknown keys."""
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Removes a key. Returns False if there was nothing to remove."""
        pass

    @abstractmethod
    def list_keys(self) -> List[str]:
        pass

    def save_adapter(self, key: str, adapter: ModelAdapter) -> None:
        if not isinstance(adapter, ModelAdapter):
            raise TypeError(f"Expected a ModelAdapter, got {type(adapter).__name__}")
        if not adapter.is_built:
            logger.warning(f"Saving adapter '{key}' without a built model")
        self.save(key, adapter)

    def load_adapter(self, key: str) -> ModelAdapter:
        """
        Loads an adapter saved with ``save_adapter``. Its header snapshot is
        rebuilt on the first prediction.
        """
        adapter = self.load(key)
        if not isinstance(adapter, ModelAdapter):
            raise TypeError(f"Artifact '{key}' holds {type(adapter).__name__}, not a ModelAdapter")
        return adapter
