import logging
import os
from typing import Any, List, Optional

import joblib

from ..config import get_settings
from .store import ArtifactStore

logger = logging.getLogger(__name__)

SUFFIX = ".joblib"


class LocalArtifactStore(ArtifactStore):
    """
    joblib files under a base directory, one per key. Path separators in
    keys are flattened, so ``runs/1/svm`` is stored as ``runs_1_svm.joblib``.
    """

    def __init__(self, base_path: Optional[str] = None):
        self.base_path = base_path or get_settings().ARTIFACT_DIR
        os.makedirs(self.base_path, exist_ok=True)

    def _get_path(self, key: str) -> str:
        safe_key = key.replace("/", "_").replace("\\", "_")
        if not safe_key.endswith(SUFFIX):
            safe_key += SUFFIX
        return os.path.join(self.base_path, safe_key)

    def save(self, key: str, data: Any) -> None:
        path = self._get_path(key)
        joblib.dump(data, path)
        logger.debug(f"Saved artifact '{key}' to {path}")

    def load(self, key: str) -> Any:
        path = self._get_path(key)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Artifact not found: {key}")
        return joblib.load(path)

    def exists(self, key: str) -> bool:
        return os.path.exists(self._get_path(key))

    def delete(self, key: str) -> bool:
        path = self._get_path(key)
        if not os.path.exists(path):
            return False
        os.remove(path)
        logger.debug(f"Deleted artifact '{key}'")
        return True

    def list_keys(self) -> List[str]:
        return sorted(
            name[: -len(SUFFIX)] for name in os.listdir(self.base_path) if name.endswith(SUFFIX)
        )
