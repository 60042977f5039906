from .local import LocalArtifactStore
from .store import ArtifactStore
