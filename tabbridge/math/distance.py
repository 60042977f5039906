from typing import Literal

import numpy as np
from pydantic import BaseModel, ConfigDict
from scipy.spatial.distance import cdist, euclidean


class BaseDistance(BaseModel):
    model_config = ConfigDict(frozen=True)

    def pairwise(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def __call__(self, x, y, **kwargs) -> float:
        raise NotImplementedError


class EuclideanDistance(BaseDistance):
    """Euclidean distance."""

    kind: Literal["euclidean"] = "euclidean"

    def pairwise(self, X, Y):
        return cdist(X, Y, metric="euclidean")

    def __call__(self, x, y, **kwargs):
        return float(euclidean(np.asarray(x, dtype=float), np.asarray(y, dtype=float)))


Distance = EuclideanDistance
