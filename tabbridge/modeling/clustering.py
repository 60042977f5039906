"""
Clustering families. CLARANS is not available: scikit-learn has no
implementation of it.
"""

from pydantic import BaseModel, Field
from sklearn.cluster import Birch, KMeans

from ..data.dataset import Dataset
from .base import ClustererAdapter
from .capabilities import NUMERIC_NOMINAL, Capabilities, register_algorithm
from .sklearn_wrapper import SklearnCalculator, SklearnClustererApplier

CLUSTERER_CAPABILITIES = Capabilities(attribute_types=NUMERIC_NOMINAL, no_class=True)


# --- K-Means ---
class KMeansConfig(BaseModel):
    num_clusters: int = Field(default=2, ge=1)
    max_iter: int = Field(default=100, ge=1)
    runs: int = Field(default=1, ge=1)
    random_state: int = 42


class KMeansApplier(SklearnClustererApplier):
    pass


@register_algorithm
class KMeansCalculator(SklearnCalculator):
    algorithm_id = "kmeans"
    applier_class = KMeansApplier
    adapter_class = ClustererAdapter
    config_class = KMeansConfig
    model_class = KMeans
    _problem_type = "clustering"
    capabilities = CLUSTERER_CAPABILITIES

    def build_params(self, config: KMeansConfig, dataset: Dataset):
        return {
            "n_clusters": config.num_clusters,
            "max_iter": config.max_iter,
            "n_init": config.runs,
            "random_state": config.random_state,
        }


# --- BIRCH ---
class BIRCHConfig(BaseModel):
    num_clusters: int = Field(default=2, ge=1)
    branching: int = Field(default=2, ge=2)
    max_radius: float = Field(default=1.0, gt=0.0)


class BIRCHApplier(SklearnClustererApplier):
    pass


@register_algorithm
class BIRCHCalculator(SklearnCalculator):
    algorithm_id = "birch"
    applier_class = BIRCHApplier
    adapter_class = ClustererAdapter
    config_class = BIRCHConfig
    model_class = Birch
    _problem_type = "clustering"
    capabilities = CLUSTERER_CAPABILITIES

    def build_params(self, config: BIRCHConfig, dataset: Dataset):
        return {
            "n_clusters": config.num_clusters,
            "branching_factor": config.branching,
            "threshold": config.max_radius,
        }
