from typing import Any, Literal

import numpy as np
from pydantic import BaseModel, Field
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import SGDClassifier
from sklearn.neighbors import KNeighborsClassifier
from sklearn.svm import SVC

from ..data.dataset import Dataset
from ..data.host import HostAttributeType
from ..math.distance import EuclideanDistance
from ..math.kernels import GaussianKernel, Kernel
from .base import ClassifierAdapter
from .capabilities import NUMERIC_NOMINAL_DATE, Capabilities, ModelCapability, register_algorithm
from .online import OnlineUpdateAdapter
from .regression import RandomForestConfig, random_forest_params
from .sklearn_wrapper import SklearnCalculator, SklearnClassifierApplier, SklearnOnlineClassifierApplier

NOMINAL_CLASS = frozenset({HostAttributeType.NOMINAL})
SOFT_CLASSIFIER = frozenset({ModelCapability.PREDICT, ModelCapability.PREDICT_DISTRIBUTION})


# --- Support Vector Machine ---
class SVMConfig(BaseModel):
    kernel: Kernel = Field(default_factory=GaussianKernel)
    capacity: float = Field(default=1.0, gt=0.0)
    tolerance: float = Field(default=0.001, gt=0.0)
    multiclass_strategy: Literal["one_vs_all", "one_vs_one"] = "one_vs_all"
    random_state: int = 42


class SVMApplier(SklearnClassifierApplier):
    pass


@register_algorithm
class SVMCalculator(SklearnCalculator):
    algorithm_id = "svm"
    applier_class = SVMApplier
    adapter_class = ClassifierAdapter
    config_class = SVMConfig
    model_class = SVC
    _problem_type = "classification"
    capabilities = Capabilities(
        attribute_types=NUMERIC_NOMINAL_DATE,
        class_types=NOMINAL_CLASS,
        missing_class_values=True,
    )
    model_capabilities = SOFT_CLASSIFIER

    def build_params(self, config: SVMConfig, dataset: Dataset):
        return {
            "kernel": config.kernel,
            "C": config.capacity,
            "tol": config.tolerance,
            "decision_function_shape": "ovr" if config.multiclass_strategy == "one_vs_all" else "ovo",
            # Platt scaling for class probabilities
            "probability": True,
            "random_state": config.random_state,
        }


# --- Random Forest Classifier ---
class RandomForestClassifierApplier(SklearnClassifierApplier):
    pass


@register_algorithm
class RandomForestClassifierCalculator(SklearnCalculator):
    algorithm_id = "random_forest_classifier"
    applier_class = RandomForestClassifierApplier
    adapter_class = ClassifierAdapter
    config_class = RandomForestConfig
    model_class = RandomForestClassifier
    _problem_type = "classification"
    capabilities = Capabilities(
        attribute_types=NUMERIC_NOMINAL_DATE,
        class_types=NOMINAL_CLASS,
        missing_values=True,
        missing_class_values=True,
    )
    model_capabilities = SOFT_CLASSIFIER

    def build_params(self, config: RandomForestConfig, dataset: Dataset):
        return random_forest_params(config, dataset)


# --- k-Nearest Neighbours ---
class KNNConfig(BaseModel):
    k: int = Field(default=1, ge=1)
    distance: EuclideanDistance = Field(default_factory=EuclideanDistance)


class KNNApplier(SklearnClassifierApplier):
    pass


@register_algorithm
class KNNCalculator(SklearnCalculator):
    algorithm_id = "knn"
    applier_class = KNNApplier
    adapter_class = ClassifierAdapter
    config_class = KNNConfig
    model_class = KNeighborsClassifier
    _problem_type = "classification"
    capabilities = Capabilities(
        attribute_types=NUMERIC_NOMINAL_DATE,
        class_types=NOMINAL_CLASS,
        missing_class_values=True,
    )
    model_capabilities = SOFT_CLASSIFIER

    def build_params(self, config: KNNConfig, dataset: Dataset):
        return {"n_neighbors": config.k, "metric": config.distance, "algorithm": "brute"}


# --- Online logistic regression (SGD) ---
class SGDClassifierConfig(BaseModel):
    alpha: float = Field(default=0.0001, gt=0.0)
    epochs: int = Field(default=5, ge=1)
    random_state: int = 42


class SGDClassifierApplier(SklearnOnlineClassifierApplier):
    pass


@register_algorithm
class SGDClassifierCalculator(SklearnCalculator):
    algorithm_id = "sgd_classifier"
    applier_class = SGDClassifierApplier
    adapter_class = OnlineUpdateAdapter
    config_class = SGDClassifierConfig
    model_class = SGDClassifier
    _problem_type = "classification"
    capabilities = Capabilities(
        attribute_types=NUMERIC_NOMINAL_DATE,
        class_types=NOMINAL_CLASS,
        missing_class_values=True,
    )
    model_capabilities = SOFT_CLASSIFIER | {ModelCapability.INCREMENTAL_LEARN}

    def build_params(self, config: SGDClassifierConfig, dataset: Dataset):
        return {"loss": "log_loss", "alpha": config.alpha, "random_state": config.random_state}

    def fit(self, dataset: Dataset, config: SGDClassifierConfig) -> Any:
        model = self.model_class(**self.build_params(config, dataset))
        X = dataset.matrix()
        y = dataset.int_labels()
        # Declare every label up front so later updates may use any of them
        classes = np.arange(dataset.num_classes())
        for _ in range(config.epochs):
            model.partial_fit(X, y, classes=classes)
        return model
