from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator
from sklearn.ensemble import RandomForestRegressor
from sklearn.kernel_ridge import KernelRidge
from sklearn.linear_model import Ridge
from sklearn.svm import SVR

from ..data.dataset import Dataset
from ..data.host import HostAttributeType
from ..math.kernels import GaussianKernel, Kernel
from .base import RegressorAdapter
from .capabilities import NUMERIC_NOMINAL_DATE, Capabilities, register_algorithm
from .sklearn_wrapper import SklearnApplier, SklearnCalculator

NUMERIC_CLASS = frozenset({HostAttributeType.NUMERIC})


class RandomForestConfig(BaseModel):
    num_trees: int = Field(default=100, ge=1)
    # -1 uses sqrt(number of attributes)
    num_features: int = -1
    max_nodes: int = Field(default=100, ge=2)
    min_node_size: int = Field(default=5, ge=1)
    sub_sample: float = Field(default=1.0, gt=0.0, le=1.0)
    random_state: int = 42

    @field_validator("num_features")
    @classmethod
    def validate_num_features(cls, v):
        if v != -1 and v < 1:
            raise ValueError("num_features must be >= 1 or -1")
        return v


def random_forest_params(config: RandomForestConfig, dataset: Dataset) -> Dict[str, Any]:
    if config.num_features == -1:
        max_features: Any = "sqrt"
    else:
        max_features = min(config.num_features, max(dataset.num_attributes, 1))
    return {
        "n_estimators": config.num_trees,
        "max_features": max_features,
        "max_leaf_nodes": config.max_nodes,
        "min_samples_leaf": config.min_node_size,
        "max_samples": None if config.sub_sample == 1.0 else config.sub_sample,
        "random_state": config.random_state,
    }


# --- Ridge Regression ---
class RidgeRegressionConfig(BaseModel):
    shrinkage: float = Field(default=1.0e-8, ge=0.0)


class RidgeRegressionApplier(SklearnApplier):
    pass


@register_algorithm
class RidgeRegressionCalculator(SklearnCalculator):
    algorithm_id = "ridge_regression"
    applier_class = RidgeRegressionApplier
    adapter_class = RegressorAdapter
    config_class = RidgeRegressionConfig
    model_class = Ridge
    _problem_type = "regression"
    capabilities = Capabilities(
        attribute_types=NUMERIC_NOMINAL_DATE,
        class_types=NUMERIC_CLASS,
        missing_class_values=True,
    )

    def build_params(self, config: RidgeRegressionConfig, dataset: Dataset):
        return {"alpha": config.shrinkage}


# --- Random Forest Regressor ---
class RandomForestRegressorApplier(SklearnApplier):
    pass


@register_algorithm
class RandomForestRegressorCalculator(SklearnCalculator):
    algorithm_id = "random_forest_regressor"
    applier_class = RandomForestRegressorApplier
    adapter_class = RegressorAdapter
    config_class = RandomForestConfig
    model_class = RandomForestRegressor
    _problem_type = "regression"
    capabilities = Capabilities(
        attribute_types=NUMERIC_NOMINAL_DATE,
        class_types=NUMERIC_CLASS,
        missing_values=True,
        missing_class_values=True,
    )

    def build_params(self, config: RandomForestConfig, dataset: Dataset):
        return random_forest_params(config, dataset)


# --- Gaussian Process Regression ---
class GaussianProcessRegressionConfig(BaseModel):
    kernel: Kernel = Field(default_factory=GaussianKernel)
    # Shrinkage/regularization factor
    shrinkage: float = Field(default=0.01, ge=0.0)


class GaussianProcessRegressionApplier(SklearnApplier):
    pass


@register_algorithm
class GaussianProcessRegressionCalculator(SklearnCalculator):
    """
    Posterior mean of a Gaussian process with a fixed kernel, i.e. kernel
    ridge regression with ``shrinkage`` as noise term.
    """

    algorithm_id = "gaussian_process_regression"
    applier_class = GaussianProcessRegressionApplier
    adapter_class = RegressorAdapter
    config_class = GaussianProcessRegressionConfig
    model_class = KernelRidge
    _problem_type = "regression"
    capabilities = Capabilities(
        attribute_types=NUMERIC_NOMINAL_DATE,
        class_types=NUMERIC_CLASS | {HostAttributeType.DATE},
        missing_class_values=True,
    )

    def build_params(self, config: GaussianProcessRegressionConfig, dataset: Dataset):
        return {"kernel": config.kernel, "alpha": config.shrinkage}


# --- Support Vector Regression ---
class SVRConfig(BaseModel):
    kernel: Kernel = Field(default_factory=GaussianKernel)
    epsilon: float = Field(default=1e-3, ge=0.0)
    capacity: float = Field(default=1.0, gt=0.0)
    tolerance: float = Field(default=0.001, gt=0.0)


class SVRApplier(SklearnApplier):
    pass


@register_algorithm
class SVRCalculator(SklearnCalculator):
    algorithm_id = "svr"
    applier_class = SVRApplier
    adapter_class = RegressorAdapter
    config_class = SVRConfig
    model_class = SVR
    _problem_type = "regression"
    capabilities = Capabilities(
        attribute_types=NUMERIC_NOMINAL_DATE,
        class_types=NUMERIC_CLASS,
        missing_class_values=True,
    )

    def build_params(self, config: SVRConfig, dataset: Dataset):
        return {
            "kernel": config.kernel,
            "epsilon": config.epsilon,
            "C": config.capacity,
            "tol": config.tolerance,
        }
