from typing import Any, Dict, Optional, Type

import numpy as np
from pydantic import BaseModel
from sklearn.base import BaseEstimator

from ..data.dataset import Dataset
from .base import BaseModelApplier, BaseModelCalculator


class SklearnCalculator(BaseModelCalculator):
    """
    Generic scikit-learn training entry point: map the family config onto
    estimator parameters, instantiate, fit.
    """

    model_class: Type[BaseEstimator]
    _problem_type: str

    @property
    def problem_type(self) -> str:
        return self._problem_type

    def build_params(self, config: BaseModel, dataset: Dataset) -> Dict[str, Any]:
        return config.model_dump()

    def fit(self, dataset: Dataset, config: BaseModel) -> Any:
        # 1. Map config to estimator parameters
        params = self.build_params(config, dataset)

        # 2. Instantiate Model
        model = self.model_class(**params)

        # 3. Fit
        X = dataset.matrix()
        if self.problem_type == "classification":
            model.fit(X, dataset.int_labels())
        elif self.problem_type == "regression":
            model.fit(X, dataset.labels())
        else:
            model.fit(X)
        return model


class SklearnApplier(BaseModelApplier):
    def predict(self, model: Any, values: np.ndarray) -> float:
        return float(model.predict(values.reshape(1, -1))[0])


class SklearnClassifierApplier(SklearnApplier):
    def predict_proba(self, model: Any, values: np.ndarray, num_classes: int) -> np.ndarray:
        probas = model.predict_proba(values.reshape(1, -1))[0]
        # Classes absent from the training data keep probability 0
        result = np.zeros(num_classes, dtype=float)
        result[np.asarray(model.classes_, dtype=int)] = probas
        return result


class SklearnOnlineClassifierApplier(SklearnClassifierApplier):
    def learn(self, model: Any, values: np.ndarray, label: float) -> None:
        model.partial_fit(values.reshape(1, -1), np.asarray([int(label)]))


class SklearnClustererApplier(SklearnApplier):
    def number_of_clusters(self, model: Any) -> Optional[int]:
        n_clusters = getattr(model, "n_clusters", None)
        if isinstance(n_clusters, int):
            return n_clusters
        return None
