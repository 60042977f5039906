import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Type, Union

import numpy as np
from pydantic import BaseModel

from ..config import get_settings
from ..data.converter import HostRow, UnknownValuePolicy, convert_dataset, convert_row, decode_label, resolve_policy
from ..data.dataset import Dataset
from ..data.header import DatasetHeader
from ..data.host import HostDataset
from ..exceptions import IncompatibleData, NotBuilt, TabBridgeError, TrainingFailed, UnsupportedOperation
from .capabilities import Capabilities, ModelCapability, get_calculator_class

logger = logging.getLogger(__name__)


class BaseModelCalculator(ABC):
    """Training entry point of an external algorithm."""

    algorithm_id: ClassVar[str]
    config_class: ClassVar[Type[BaseModel]]
    capabilities: ClassVar[Capabilities]
    model_capabilities: ClassVar[FrozenSet[ModelCapability]] = frozenset({ModelCapability.PREDICT})
    applier_class: ClassVar[Type["BaseModelApplier"]]
    adapter_class: ClassVar[Type["ModelAdapter"]]

    @property
    @abstractmethod
    def problem_type(self) -> str:
        """Returns 'classification', 'regression' or 'clustering'."""
        pass

    def parse_config(self, config: Optional[Union[BaseModel, Dict[str, Any]]]) -> BaseModel:
        if isinstance(config, self.config_class):
            return config
        if isinstance(config, BaseModel):
            config = config.model_dump()
        return self.config_class.model_validate(config or {})

    @abstractmethod
    def fit(self, dataset: Dataset, config: BaseModel) -> Any:
        """
        Trains the model on the converted dataset. Returns the model object.
        """
        pass

    def describe_config(self, config: BaseModel) -> str:
        options = " ".join(f"{k}={v}" for k, v in config.model_dump().items())
        return f"{self.algorithm_id} {options}".strip()


class BaseModelApplier(ABC):
    @abstractmethod
    def predict(self, model: Any, values: np.ndarray) -> float:
        """
        Predicts a single feature vector.
        """
        pass

    def predict_proba(self, model: Any, values: np.ndarray, num_classes: int) -> np.ndarray:
        """
        Class distribution for a single feature vector, index i = class code i.
        """
        raise UnsupportedOperation("predict_distribution", model_identity(model))

    def learn(self, model: Any, values: np.ndarray, label: float) -> None:
        """
        Incrementally updates the model with one labelled feature vector.
        """
        raise UnsupportedOperation("update", model_identity(model))

    def number_of_clusters(self, model: Any) -> Optional[int]:
        return None


def model_identity(model: Any) -> str:
    return f"{type(model).__module__}.{type(model).__name__}"


class DistributionFallback(str, Enum):
    ONE_HOT = "one_hot"
    ERROR = "error"


class ModelAdapter:
    """
    Build/reset/predict lifecycle around one calculator/applier pair.

    Holds at most one header and one model; both are set together by a
    successful ``build`` and cleared together by ``reset``.
    """

    def __init__(
        self,
        calculator: BaseModelCalculator,
        applier: BaseModelApplier,
        config: Optional[Union[BaseModel, Dict[str, Any]]] = None,
        unknown_value_policy: Optional[Union[UnknownValuePolicy, str]] = None,
    ):
        self.calculator = calculator
        self.applier = applier
        self.config = calculator.parse_config(config)
        self.unknown_value_policy = resolve_policy(unknown_value_policy)
        self.model_capabilities: FrozenSet[ModelCapability] = frozenset(calculator.model_capabilities)
        self._header: Optional[DatasetHeader] = None
        self._model: Any = None

    @property
    def is_built(self) -> bool:
        return self._model is not None

    @property
    def header(self) -> Optional[DatasetHeader]:
        return self._header

    @property
    def model(self) -> Any:
        return self._model

    @property
    def adapter_id(self) -> str:
        return f"{type(self).__name__} {self.calculator.describe_config(self.config)}"

    def reset(self) -> None:
        self._header = None
        self._model = None

    def _prepare(self, host: HostDataset) -> HostDataset:
        return host

    def build(self, host: HostDataset) -> None:
        """
        Clears the previous model, checks capabilities, converts the host
        dataset and trains. On failure the adapter is left without header
        and model.
        """
        algorithm = self.calculator.algorithm_id
        self.reset()
        self.calculator.capabilities.test_with_fail(host, algorithm)

        data = self._prepare(host)
        dataset = convert_dataset(data, self.unknown_value_policy)
        # Unknown values may have been encoded as missing
        self._check_missing(dataset.matrix(), dataset, algorithm)
        logger.info(f"Training {algorithm} on {dataset.num_rows} rows, {dataset.num_attributes} attributes")
        try:
            model = self.calculator.fit(dataset, self.config)
        except TabBridgeError:
            raise
        except Exception as e:
            logger.error(f"Training of {algorithm} failed: {e}")
            raise TrainingFailed(algorithm, e) from e

        self._header = DatasetHeader(dataset, data)
        self._model = model
        logger.info(f"Built {model_identity(model)} for {algorithm}")

    def _convert(self, row: HostRow, operation: str) -> np.ndarray:
        if not self.is_built:
            raise NotBuilt(operation)
        dataset = self._header.require_dataset()
        values = convert_row(row, self._header.schema, dataset, self.unknown_value_policy)
        self._check_missing(values.reshape(1, -1), dataset, self.calculator.algorithm_id)
        return values

    def _check_missing(self, matrix: np.ndarray, dataset: Dataset, algorithm: str) -> None:
        if self.calculator.capabilities.missing_values:
            return
        holes = np.isnan(matrix).any(axis=0)
        if holes.any():
            columns = [a.name for a, hole in zip(dataset.attributes, holes) if hole]
            raise IncompatibleData(
                f"{algorithm}: Cannot handle missing values (columns: {', '.join(columns)})",
                algorithm=algorithm,
                problems=[f"Cannot handle missing values in '{name}'" for name in columns],
            )

    def predict(self, row: HostRow) -> float:
        values = self._convert(row, "predict")
        return self.applier.predict(self._model, values)

    def describe(self) -> str:
        if self._model is None:
            return f"{self.adapter_id}\nNo model built yet!"
        return f"{self.adapter_id}\n{model_identity(self._model)}"

    def __str__(self) -> str:
        return self.describe()


class ClassifierAdapter(ModelAdapter):
    def __init__(
        self,
        calculator: BaseModelCalculator,
        applier: BaseModelApplier,
        config: Optional[Union[BaseModel, Dict[str, Any]]] = None,
        unknown_value_policy: Optional[Union[UnknownValuePolicy, str]] = None,
        distribution_fallback: Optional[Union[DistributionFallback, str]] = None,
    ):
        super().__init__(calculator, applier, config, unknown_value_policy)
        if distribution_fallback is None:
            distribution_fallback = get_settings().DISTRIBUTION_FALLBACK
        self.distribution_fallback = DistributionFallback(distribution_fallback)

    def _prepare(self, host: HostDataset) -> HostDataset:
        # Rows without a label cannot be trained on
        return host.drop_missing_class()

    def predict_distribution(self, row: HostRow) -> np.ndarray:
        values = self._convert(row, "predict_distribution")
        num_classes = self._header.require_dataset().num_classes()
        if ModelCapability.PREDICT_DISTRIBUTION in self.model_capabilities:
            return self.applier.predict_proba(self._model, values, num_classes)

        if self.distribution_fallback == DistributionFallback.ERROR:
            raise UnsupportedOperation("predict_distribution", model_identity(self._model))
        code = self.applier.predict(self._model, values)
        logger.debug(f"{model_identity(self._model)} has no class probabilities, using hard prediction {code}")
        result = np.zeros(num_classes, dtype=float)
        if code == code:
            result[int(code)] = 1.0
        return result

    def predict_label(self, row: HostRow) -> Optional[Union[str, float]]:
        """Predicts and decodes the result into the host label space."""
        code = self.predict(row)
        return decode_label(code, self._header.require_dataset())


class RegressorAdapter(ModelAdapter):
    def _prepare(self, host: HostDataset) -> HostDataset:
        return host.drop_missing_class()


class ClustererAdapter(ModelAdapter):
    def predict(self, row: HostRow) -> int:
        return int(super().predict(row))

    def number_of_clusters(self) -> int:
        if not self.is_built:
            raise NotBuilt("number_of_clusters")
        count = self.applier.number_of_clusters(self._model)
        if count is None:
            raise UnsupportedOperation("number_of_clusters", model_identity(self._model))
        return count


def create_adapter(
    algorithm_id: str,
    config: Optional[Union[BaseModel, Dict[str, Any]]] = None,
    **kwargs: Any,
) -> ModelAdapter:
    """Builds the adapter registered for an algorithm id, e.g. ``create_adapter("svm")``."""
    calculator = get_calculator_class(algorithm_id)()
    return calculator.adapter_class(calculator, calculator.applier_class(), config, **kwargs)
