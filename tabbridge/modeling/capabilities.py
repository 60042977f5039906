"""
Capability declarations.

``Capabilities`` describes which host datasets an algorithm accepts and is
checked before any conversion happens. ``ModelCapability`` describes what a
trained model can do once built.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Type

from ..data.host import HostAttributeType, HostDataset
from ..exceptions import IncompatibleData

logger = logging.getLogger(__name__)


class ModelCapability(str, Enum):
    PREDICT = "predict"
    PREDICT_DISTRIBUTION = "predict_distribution"
    INCREMENTAL_LEARN = "incremental_learn"


@dataclass(frozen=True)
class Capabilities:
    attribute_types: FrozenSet[HostAttributeType] = frozenset()
    class_types: FrozenSet[HostAttributeType] = frozenset()
    no_class: bool = False
    missing_values: bool = False
    missing_class_values: bool = False

    def test(self, host: HostDataset) -> List[str]:
        """Returns the reasons the dataset is not accepted (empty if it is)."""
        problems = []
        schema = host.schema
        for i, attribute in enumerate(schema.attributes):
            if i == schema.class_index:
                continue
            if attribute.type not in self.attribute_types:
                problems.append(f"Cannot handle {attribute.type.value} attributes ('{attribute.name}')")

        class_attribute = schema.class_attribute
        if class_attribute is None:
            if not self.no_class:
                problems.append("Class attribute required")
        elif class_attribute.type not in self.class_types:
            problems.append(f"Cannot handle {class_attribute.type.value} class ('{class_attribute.name}')")

        if not self.missing_values and host.has_missing_values():
            problems.append("Cannot handle missing values")
        if class_attribute is not None and not self.missing_class_values and host.has_missing_class():
            problems.append("Cannot handle missing class values")
        return problems

    def test_with_fail(self, host: HostDataset, algorithm: Optional[str] = None) -> None:
        problems = self.test(host)
        if problems:
            logger.warning(f"{algorithm or 'Algorithm'} rejected '{host.schema.relation}': {'; '.join(problems)}")
            raise IncompatibleData(
                f"{algorithm or 'Algorithm'}: {'; '.join(problems)}",
                algorithm=algorithm,
                problems=problems,
            )


NUMERIC_NOMINAL = frozenset({HostAttributeType.NUMERIC, HostAttributeType.NOMINAL})
NUMERIC_NOMINAL_DATE = NUMERIC_NOMINAL | {HostAttributeType.DATE}


# Algorithm id -> calculator class
_ALGORITHMS: Dict[str, Type] = {}


def register_algorithm(cls: Type) -> Type:
    """Class decorator adding a calculator to the capability registry."""
    algorithm_id = cls.algorithm_id
    if algorithm_id in _ALGORITHMS and _ALGORITHMS[algorithm_id] is not cls:
        raise ValueError(f"Algorithm '{algorithm_id}' already registered")
    _ALGORITHMS[algorithm_id] = cls
    return cls


def _load_families() -> None:
    # Importing the family modules fills the registry
    from . import classification, clustering, regression  # noqa: F401


def list_algorithms() -> List[str]:
    _load_families()
    return sorted(_ALGORITHMS)


def get_calculator_class(algorithm_id: str) -> Type:
    _load_families()
    try:
        return _ALGORITHMS[algorithm_id]
    except KeyError:
        raise ValueError(f"Unknown algorithm: {algorithm_id}")


def get_capabilities(algorithm_id: str) -> Capabilities:
    """Accepted attribute/class types and missing-value tolerance of an algorithm."""
    return get_calculator_class(algorithm_id).capabilities


def get_model_capabilities(algorithm_id: str) -> FrozenSet[ModelCapability]:
    return frozenset(get_calculator_class(algorithm_id).model_capabilities)


@dataclass
class CapabilityReport:
    algorithm_id: str
    accepted: bool
    problems: List[str] = field(default_factory=list)


def check_algorithms(host: HostDataset) -> List[CapabilityReport]:
    """Tests a dataset against every registered algorithm."""
    return [
        CapabilityReport(algorithm_id, not problems, problems)
        for algorithm_id in list_algorithms()
        for problems in [get_capabilities(algorithm_id).test(host)]
    ]
