from typing import List, Optional, Sequence

import numpy as np

from .attributes import Attribute, NominalAttribute


class Dataset:
    """
    Algorithm-facing dataset: feature attributes, an optional response
    attribute and the numeric rows/labels encoded through them.
    """

    def __init__(self, name: str, attributes: Sequence[Attribute], response: Optional[Attribute] = None):
        self.name = name
        self.attributes: List[Attribute] = list(attributes)
        self.response = response
        self.x: List[np.ndarray] = []
        self.y: List[float] = []

    @property
    def num_attributes(self) -> int:
        return len(self.attributes)

    @property
    def num_rows(self) -> int:
        return len(self.x)

    @property
    def has_response(self) -> bool:
        return self.response is not None

    def add(self, row: Sequence[float], label: Optional[float] = None) -> None:
        values = np.asarray(row, dtype=float)
        if values.shape != (self.num_attributes,):
            raise ValueError(
                f"Row has {values.size} values, dataset '{self.name}' has {self.num_attributes} attributes"
            )
        if self.has_response and label is None:
            raise ValueError(f"Dataset '{self.name}' has a response attribute, label required")
        if not self.has_response and label is not None:
            raise ValueError(f"Dataset '{self.name}' has no response attribute")
        self.x.append(values)
        if label is not None:
            self.y.append(float(label))

    def matrix(self) -> np.ndarray:
        if not self.x:
            return np.empty((0, self.num_attributes), dtype=float)
        return np.vstack(self.x)

    def labels(self) -> Optional[np.ndarray]:
        if not self.has_response:
            return None
        return np.asarray(self.y, dtype=float)

    def int_labels(self) -> Optional[np.ndarray]:
        labels = self.labels()
        return None if labels is None else labels.astype(int)

    def num_classes(self) -> int:
        if isinstance(self.response, NominalAttribute):
            return self.response.size()
        raise ValueError(f"Response of dataset '{self.name}' is not nominal")

    def head(self, n: int) -> "Dataset":
        """Dataset sharing the attribute objects, with the first n rows."""
        result = Dataset(self.name, self.attributes, self.response)
        result.x = list(self.x[:n])
        if self.has_response:
            result.y = list(self.y[:n])
        return result

    def schema_equals(self, other: "Dataset") -> bool:
        return self.attributes == other.attributes and self.response == other.response

    def __repr__(self) -> str:
        return (
            f"Dataset(name={self.name!r}, attributes={self.num_attributes}, "
            f"rows={self.num_rows}, response={self.response!r})"
        )
