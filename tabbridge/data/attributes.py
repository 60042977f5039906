"""
Algorithm-facing attribute schema.

Each attribute turns the string form of a host cell into the float used in
feature and label vectors, and back again.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..config import get_settings
from ..exceptions import UnknownCategoryValue
from .host import HostAttribute, HostAttributeType

MISSING = float("nan")


def is_missing(value: float) -> bool:
    return value != value


class AttributeType(str, Enum):
    NUMERIC = "numeric"
    NOMINAL = "nominal"
    DATE = "date"
    STRING = "string"


class Attribute(ABC):
    type: AttributeType

    def __init__(self, name: str, weight: float = 1.0):
        self.name = name
        self.weight = weight

    @abstractmethod
    def value_of(self, text: str) -> float:
        """Returns the numeric encoding of the string form of a value."""
        pass

    @abstractmethod
    def to_string(self, code: float) -> str:
        """Returns the string form of a numeric encoding."""
        pass

    @abstractmethod
    def to_host(self) -> HostAttribute:
        """Returns the host-side description of this attribute."""
        pass

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.to_host() == other.to_host()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class NumericAttribute(Attribute):
    type = AttributeType.NUMERIC

    def value_of(self, text: str) -> float:
        try:
            return float(text)
        except (TypeError, ValueError) as e:
            raise UnknownCategoryValue(self.name, text, "not a number") from e

    def to_string(self, code: float) -> str:
        return repr(float(code))

    def to_host(self) -> HostAttribute:
        return HostAttribute(name=self.name, type=HostAttributeType.NUMERIC, weight=self.weight)


class NominalAttribute(Attribute):
    """Closed label set; the code of a label is its position in ``labels``."""

    type = AttributeType.NOMINAL

    def __init__(self, name: str, labels: Iterable[str], weight: float = 1.0):
        super().__init__(name, weight)
        self.labels: List[str] = list(labels)
        self._codes: Dict[str, int] = {label: i for i, label in enumerate(self.labels)}
        if len(self._codes) != len(self.labels):
            raise ValueError(f"Duplicate labels in nominal attribute '{name}'")

    def size(self) -> int:
        return len(self.labels)

    def value_of(self, text: str) -> float:
        code = self._codes.get(text)
        if code is None:
            raise UnknownCategoryValue(self.name, text)
        return float(code)

    def to_string(self, code: float) -> str:
        index = int(code)
        if index != code or not 0 <= index < len(self.labels):
            raise UnknownCategoryValue(self.name, code, "code out of range")
        return self.labels[index]

    def to_host(self) -> HostAttribute:
        return HostAttribute(
            name=self.name,
            type=HostAttributeType.NOMINAL,
            weight=self.weight,
            values=list(self.labels),
        )


class DateAttribute(Attribute):
    """
    Dates encoded as epoch milliseconds.

    The format is a ``strftime`` pattern and is used as-is; naive values are
    read as UTC wall clock, without locale or timezone normalization.
    """

    type = AttributeType.DATE

    def __init__(self, name: str, date_format: Optional[str] = None, weight: float = 1.0):
        super().__init__(name, weight)
        self.date_format = date_format or get_settings().DEFAULT_DATE_FORMAT

    def value_of(self, text: str) -> float:
        try:
            parsed = datetime.strptime(text, self.date_format)
        except (TypeError, ValueError) as e:
            raise UnknownCategoryValue(self.name, text, f"does not match '{self.date_format}'") from e
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.timestamp() * 1000.0

    def to_string(self, code: float) -> str:
        return datetime.fromtimestamp(code / 1000.0, tz=timezone.utc).strftime(self.date_format)

    def format(self, value: datetime) -> str:
        return value.strftime(self.date_format)

    def to_host(self) -> HostAttribute:
        return HostAttribute(
            name=self.name,
            type=HostAttributeType.DATE,
            weight=self.weight,
            date_format=self.date_format,
        )


class StringAttribute(Attribute):
    """Open label set; unseen values get the next free index."""

    type = AttributeType.STRING

    def __init__(self, name: str, weight: float = 1.0, values: Iterable[str] = ()):
        super().__init__(name, weight)
        self.values: List[str] = []
        self._codes: Dict[str, int] = {}
        for value in values:
            self.value_of(value)

    def size(self) -> int:
        return len(self.values)

    def value_of(self, text: str) -> float:
        code = self._codes.get(text)
        if code is None:
            code = len(self.values)
            self.values.append(text)
            self._codes[text] = code
        return float(code)

    def to_string(self, code: float) -> str:
        index = int(code)
        if index != code or not 0 <= index < len(self.values):
            raise UnknownCategoryValue(self.name, code, "code out of range")
        return self.values[index]

    def to_host(self) -> HostAttribute:
        return HostAttribute(
            name=self.name,
            type=HostAttributeType.STRING,
            weight=self.weight,
            values=list(self.values),
        )
