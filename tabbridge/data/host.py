"""
Host-side dataset description.

A host dataset is a pandas DataFrame together with a ``HostSchema`` that
types each column. The schema is the serializable structural description
that a ``DatasetHeader`` keeps across persistence.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional

import numpy as np
import pandas as pd
from pydantic import BaseModel, Field, model_validator

from ..config import get_settings

DEFAULT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


class HostAttributeType(str, Enum):
    NUMERIC = "numeric"
    NOMINAL = "nominal"
    DATE = "date"
    STRING = "string"
    # Host types without an attribute counterpart
    RELATIONAL = "relational"
    BOOLEAN = "boolean"


class HostAttribute(BaseModel):
    name: str
    type: HostAttributeType
    weight: float = 1.0
    # Nominal: labels in enumeration order. String: values seen so far.
    values: List[str] = Field(default_factory=list)
    date_format: str = DEFAULT_DATE_FORMAT


class HostSchema(BaseModel):
    relation: str = "dataset"
    attributes: List[HostAttribute] = Field(default_factory=list)
    class_index: int = -1

    @model_validator(mode="after")
    def check_class_index(self):
        if self.class_index < -1 or self.class_index >= len(self.attributes):
            raise ValueError(
                f"class_index {self.class_index} out of range for {len(self.attributes)} attributes"
            )
        names = [a.name for a in self.attributes]
        if len(set(names)) != len(names):
            raise ValueError("Attribute names must be unique")
        return self

    @property
    def num_attributes(self) -> int:
        return len(self.attributes)

    @property
    def class_attribute(self) -> Optional[HostAttribute]:
        if self.class_index == -1:
            return None
        return self.attributes[self.class_index]

    def attribute_names(self) -> List[str]:
        return [a.name for a in self.attributes]

    def copy(self) -> "HostSchema":
        return self.model_copy(deep=True)

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        target_column: Optional[str] = None,
        date_formats: Optional[Dict[str, str]] = None,
        relation: str = "dataset",
    ) -> "HostSchema":
        """
        Infers a schema from DataFrame dtypes.

        ``category`` columns become nominal with the categories in their
        declared order; object/string columns become string attributes.
        """
        date_formats = date_formats or {}
        default_format = get_settings().DEFAULT_DATE_FORMAT
        attributes = [
            _infer_attribute(str(col), df[col], date_formats.get(str(col), default_format))
            for col in df.columns
        ]
        class_index = -1
        if target_column is not None:
            if target_column not in df.columns:
                raise ValueError(f"Target column '{target_column}' not found in data")
            class_index = list(df.columns).index(target_column)
        return cls(relation=relation, attributes=attributes, class_index=class_index)


def _infer_attribute(name: str, series: pd.Series, date_format: str) -> HostAttribute:
    dtype = series.dtype
    if isinstance(dtype, pd.CategoricalDtype):
        labels = [str(c) for c in dtype.categories]
        return HostAttribute(name=name, type=HostAttributeType.NOMINAL, values=labels)
    if pd.api.types.is_bool_dtype(dtype):
        return HostAttribute(name=name, type=HostAttributeType.BOOLEAN)
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return HostAttribute(name=name, type=HostAttributeType.DATE, date_format=date_format)
    if pd.api.types.is_numeric_dtype(dtype) and not pd.api.types.is_complex_dtype(dtype):
        return HostAttribute(name=name, type=HostAttributeType.NUMERIC)
    if pd.api.types.is_object_dtype(dtype) or pd.api.types.is_string_dtype(dtype):
        seen: List[str] = []
        for value in series:
            if is_missing_cell(value):
                continue
            text = str(value)
            if text not in seen:
                seen.append(text)
        return HostAttribute(name=name, type=HostAttributeType.STRING, values=seen)
    return HostAttribute(name=name, type=HostAttributeType.RELATIONAL)


def is_missing_cell(value) -> bool:
    """True for None, NaN and NaT cells."""
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


@dataclass
class HostDataset:
    schema: HostSchema
    frame: pd.DataFrame

    def __post_init__(self):
        columns = list(self.frame.columns)
        if columns != self.schema.attribute_names():
            raise ValueError(
                f"Frame columns {columns} do not match schema attributes {self.schema.attribute_names()}"
            )

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        target_column: Optional[str] = None,
        date_formats: Optional[Dict[str, str]] = None,
        relation: str = "dataset",
    ) -> "HostDataset":
        schema = HostSchema.from_frame(df, target_column, date_formats, relation)
        # Attribute names are strings, lookups go through them
        return cls(schema=schema, frame=df.rename(columns=str))

    @property
    def num_rows(self) -> int:
        return len(self.frame)

    @property
    def class_column(self) -> Optional[str]:
        attribute = self.schema.class_attribute
        return attribute.name if attribute is not None else None

    def rows(self) -> Iterator[pd.Series]:
        for _, row in self.frame.iterrows():
            yield row

    def copy_structure(self) -> "HostDataset":
        """Zero-row copy sharing no state with this dataset."""
        return HostDataset(schema=self.schema.copy(), frame=self.frame.iloc[0:0].copy())

    def feature_columns(self) -> List[str]:
        return [a.name for i, a in enumerate(self.schema.attributes) if i != self.schema.class_index]

    def has_missing_values(self) -> bool:
        features = self.feature_columns()
        if not features:
            return False
        return bool(self.frame[features].isna().to_numpy().any())

    def has_missing_class(self) -> bool:
        column = self.class_column
        if column is None:
            return False
        return bool(self.frame[column].isna().any())

    def drop_missing_class(self) -> "HostDataset":
        """Copy without the rows whose class value is missing."""
        column = self.class_column
        if column is None:
            return HostDataset(schema=self.schema.copy(), frame=self.frame.copy())
        mask = ~self.frame[column].isna().to_numpy()
        return HostDataset(schema=self.schema.copy(), frame=self.frame.loc[np.asarray(mask)].copy())
