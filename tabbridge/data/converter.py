"""
Conversion between host datasets and algorithm-facing datasets.

Every categorical cell is encoded with the attribute of the dataset it is
converted for, never with a table from another dataset instance.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional, Union

import numpy as np
import pandas as pd

from ..config import get_settings
from ..exceptions import IncompatibleData, UnknownCategoryValue, UnsupportedAttributeType
from .attributes import (
    MISSING,
    Attribute,
    DateAttribute,
    NominalAttribute,
    NumericAttribute,
    StringAttribute,
    is_missing,
)
from .dataset import Dataset
from .host import HostAttribute, HostAttributeType, HostDataset, HostSchema, is_missing_cell

logger = logging.getLogger(__name__)

HostRow = Union[pd.Series, Mapping[str, Any]]


class UnknownValuePolicy(str, Enum):
    ERROR = "error"
    MISSING = "missing"


def resolve_policy(policy: Optional[Union[UnknownValuePolicy, str]]) -> UnknownValuePolicy:
    if policy is None:
        policy = get_settings().UNKNOWN_VALUE_POLICY
    return UnknownValuePolicy(policy)


def convert_attribute(attribute: HostAttribute, index: int) -> Attribute:
    """Maps a host column description onto its attribute variant."""
    if attribute.type == HostAttributeType.NUMERIC:
        return NumericAttribute(attribute.name, attribute.weight)
    if attribute.type == HostAttributeType.DATE:
        return DateAttribute(attribute.name, attribute.date_format, attribute.weight)
    if attribute.type == HostAttributeType.NOMINAL:
        return NominalAttribute(attribute.name, attribute.values, attribute.weight)
    if attribute.type == HostAttributeType.STRING:
        return StringAttribute(attribute.name, attribute.weight, attribute.values)
    raise UnsupportedAttributeType(index, attribute.name, attribute.type.value)


def convert_schema(schema: HostSchema) -> Dataset:
    """Builds the zero-row dataset structure for a host schema."""
    attributes = []
    response = None
    for i, host_attribute in enumerate(schema.attributes):
        attribute = convert_attribute(host_attribute, i)
        if i == schema.class_index:
            response = attribute
        else:
            attributes.append(attribute)
    return Dataset(schema.relation, attributes, response)


def convert_dataset(
    host: HostDataset,
    policy: Optional[Union[UnknownValuePolicy, str]] = None,
) -> Dataset:
    """
    Converts a host dataset into an algorithm-facing dataset.

    The class column (if any) becomes the response attribute and is left
    out of the feature columns.
    """
    policy = resolve_policy(policy)
    dataset = convert_schema(host.schema)
    has_class = host.schema.class_index != -1
    for row in host.rows():
        values = convert_row(row, host.schema, dataset, policy)
        if has_class:
            dataset.add(values, convert_label(row, host.schema, dataset, policy))
        else:
            dataset.add(values)
    logger.debug(
        f"Converted '{host.schema.relation}': {dataset.num_rows} rows, "
        f"{dataset.num_attributes} attributes, response={dataset.response!r}"
    )
    return dataset


def convert_row(
    row: HostRow,
    schema: HostSchema,
    dataset: Dataset,
    policy: Optional[Union[UnknownValuePolicy, str]] = None,
) -> np.ndarray:
    """Turns a host row into a feature vector (class column excluded)."""
    policy = resolve_policy(policy)
    expected = schema.num_attributes - (0 if schema.class_index == -1 else 1)
    if expected != dataset.num_attributes:
        raise IncompatibleData(
            f"Schema '{schema.relation}' has {expected} feature columns, "
            f"dataset '{dataset.name}' has {dataset.num_attributes}"
        )
    result = np.full(dataset.num_attributes, MISSING, dtype=float)
    j = 0
    for i, host_attribute in enumerate(schema.attributes):
        if i == schema.class_index:
            continue
        result[j] = _encode_cell(_get_cell(row, host_attribute.name), dataset.attributes[j], policy)
        j += 1
    return result


def convert_label(
    row: HostRow,
    schema: HostSchema,
    dataset: Dataset,
    policy: Optional[Union[UnknownValuePolicy, str]] = None,
) -> float:
    """Turns the class cell of a host row into the numeric label."""
    if schema.class_index == -1 or dataset.response is None:
        raise IncompatibleData(f"Dataset '{dataset.name}' has no response attribute")
    policy = resolve_policy(policy)
    cell = _get_cell(row, schema.attributes[schema.class_index].name)
    return _encode_cell(cell, dataset.response, policy)


def decode_label(code: float, dataset: Dataset) -> Optional[Union[str, float]]:
    """Maps a numeric label back into the host label space."""
    if dataset.response is None:
        raise IncompatibleData(f"Dataset '{dataset.name}' has no response attribute")
    if code is None or is_missing(code):
        return None
    if isinstance(dataset.response, NumericAttribute):
        return float(code)
    return dataset.response.to_string(code)


def _get_cell(row: HostRow, name: str) -> Any:
    try:
        return row[name]
    except KeyError:
        raise IncompatibleData(f"Row has no value for column '{name}'")


def _encode_cell(cell: Any, attribute: Attribute, policy: UnknownValuePolicy) -> float:
    if is_missing_cell(cell):
        return MISSING
    if isinstance(attribute, NumericAttribute):
        if isinstance(cell, (int, float, np.number)) and not isinstance(cell, bool):
            return float(cell)
        # Text that is not a number follows the unknown value policy below
    if isinstance(attribute, DateAttribute) and isinstance(cell, (datetime, date, np.datetime64)):
        text = attribute.format(pd.Timestamp(cell))
    else:
        text = str(cell)
    try:
        return attribute.value_of(text)
    except UnknownCategoryValue:
        if policy == UnknownValuePolicy.MISSING:
            logger.debug(f"Unknown value '{text}' for '{attribute.name}', treated as missing")
            return MISSING
        raise
