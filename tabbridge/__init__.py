"""
tabbridge: converts typed host datasets into numeric feature matrices and
wraps external learning algorithms in a uniform build/predict lifecycle.
"""

__version__ = "0.1.0"

from .data import DatasetHeader, HostDataset, HostSchema, convert_dataset
from .exceptions import (
    HeaderRebuildError,
    IncompatibleData,
    NotBuilt,
    TabBridgeError,
    TrainingFailed,
    UnknownCategoryValue,
    UnsupportedAttributeType,
    UnsupportedOperation,
)
from .modeling import create_adapter, get_capabilities, list_algorithms
