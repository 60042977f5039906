from .attributes import (
    MISSING,
    Attribute,
    AttributeType,
    DateAttribute,
    NominalAttribute,
    NumericAttribute,
    StringAttribute,
    is_missing,
)
from .converter import (
    UnknownValuePolicy,
    convert_attribute,
    convert_dataset,
    convert_label,
    convert_row,
    convert_schema,
    decode_label,
)
from .dataset import Dataset
from .header import DatasetHeader
from .host import HostAttribute, HostAttributeType, HostDataset, HostSchema
