"""Schema-only dataset snapshot that survives persistence."""

import logging
from typing import Any, Dict, Optional

import pandas as pd

from ..exceptions import HeaderRebuildError
from .converter import convert_dataset
from .dataset import Dataset
from .host import HostDataset, HostSchema

logger = logging.getLogger(__name__)


class DatasetHeader:
    """
    Holds the host-side description of a training dataset plus a derived,
    zero-row snapshot of the converted dataset.

    Only the description is persisted. The snapshot is rebuilt from it on
    first access after loading.
    """

    def __init__(self, dataset: Dataset, host: HostDataset):
        self._description: HostSchema = self._describe(host.schema, dataset)
        self._snapshot: Optional[Dataset] = dataset.head(0)
        self.rebuild_error: Optional[BaseException] = None

    @staticmethod
    def _describe(schema: HostSchema, dataset: Dataset) -> HostSchema:
        """
        Copy of ``schema`` with each entry taken from the converted attribute,
        so String tables include every value coded so far.
        """
        description = schema.copy()
        features = iter(dataset.attributes)
        for i in range(description.num_attributes):
            attribute = dataset.response if i == description.class_index else next(features)
            if attribute is not None:
                description.attributes[i] = attribute.to_host()
        return description

    @property
    def schema(self) -> HostSchema:
        return self._description

    @property
    def is_materialized(self) -> bool:
        return self._snapshot is not None

    @property
    def dataset(self) -> Optional[Dataset]:
        """
        Returns the snapshot, rebuilding it from the description if necessary.
        Returns None if the rebuild fails; the cause is kept in ``rebuild_error``.
        """
        if self._snapshot is None:
            try:
                empty = pd.DataFrame(columns=self._description.attribute_names())
                self._snapshot = convert_dataset(HostDataset(self._description.copy(), empty))
                self.rebuild_error = None
            except Exception as e:
                logger.exception(f"Failed to reconstruct dataset '{self._description.relation}' from header")
                self.rebuild_error = e
        return self._snapshot

    def require_dataset(self) -> Dataset:
        dataset = self.dataset
        if dataset is None:
            raise HeaderRebuildError(self._description.relation, self.rebuild_error) from self.rebuild_error
        return dataset

    def __getstate__(self) -> Dict[str, Any]:
        state = self.__dict__.copy()
        if self._snapshot is not None:
            # Strings first seen at prediction time keep their codes
            state["_description"] = self._describe(self._description, self._snapshot)
        state["_snapshot"] = None
        state["rebuild_error"] = None
        return state

    def __str__(self) -> str:
        return self._description.model_dump_json(indent=2)
