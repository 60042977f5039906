import logging

from ..data.converter import HostRow, convert_label
from ..exceptions import NotBuilt, UnsupportedOperation
from .base import ClassifierAdapter, model_identity
from .capabilities import ModelCapability

logger = logging.getLogger(__name__)


class OnlineUpdateAdapter(ClassifierAdapter):
    """Classifier adapter whose model can learn from single rows after build."""

    def update(self, row: HostRow) -> None:
        """
        Updates the built model in place with one labelled host row.
        """
        if not self.is_built:
            raise NotBuilt("update")
        if ModelCapability.INCREMENTAL_LEARN not in self.model_capabilities:
            raise UnsupportedOperation("update", model_identity(self._model))

        values = self._convert(row, "update")
        label = convert_label(row, self._header.schema, self._header.require_dataset(), self.unknown_value_policy)
        if label != label:
            logger.debug("Skipping update with missing class value")
            return
        self.applier.learn(self._model, values, label)
