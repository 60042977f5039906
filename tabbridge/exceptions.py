"""Exceptions raised by the conversion layer and the model adapters."""

from typing import Any, Dict, Optional


class TabBridgeError(Exception):
    """Base exception for tabbridge operations."""

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class UnsupportedAttributeType(TabBridgeError):
    """Raised when a host column type has no attribute counterpart."""

    def __init__(self, index: int, name: str, type_name: str):
        super().__init__(
            f"Unhandled attribute type (#{index + 1}/{name}): {type_name}",
            {"index": index, "name": name, "type": type_name},
        )
        self.index = index
        self.name = name
        self.type_name = type_name


class UnknownCategoryValue(TabBridgeError):
    """Raised when a value cannot be looked up on a closed attribute."""

    def __init__(self, attribute: str, value: Any, reason: Optional[str] = None):
        message = f"Unknown value '{value}' for attribute '{attribute}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, {"attribute": attribute, "value": value})
        self.attribute = attribute
        self.value = value


class IncompatibleData(TabBridgeError):
    """Raised when a dataset fails an algorithm's capability check."""

    def __init__(self, message: str, algorithm: Optional[str] = None, problems: Optional[list] = None):
        detail: Dict[str, Any] = {"problems": list(problems or [])}
        if algorithm:
            detail["algorithm"] = algorithm
        super().__init__(message, detail)
        self.problems = detail["problems"]


class NotBuilt(TabBridgeError):
    """Raised when predicting or updating before a successful build."""

    def __init__(self, operation: str = "predict"):
        super().__init__(f"No model built yet, cannot {operation}!", {"operation": operation})


class UnsupportedOperation(TabBridgeError):
    """Raised when the trained model lacks the capability an operation needs."""

    def __init__(self, operation: str, model_type: Optional[str] = None):
        message = f"Operation '{operation}' is not supported"
        if model_type:
            message += f" by {model_type}"
        super().__init__(message, {"operation": operation, "model_type": model_type})


class TrainingFailed(TabBridgeError):
    """Raised when the external algorithm itself reports a failure."""

    def __init__(self, algorithm: str, cause: BaseException):
        super().__init__(
            f"Training of '{algorithm}' failed: {cause}",
            {"algorithm": algorithm, "cause": type(cause).__name__},
        )


class HeaderRebuildError(TabBridgeError):
    """Raised when a dataset header snapshot cannot be reconstructed."""

    def __init__(self, relation: str, cause: Optional[BaseException] = None):
        message = f"Failed to reconstruct dataset '{relation}' from header"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message, {"relation": relation})
