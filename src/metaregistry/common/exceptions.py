from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for metaregistry operations.

    This enum provides categorized error codes that can be used
    to identify error types without creating numerous exception classes.

    Attributes:
        VALIDATION_*: Input validation errors raised before any state changes
        DECORATION_*: Errors raised while folding decorator results
        REGISTRY_*: Registry lifecycle errors
    """
    # Validation errors
    VALIDATION_ERROR = "VALIDATION_001"
    INVALID_TARGET = "VALIDATION_002"
    INVALID_MEMBER_KEY = "VALIDATION_003"
    INVALID_METADATA_KEY = "VALIDATION_004"
    INVALID_DECORATOR_LIST = "VALIDATION_005"
    INVALID_DESCRIPTOR = "VALIDATION_006"

    # Decoration errors
    INVALID_DECORATOR_RESULT = "DECORATION_001"

    # Registry errors
    REGISTRY_ERROR = "REGISTRY_001"
    INVALID_PARENT = "REGISTRY_002"


class MetadataError(Exception):
    """Base exception for all metaregistry errors.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.REGISTRY_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

        # Lazy import to avoid circular dependency
        from metaregistry.logging import get_logger
        logger = get_logger(__name__)
        logger.debug(
            message,
            extra={"error_code": error_code.value, "details": self.details},
            exc_info=cause,
        )

    def __str__(self) -> str:
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
        }


class MetadataTypeError(MetadataError, TypeError):
    """Validation failure on an argument or on a decorator's return value.

    Subclasses ``TypeError`` so callers may handle it like any other type
    error raised by Python itself.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, error_code=error_code, details=details, cause=cause)


def _describe(value: Any) -> str:
    text = repr(value)
    return text[:200] + "..." if len(text) > 200 else text


def invalid_target_error(
    target: Any,
    expected: str = "an object",
    **kwargs
) -> MetadataTypeError:
    """Create an error for a target that is not object-like or not a class.

    Args:
        target: The rejected target
        expected: Human readable description of what was expected
        **kwargs: Additional arguments for MetadataTypeError

    Returns:
        MetadataTypeError with INVALID_TARGET code
    """
    details = kwargs.pop("details", {})
    details["target_type"] = type(target).__name__
    return MetadataTypeError(
        message=f"Target must be {expected}, got {_describe(target)}",
        error_code=ErrorCode.INVALID_TARGET,
        details=details,
        **kwargs
    )


def invalid_member_key_error(
    member: Any,
    reason: Optional[str] = None,
    **kwargs
) -> MetadataTypeError:
    """Create an error for a member key that cannot become a str or Symbol."""
    details = kwargs.pop("details", {})
    details["member_type"] = type(member).__name__
    message = f"Member key {_describe(member)} cannot be converted to a property key"
    if reason:
        message = f"{message}: {reason}"
    return MetadataTypeError(
        message=message,
        error_code=ErrorCode.INVALID_MEMBER_KEY,
        details=details,
        **kwargs
    )


def invalid_metadata_key_error(key: Any, **kwargs) -> MetadataTypeError:
    """Create an error for an unhashable metadata key."""
    details = kwargs.pop("details", {})
    details["key_type"] = type(key).__name__
    return MetadataTypeError(
        message=f"Metadata key must be hashable, got {_describe(key)}",
        error_code=ErrorCode.INVALID_METADATA_KEY,
        details=details,
        **kwargs
    )


def invalid_decorator_list_error(
    decorators: Any,
    index: Optional[int] = None,
    **kwargs
) -> MetadataTypeError:
    """Create an error for a decorator list that is not a list/tuple of callables.

    Args:
        decorators: The rejected decorator list
        index: Position of the first non-callable entry, when the container
            itself was acceptable
        **kwargs: Additional arguments for MetadataTypeError

    Returns:
        MetadataTypeError with INVALID_DECORATOR_LIST code
    """
    details = kwargs.pop("details", {})
    if index is None:
        message = f"Decorators must be a list or tuple, got {type(decorators).__name__}"
    else:
        details["index"] = index
        message = (
            f"Decorator at position {index} is not callable: "
            f"{_describe(decorators[index])}"
        )
    return MetadataTypeError(
        message=message,
        error_code=ErrorCode.INVALID_DECORATOR_LIST,
        details=details,
        **kwargs
    )


def invalid_descriptor_error(descriptor: Any, **kwargs) -> MetadataTypeError:
    """Create an error for a member descriptor that is not object-like."""
    details = kwargs.pop("details", {})
    details["descriptor_type"] = type(descriptor).__name__
    return MetadataTypeError(
        message=f"Descriptor must be an object or None, got {_describe(descriptor)}",
        error_code=ErrorCode.INVALID_DESCRIPTOR,
        details=details,
        **kwargs
    )


def invalid_decorator_result_error(
    decorator: Any,
    result: Any,
    expected: str,
    **kwargs
) -> MetadataTypeError:
    """Create an error for a decorator that returned an unusable replacement.

    Args:
        decorator: The decorator that produced the value
        result: The rejected replacement
        expected: Description of what a valid replacement is
        **kwargs: Additional arguments for MetadataTypeError

    Returns:
        MetadataTypeError with INVALID_DECORATOR_RESULT code
    """
    details = kwargs.pop("details", {})
    details["decorator"] = getattr(decorator, "__qualname__", repr(decorator))
    details["result_type"] = type(result).__name__
    return MetadataTypeError(
        message=f"Decorator returned {_describe(result)}; expected {expected}",
        error_code=ErrorCode.INVALID_DECORATOR_RESULT,
        details=details,
        **kwargs
    )
