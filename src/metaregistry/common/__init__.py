"""Shared error types."""

from metaregistry.common.exceptions import (
    ErrorCode,
    MetadataError,
    MetadataTypeError,
    invalid_decorator_list_error,
    invalid_decorator_result_error,
    invalid_descriptor_error,
    invalid_member_key_error,
    invalid_metadata_key_error,
    invalid_target_error,
)

__all__ = [
    "ErrorCode",
    "MetadataError",
    "MetadataTypeError",
    "invalid_decorator_list_error",
    "invalid_decorator_result_error",
    "invalid_descriptor_error",
    "invalid_member_key_error",
    "invalid_metadata_key_error",
    "invalid_target_error",
]
