"""Key types and value classification helpers."""

from metaregistry.types.keys import (
    PropertyKey,
    Symbol,
    describe_member,
    describe_target,
    ensure_hashable,
    is_constructor,
    is_object,
    is_primitive,
    is_property_key,
    to_property_key,
)

__all__ = [
    "PropertyKey",
    "Symbol",
    "describe_member",
    "describe_target",
    "ensure_hashable",
    "is_constructor",
    "is_object",
    "is_primitive",
    "is_property_key",
    "to_property_key",
]
