"""Metadata storage and parent chain resolution."""

from metaregistry.store.context import get_default_registry, set_default_registry, use_registry
from metaregistry.store.identity import IdentityMap
from metaregistry.store.parents import ParentResolver
from metaregistry.store.registry import MetadataMap, MetadataRegistry, TargetEntry

__all__ = [
    "IdentityMap",
    "MetadataMap",
    "MetadataRegistry",
    "ParentResolver",
    "TargetEntry",
    "get_default_registry",
    "set_default_registry",
    "use_registry",
]
