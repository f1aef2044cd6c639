"""Functional API over the default registry.

Each function accepts an optional ``registry`` keyword to target a specific
:class:`~metaregistry.store.registry.MetadataRegistry`; otherwise the default
registry (see :func:`~metaregistry.store.context.use_registry`) is used.
Validation happens in the registry, so every function raises
``MetadataTypeError`` (a ``TypeError``) for a non-object target, a member key
that cannot be normalized or an unhashable metadata key.
"""

from typing import Any, Hashable, List, Optional

from metaregistry.store.context import get_default_registry
from metaregistry.store.registry import MetadataRegistry


def _resolve(registry: Optional[MetadataRegistry]) -> MetadataRegistry:
    return registry if registry is not None else get_default_registry()


def define_metadata(
    metadata_key: Hashable,
    metadata_value: Any,
    target: Any,
    member: Any = None,
    *,
    registry: Optional[MetadataRegistry] = None,
) -> None:
    """Define an own metadata entry on ``target`` or on one of its members.

    Example:
        >>> define_metadata("route", "/users", UserController)
        >>> define_metadata("verb", "GET", UserController, "list_users")
    """
    _resolve(registry).define(metadata_key, metadata_value, target, member)


def has_metadata(
    metadata_key: Hashable,
    target: Any,
    member: Any = None,
    *,
    registry: Optional[MetadataRegistry] = None,
) -> bool:
    """Whether ``target`` or any of its ancestors defines ``metadata_key``."""
    return _resolve(registry).has(metadata_key, target, member)


def has_own_metadata(
    metadata_key: Hashable,
    target: Any,
    member: Any = None,
    *,
    registry: Optional[MetadataRegistry] = None,
) -> bool:
    return _resolve(registry).has_own(metadata_key, target, member)


def get_metadata(
    metadata_key: Hashable,
    target: Any,
    member: Any = None,
    default: Any = None,
    *,
    registry: Optional[MetadataRegistry] = None,
) -> Any:
    """Value of ``metadata_key`` on the nearest target in the parent chain.

    Returns ``default`` when no target in the chain defines the key; use
    :func:`has_metadata` to tell a stored ``None`` from a missing key.
    """
    return _resolve(registry).get(metadata_key, target, member, default)


def get_own_metadata(
    metadata_key: Hashable,
    target: Any,
    member: Any = None,
    default: Any = None,
    *,
    registry: Optional[MetadataRegistry] = None,
) -> Any:
    return _resolve(registry).get_own(metadata_key, target, member, default)


def get_metadata_keys(
    target: Any,
    member: Any = None,
    *,
    registry: Optional[MetadataRegistry] = None,
) -> List[Hashable]:
    """Own and inherited keys, own keys first, each key once."""
    return _resolve(registry).keys(target, member)


def get_own_metadata_keys(
    target: Any,
    member: Any = None,
    *,
    registry: Optional[MetadataRegistry] = None,
) -> List[Hashable]:
    return _resolve(registry).own_keys(target, member)


def delete_metadata(
    metadata_key: Hashable,
    target: Any,
    member: Any = None,
    *,
    registry: Optional[MetadataRegistry] = None,
) -> bool:
    """Delete an own metadata entry; returns whether anything was removed."""
    return _resolve(registry).delete(metadata_key, target, member)


def declare_parent(
    child: Any,
    parent: Optional[Any],
    *,
    registry: Optional[MetadataRegistry] = None,
) -> None:
    """Declare the parent ``child`` inherits metadata from (``None`` removes it)."""
    _resolve(registry).declare_parent(child, parent)


def get_parent(target: Any, *, registry: Optional[MetadataRegistry] = None) -> Optional[Any]:
    return _resolve(registry).get_parent(target)
