"""Default registry used by the functional API and by decorator factories."""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from metaregistry.store.registry import MetadataRegistry

_default_registry: Optional[MetadataRegistry] = None
_default_lock = threading.Lock()


def get_default_registry() -> MetadataRegistry:
    """Return the default registry, creating it from settings on first use."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = MetadataRegistry()
    return _default_registry


def set_default_registry(registry: Optional[MetadataRegistry]) -> Optional[MetadataRegistry]:
    """Replace the default registry.

    Passing ``None`` makes the next :func:`get_default_registry` call create a
    fresh registry.

    Returns:
        The registry that was the default before the call
    """
    global _default_registry
    with _default_lock:
        previous = _default_registry
        _default_registry = registry
    return previous


@contextmanager
def use_registry(registry: Optional[MetadataRegistry] = None) -> Iterator[MetadataRegistry]:
    """Temporarily make ``registry`` (or a new empty one) the default.

    Example:
        >>> with use_registry() as registry:
        ...     define_metadata("k", "v", SomeClass)
        ...     assert registry.has_own("k", SomeClass)
    """
    registry = registry if registry is not None else MetadataRegistry()
    previous = set_default_registry(registry)
    try:
        yield registry
    finally:
        set_default_registry(previous)
