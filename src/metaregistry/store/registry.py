"""Metadata registry.

The registry maps each target to its member entries and each member entry to
an insertion-ordered metadata map::

    target -> {member key | None -> {metadata key -> metadata value}}

``None`` stands for the target itself. Containers are created lazily on the
first write and removed as soon as they become empty, so a registry never
holds an empty member entry or an empty target entry.

Reads have two flavors. The ``*_own`` operations look only at the given
target; the others walk the parent chain produced by
:class:`~metaregistry.store.parents.ParentResolver` until a match is found or
the chain ends.
"""

import threading
from contextlib import nullcontext
from typing import Any, Dict, Hashable, List, Optional

from metaregistry.common.exceptions import invalid_target_error
from metaregistry.logging import get_logger
from metaregistry.settings import get_settings
from metaregistry.store.identity import IdentityMap
from metaregistry.store.parents import ParentResolver
from metaregistry.types.keys import (
    PropertyKey,
    describe_member,
    describe_target,
    ensure_hashable,
    is_object,
    to_property_key,
)

logger = get_logger(__name__)

MetadataMap = Dict[Hashable, Any]
TargetEntry = Dict[Optional[PropertyKey], MetadataMap]


class MetadataRegistry:
    """Identity-keyed store of metadata attached to objects and their members.

    Registries are ordinary objects: create one per application, per tenant
    or per test as needed. The functional API in :mod:`metaregistry.api`
    works against a default instance.

    Args:
        weak_references: Hold targets weakly where possible. Defaults to
            ``RegistrySettings.weak_references``.
        thread_safe: Guard mutation with a re-entrant lock. Defaults to
            ``RegistrySettings.thread_safe``.
        resolver: Parent resolver used for chain walking. A new resolver
            configured from settings is created when omitted.

    Example:
        >>> registry = MetadataRegistry()
        >>> class Base: pass
        >>> class Child(Base): pass
        >>> registry.define("role", "admin", Base)
        >>> registry.get("role", Child)
        'admin'
        >>> registry.has_own("role", Child)
        False
    """

    def __init__(
        self,
        weak_references: Optional[bool] = None,
        thread_safe: Optional[bool] = None,
        resolver: Optional[ParentResolver] = None,
    ) -> None:
        settings = get_settings()
        if weak_references is None:
            weak_references = settings.weak_references
        if thread_safe is None:
            thread_safe = settings.thread_safe

        self.weak_references = weak_references
        self.resolver = resolver or ParentResolver(
            infer_wrapped_parent=settings.infer_wrapped_parent,
            weak_references=weak_references,
        )
        self._targets: IdentityMap[TargetEntry] = IdentityMap(weak=weak_references)
        self._lock = threading.RLock() if thread_safe else nullcontext()

    # -- validation -------------------------------------------------------

    @staticmethod
    def _normalize(target: Any, member: Any) -> Optional[PropertyKey]:
        if not is_object(target):
            raise invalid_target_error(target)
        if member is None:
            return None
        return to_property_key(member)

    # -- container access -------------------------------------------------

    def _metadata_map(
        self,
        target: Any,
        member: Optional[PropertyKey],
        create: bool = False,
    ) -> Optional[MetadataMap]:
        if create:
            entry = self._targets.setdefault(target, dict)
            return entry.setdefault(member, {})
        entry = self._targets.get(target)
        if entry is None:
            return None
        return entry.get(member)

    # -- writes -------------------------------------------------------------

    def define(self, key: Hashable, value: Any, target: Any, member: Any = None) -> None:
        """Define ``key`` -> ``value`` on ``target`` (or one of its members).

        An existing value for the key is overwritten; the key keeps its
        original position in key order.

        Raises:
            MetadataTypeError: If the target is not object-like, the member key
                cannot be normalized or the metadata key is unhashable
        """
        member = self._normalize(target, member)
        ensure_hashable(key)
        with self._lock:
            self._metadata_map(target, member, create=True)[key] = value
        logger.debug(
            "Defined metadata",
            extra={
                "metadata_key": repr(key),
                "target": describe_target(target),
                "member": describe_member(member),
            },
        )

    def delete(self, key: Hashable, target: Any, member: Any = None) -> bool:
        """Delete an own metadata entry.

        Inherited entries are never touched. Member entries and target entries
        left empty by the deletion are removed.

        Returns:
            True if an entry was removed, False if there was nothing to delete
        """
        member = self._normalize(target, member)
        ensure_hashable(key)
        with self._lock:
            entry = self._targets.get(target)
            if entry is None:
                return False
            metadata_map = entry.get(member)
            if metadata_map is None or key not in metadata_map:
                return False
            del metadata_map[key]
            if not metadata_map:
                del entry[member]
            if not entry:
                self._targets.pop(target)
        logger.debug(
            "Deleted metadata",
            extra={
                "metadata_key": repr(key),
                "target": describe_target(target),
                "member": describe_member(member),
            },
        )
        return True

    def forget(self, target: Any) -> bool:
        """Drop all metadata of ``target`` and any parent declared for it.

        This is the explicit end of life for targets that cannot be weakly
        referenced.

        Returns:
            True if the target had any metadata
        """
        if not is_object(target):
            raise invalid_target_error(target)
        with self._lock:
            self.resolver.declare_parent(target, None)
            return self._targets.pop(target) is not None

    def clear(self) -> None:
        """Drop every entry and every declared parent."""
        with self._lock:
            self._targets.clear()
            self.resolver.clear()

    # -- own reads ----------------------------------------------------------

    def has_own(self, key: Hashable, target: Any, member: Any = None) -> bool:
        member = self._normalize(target, member)
        ensure_hashable(key)
        metadata_map = self._metadata_map(target, member)
        return metadata_map is not None and key in metadata_map

    def get_own(self, key: Hashable, target: Any, member: Any = None, default: Any = None) -> Any:
        member = self._normalize(target, member)
        ensure_hashable(key)
        metadata_map = self._metadata_map(target, member)
        if metadata_map is None:
            return default
        return metadata_map.get(key, default)

    def own_keys(self, target: Any, member: Any = None) -> List[Hashable]:
        """Keys defined directly on ``target``/``member`` in first-definition order."""
        member = self._normalize(target, member)
        metadata_map = self._metadata_map(target, member)
        return list(metadata_map) if metadata_map else []

    def members(self, target: Any) -> List[Optional[PropertyKey]]:
        """Member keys of ``target`` carrying own metadata; ``None`` is the target itself."""
        if not is_object(target):
            raise invalid_target_error(target)
        entry = self._targets.get(target)
        return list(entry) if entry else []

    # -- chain reads --------------------------------------------------------

    def has(self, key: Hashable, target: Any, member: Any = None) -> bool:
        member = self._normalize(target, member)
        ensure_hashable(key)
        for node in self.resolver.iter_chain(target):
            metadata_map = self._metadata_map(node, member)
            if metadata_map is not None and key in metadata_map:
                return True
        return False

    def get(self, key: Hashable, target: Any, member: Any = None, default: Any = None) -> Any:
        """Return the nearest value for ``key`` along the parent chain.

        Args:
            key: Metadata key
            target: Object the lookup starts from
            member: Optional member key; the same member is looked up on every
                ancestor
            default: Returned when no target in the chain defines the key

        Returns:
            The value found on the nearest target defining ``key``, else ``default``
        """
        member = self._normalize(target, member)
        ensure_hashable(key)
        for node in self.resolver.iter_chain(target):
            metadata_map = self._metadata_map(node, member)
            if metadata_map is not None and key in metadata_map:
                return metadata_map[key]
        return default

    def keys(self, target: Any, member: Any = None) -> List[Hashable]:
        """Own keys followed by inherited keys not already seen.

        Each key appears once, at the position of its nearest definition.
        """
        member = self._normalize(target, member)
        seen: Dict[Hashable, None] = {}
        with self._lock:
            for node in self.resolver.iter_chain(target):
                metadata_map = self._metadata_map(node, member)
                if metadata_map:
                    for key in metadata_map:
                        seen.setdefault(key, None)
        return list(seen)

    # -- parents ------------------------------------------------------------

    def declare_parent(self, child: Any, parent: Optional[Any]) -> None:
        with self._lock:
            self.resolver.declare_parent(child, parent)

    def get_parent(self, target: Any) -> Optional[Any]:
        if not is_object(target):
            raise invalid_target_error(target)
        return self.resolver.get_parent(target)

    # -- introspection -----------------------------------------------------

    def is_weakly_held(self, target: Any) -> bool:
        return self._targets.is_weak(target)

    def __contains__(self, target: Any) -> bool:
        return is_object(target) and target in self._targets

    def __len__(self) -> int:
        return len(self._targets)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(targets={len(self)}, weak_references={self.weak_references})"
