"""Parent resolution for metadata chain walking.

Reads on a target fall back to its logical parent when the target has no own
entry for a key. The parent of a target is, in order of precedence:

1. A parent declared explicitly with :meth:`ParentResolver.declare_parent`.
2. For instances and other non-class objects, their class.
3. For classes with real bases, the next class in the MRO. Walking a class
   chain yields the remainder of its MRO, so multiple inheritance follows the
   C3 linearization rather than the first base only. An MRO entry with a
   declared parent or a ``__wrapped__`` link hands the walk over to that
   parent, so the chain of a subclass always extends the chain of its base.
4. For a class whose only base is ``object``, a class-valued ``__wrapped__``
   attribute, when inference is enabled. Class decorators that replace a class
   with an unrelated wrapper commonly leave ``__wrapped__`` behind; following
   it recovers the original class. The link is a guess and can join classes
   that are not related by inheritance, so it can be switched off with the
   ``infer_wrapped_parent`` setting.
5. ``object`` for any other class; ``object`` itself has no parent.

Chains are assumed to be acyclic. Walking a cycle built from explicit
declarations does not terminate.
"""

import inspect
from typing import Any, Iterator, Optional

from metaregistry.common.exceptions import ErrorCode, MetadataTypeError, invalid_target_error
from metaregistry.logging import get_logger
from metaregistry.store.identity import IdentityMap
from metaregistry.types.keys import describe_target, is_object

logger = get_logger(__name__)

_MISSING = object()


class ParentResolver:
    """Resolves the logical parent of a target.

    Args:
        infer_wrapped_parent: Follow ``__wrapped__`` on classes without bases
        weak_references: Hold declared children weakly where possible
    """

    def __init__(self, infer_wrapped_parent: bool = True, weak_references: bool = True) -> None:
        self.infer_wrapped_parent = infer_wrapped_parent
        self._declared: IdentityMap[Any] = IdentityMap(weak=weak_references)

    def declare_parent(self, child: Any, parent: Optional[Any]) -> None:
        """Declare ``parent`` as the parent of ``child`` for chain walking.

        Passing ``None`` removes a previous declaration.

        Raises:
            MetadataTypeError: If either side is not object-like, or if the
                declaration links a target to itself
        """
        if not is_object(child):
            raise invalid_target_error(child)
        if parent is None:
            self._declared.pop(child)
            return
        if not is_object(parent):
            raise invalid_target_error(parent, expected="an object or None")
        if parent is child:
            raise MetadataTypeError(
                message=f"{describe_target(child)} cannot be declared as its own parent",
                error_code=ErrorCode.INVALID_PARENT,
            )
        self._declared.set(child, parent)
        logger.debug(
            "Declared metadata parent",
            extra={"child": describe_target(child), "parent": describe_target(parent)},
        )

    def declared_parent(self, child: Any) -> Optional[Any]:
        return self._declared.get(child)

    def get_parent(self, target: Any) -> Optional[Any]:
        declared = self._declared.get(target, _MISSING)
        if declared is not _MISSING:
            return declared

        if not inspect.isclass(target):
            return type(target)

        mro = target.__mro__
        if len(mro) > 2:
            return mro[1]
        if target is object:
            return None

        wrapped = self._wrapped_parent(target)
        if wrapped is not None:
            return wrapped

        return mro[-1]

    def _wrapped_parent(self, cls: type) -> Optional[type]:
        if not self.infer_wrapped_parent or len(cls.__mro__) != 2:
            return None
        wrapped = vars(cls).get("__wrapped__")
        if inspect.isclass(wrapped) and wrapped is not cls:
            return wrapped
        return None

    def _redirect(self, cls: type) -> Any:
        """Parent of ``cls`` that overrides its MRO successor, or ``_MISSING``."""
        declared = self._declared.get(cls, _MISSING)
        if declared is not _MISSING:
            return declared
        wrapped = self._wrapped_parent(cls)
        return _MISSING if wrapped is None else wrapped

    def iter_chain(self, target: Any) -> Iterator[Any]:
        """Yield ``target`` followed by each of its ancestors, nearest first.

        A class chain follows the class MRO until it reaches an entry with a
        declared parent or a ``__wrapped__`` link; the walk then continues
        from that parent and the rest of the MRO is not visited.
        """
        current = target
        while current is not None:
            if not inspect.isclass(current):
                yield current
                current = self.get_parent(current)
                continue

            for cls in current.__mro__:
                yield cls
                parent = self._redirect(cls)
                if parent is not _MISSING:
                    break
            else:
                return
            current = parent

    def clear(self) -> None:
        self._declared.clear()
