"""Identity-keyed mapping that does not keep weak-referenceable keys alive.

``weakref.WeakKeyDictionary`` compares keys with ``__eq__``/``__hash__`` and
rejects unhashable objects, so it cannot key metadata by object identity.
This map keys entries by ``id()`` and pins the key object next to the value:
through a ``weakref.ref`` when the object supports it (the entry disappears
when the object is collected), or through a strong reference otherwise (the
entry lives until it is popped or the map is cleared).
"""

import weakref
from typing import Any, Callable, Dict, Generic, Iterator, Optional, Tuple, TypeVar

V = TypeVar("V")


class _StrongRef:
    """Strong stand-in exposing the ``weakref.ref`` call protocol."""

    __slots__ = ("obj",)

    def __init__(self, obj: Any) -> None:
        self.obj = obj

    def __call__(self) -> Any:
        return self.obj


class IdentityMap(Generic[V]):
    """Mapping from object identity to a value.

    Args:
        weak: Hold keys through weak references where the key type allows it
    """

    def __init__(self, weak: bool = True) -> None:
        self.weak = weak
        self._data: Dict[int, Tuple[Callable[[], Any], V]] = {}

    def _make_ref(self, obj: Any) -> Callable[[], Any]:
        if not self.weak:
            return _StrongRef(obj)
        key_id = id(obj)

        def _on_collect(ref: "weakref.ref") -> None:
            entry = self._data.get(key_id)
            if entry is not None and entry[0] is ref:
                self._data.pop(key_id, None)

        try:
            return weakref.ref(obj, _on_collect)
        except TypeError:
            return _StrongRef(obj)

    def _lookup(self, obj: Any) -> Optional[Tuple[Callable[[], Any], V]]:
        entry = self._data.get(id(obj))
        if entry is None:
            return None
        if entry[0]() is not obj:
            # stale id of a collected key; the next write replaces it
            return None
        return entry

    def get(self, obj: Any, default: Optional[V] = None) -> Optional[V]:
        entry = self._lookup(obj)
        return default if entry is None else entry[1]

    def setdefault(self, obj: Any, factory: Callable[[], V]) -> V:
        entry = self._lookup(obj)
        if entry is not None:
            return entry[1]
        value = factory()
        self._data[id(obj)] = (self._make_ref(obj), value)
        return value

    def set(self, obj: Any, value: V) -> None:
        self._data[id(obj)] = (self._make_ref(obj), value)

    def pop(self, obj: Any, default: Optional[V] = None) -> Optional[V]:
        entry = self._lookup(obj)
        if entry is None:
            return default
        del self._data[id(obj)]
        return entry[1]

    def is_weak(self, obj: Any) -> bool:
        """Whether ``obj`` is currently held through a weak reference."""
        entry = self._lookup(obj)
        return entry is not None and isinstance(entry[0], weakref.ref)

    def keys(self) -> Iterator[Any]:
        for ref, _ in list(self._data.values()):
            obj = ref()
            if obj is not None:
                yield obj

    def clear(self) -> None:
        self._data.clear()

    def __contains__(self, obj: Any) -> bool:
        return self._lookup(obj) is not None

    def __len__(self) -> int:
        return len(self._data)
