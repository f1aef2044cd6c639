"""Property keys and value classification helpers.

Member keys are normalized to either ``str`` or :class:`Symbol` before they
reach the store. Normalization follows a two-step conversion: the value's
``__str__`` is tried first and its result accepted when it is a primitive;
otherwise ``__index__`` is tried. When neither produces a primitive the key is
rejected.
"""

import inspect
from typing import Any, Hashable, Optional, Union

from metaregistry.common.exceptions import (
    invalid_member_key_error,
    invalid_metadata_key_error,
)


class Symbol:
    """A unique member key compared by identity.

    Two symbols with the same description are still different keys, which
    lets libraries attach member metadata without colliding with attribute
    names or with each other.

    Example:
        >>> INJECT = Symbol("inject")
        >>> INJECT == Symbol("inject")
        False
    """

    __slots__ = ("description", "__weakref__")

    def __init__(self, description: Optional[str] = None) -> None:
        self.description = description

    def __repr__(self) -> str:
        if self.description is None:
            return "Symbol()"
        return f"Symbol({self.description!r})"


PropertyKey = Union[str, Symbol]

_PRIMITIVES = (str, bytes, int, float, complex, bool, Symbol, type(None))


def is_primitive(value: Any) -> bool:
    return isinstance(value, _PRIMITIVES)


def is_object(value: Any) -> bool:
    """Return True for values that can carry metadata.

    ``None``, immutable scalars and symbols are not object-like; everything
    else (classes, functions, modules, instances, containers) is.
    """
    return not isinstance(value, _PRIMITIVES)


def is_constructor(value: Any) -> bool:
    return inspect.isclass(value)


def is_property_key(value: Any) -> bool:
    return isinstance(value, (str, Symbol))


def _to_primitive(value: Any) -> Any:
    if is_primitive(value):
        return value

    errors = []
    for hook in ("__str__", "__index__"):
        method = getattr(type(value), hook, None)
        if not callable(method):
            continue
        try:
            result = method(value)
        except Exception as exc:
            errors.append(exc)
            continue
        if is_primitive(result):
            return result

    cause = errors[-1] if errors else None
    raise invalid_member_key_error(
        value,
        reason="neither __str__ nor __index__ returned a primitive",
        cause=cause,
    )


def to_property_key(value: Any) -> PropertyKey:
    """Normalize a member key to ``str`` or :class:`Symbol`.

    Args:
        value: The raw member key

    Returns:
        The key itself for ``str`` and ``Symbol``; the string form otherwise

    Raises:
        MetadataTypeError: If the value cannot be converted (error_code=INVALID_MEMBER_KEY)
    """
    if value is None:
        raise invalid_member_key_error(value, reason="None denotes the target itself")
    key = _to_primitive(value)
    if isinstance(key, Symbol):
        return key
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="surrogateescape")
    return str(key)


def ensure_hashable(key: Any) -> Hashable:
    try:
        hash(key)
    except TypeError as exc:
        raise invalid_metadata_key_error(key, cause=exc) from exc
    return key


def describe_target(target: Any) -> str:
    """Short human readable name for a target, used in logs and spans."""
    if inspect.isclass(target) or inspect.isfunction(target) or inspect.ismodule(target):
        return getattr(target, "__qualname__", None) or target.__name__
    return f"<{type(target).__qualname__} instance>"


def describe_member(member: Optional[PropertyKey]) -> Optional[str]:
    if member is None:
        return None
    return member if isinstance(member, str) else repr(member)
