"""Decorator application and the ``metadata`` decorator factory.

:func:`decorate` applies a list of decorators to either a class or a member
of a target, last decorator first, the same order Python applies stacked
``@`` decorators. Every decorator may return a replacement (a class for class
decoration, an object for member decoration) that the remaining decorators
receive instead of the original; returning ``None`` keeps the current value.

Member decorators take ``(target, member, descriptor)``. Python's own ``@``
syntax cannot pass the owner class to a function decorator, so decorators
built here, when applied by syntax to a function defined in a class body, a
property, a classmethod or a staticmethod, return a :class:`MemberBinding`
that waits for the owning class to be created and then runs the decorators
with ``(owner, name, attribute)``. Functions defined anywhere else are plain
targets.
"""

import functools
import inspect
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar, Union

from metaregistry.common.exceptions import (
    invalid_decorator_list_error,
    invalid_decorator_result_error,
    invalid_descriptor_error,
    invalid_target_error,
)
from metaregistry.logging import decoration_context, get_logger
from metaregistry.store.context import get_default_registry
from metaregistry.store.registry import MetadataRegistry
from metaregistry.types.keys import (
    PropertyKey,
    describe_member,
    describe_target,
    ensure_hashable,
    is_constructor,
    is_object,
    to_property_key,
)
from metaregistry.utils.decorators import traced

logger = get_logger(__name__)

T = TypeVar("T", bound=type)

ClassDecorator = Callable[[type], Optional[type]]
MemberDecorator = Callable[[Any, PropertyKey, Any], Any]

_MEMBER_ATTRIBUTE_TYPES = (property, classmethod, staticmethod)


def _validate_decorators(decorators: Any) -> List[Callable[..., Any]]:
    if not isinstance(decorators, (list, tuple)):
        raise invalid_decorator_list_error(decorators)
    for index, decorator in enumerate(decorators):
        if not callable(decorator):
            raise invalid_decorator_list_error(decorators, index=index)
    return list(decorators)


def _decorate_class(decorators: List[ClassDecorator], target: type) -> type:
    def step(current: type, decorator: ClassDecorator) -> type:
        decorated = decorator(current)
        if decorated is None:
            return current
        if not is_constructor(decorated):
            raise invalid_decorator_result_error(decorator, decorated, expected="a class or None")
        return decorated

    return functools.reduce(step, reversed(decorators), target)


def _decorate_member(
    decorators: List[MemberDecorator],
    target: Any,
    member: PropertyKey,
    descriptor: Any,
) -> Any:
    def step(current: Any, decorator: MemberDecorator) -> Any:
        decorated = decorator(target, member, current)
        if decorated is None:
            return current
        if not is_object(decorated):
            raise invalid_decorator_result_error(decorator, decorated, expected="an object or None")
        return decorated

    return functools.reduce(step, reversed(decorators), descriptor)


def _decorate_attributes(
    decorators: Any,
    target: Any,
    member: Any = None,
    descriptor: Any = None,
) -> Dict[str, Any]:
    return {
        "metaregistry.target": describe_target(target),
        "metaregistry.member": describe_member(member) if isinstance(member, str) else None,
        "metaregistry.decorator_count": len(decorators) if isinstance(decorators, (list, tuple)) else None,
    }


@traced("metaregistry.decorate", attribute_getter=_decorate_attributes)
def decorate(
    decorators: Sequence[Callable[..., Any]],
    target: Any,
    member: Any = None,
    descriptor: Any = None,
) -> Any:
    """Apply decorators to a class, or to a member of a target.

    Decorators run in reverse list order, so ``decorate([d1, d2], C)`` is
    equivalent to stacking ``@d1`` above ``@d2`` on ``C``.

    Args:
        decorators: List or tuple of decorators
        target: The class to decorate, or the owner of the decorated member
        member: Member key; when given, the member variant is used
        descriptor: Current member attribute (member variant only)

    Returns:
        Class variant: the final class (the original when no decorator
        replaced it). Member variant: the final descriptor, which may be
        ``descriptor`` itself or ``None``.

    Raises:
        MetadataTypeError: If the decorator list, target, member key or
            descriptor is invalid (before any decorator runs), or if a
            decorator returns an unusable replacement

    Example:
        >>> def register(cls):
        ...     REGISTRY.append(cls)
        >>> decorate([register, metadata("role", "admin")], Service)
        <class 'Service'>
    """
    decorators = _validate_decorators(decorators)

    if member is not None:
        if not is_object(target):
            raise invalid_target_error(target)
        if descriptor is not None and not is_object(descriptor):
            raise invalid_descriptor_error(descriptor)
        member = to_property_key(member)
        with decoration_context(describe_target(target), describe_member(member)):
            logger.debug("Decorating member", extra={"decorator_count": len(decorators)})
            return _decorate_member(decorators, target, member, descriptor)

    if not is_constructor(target):
        raise invalid_target_error(target, expected="a class")
    with decoration_context(describe_target(target)):
        logger.debug("Decorating class", extra={"decorator_count": len(decorators)})
        return _decorate_class(decorators, target)


def apply_member_decorators(
    decorators: Sequence[MemberDecorator],
    owner: type,
    name: str,
) -> Any:
    """Run member decorators on ``owner.name`` and install the result.

    The current attribute is read from the class namespace (not through
    inheritance). When the decorators produce a different object it replaces
    the attribute on ``owner``.

    Returns:
        The final attribute
    """
    descriptor = vars(owner).get(name) if is_constructor(owner) else None
    result = decorate(decorators, owner, name, descriptor)
    if result is not None and result is not descriptor:
        setattr(owner, name, result)
    return result


class MemberBinding:
    """Class-body placeholder that runs member decorators once its owner exists.

    The binding stands in for ``attribute`` in the class namespace. When the
    class is created Python calls :meth:`__set_name__`, which puts
    ``attribute`` back and runs the decorators with ``(owner, name,
    attribute)``. Outside a class body the binding simply forwards calls to
    the wrapped attribute.
    """

    def __init__(self, attribute: Any, decorators: Sequence[MemberDecorator]) -> None:
        self.attribute = attribute
        self.decorators: List[MemberDecorator] = list(decorators)
        functools.update_wrapper(self, attribute, updated=())

    def prepend(self, decorator: MemberDecorator) -> "MemberBinding":
        self.decorators.insert(0, decorator)
        return self

    def __set_name__(self, owner: type, name: str) -> None:
        setattr(owner, name, self.attribute)
        set_name = getattr(type(self.attribute), "__set_name__", None)
        if set_name is not None:
            set_name(self.attribute, owner, name)
        apply_member_decorators(self.decorators, owner, name)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.attribute(*args, **kwargs)

    def __repr__(self) -> str:
        return f"<MemberBinding {self.attribute!r} decorators={len(self.decorators)}>"


def _defined_in_class_body(func: Any) -> bool:
    # "Owner.name" or "outer.<locals>.Owner.name"; module-level and nested
    # functions end in "name" or "<locals>.name"
    parts = getattr(func, "__qualname__", "").split(".")
    return len(parts) > 1 and parts[-2] != "<locals>"


def _is_member_attribute(value: Any) -> bool:
    if isinstance(value, (MemberBinding,) + _MEMBER_ATTRIBUTE_TYPES):
        return True
    return inspect.isfunction(value) and _defined_in_class_body(value)


def bind_member(attribute: Any, decorator: MemberDecorator) -> MemberBinding:
    if isinstance(attribute, MemberBinding):
        return attribute.prepend(decorator)
    return MemberBinding(attribute, [decorator])


def dual_decorator(
    on_target: Callable[[Any], None],
    on_member: Callable[[Any, PropertyKey, Any], None],
) -> Callable[..., Any]:
    """Build a decorator usable on classes, on objects and on members.

    Call shapes of the returned decorator:

    * ``decorator(cls)``: runs ``on_target(cls)`` and returns ``cls``.
    * ``decorator(function_or_property)`` inside a class body: returns a
      :class:`MemberBinding` that runs ``on_member(owner, name, attribute)``.
    * ``decorator(obj)`` for any other object, including functions defined
      outside a class body: runs ``on_target(obj)`` and returns ``obj``.
    * ``decorator(target, member, descriptor=None)``: runs
      ``on_member(target, member, descriptor)`` and returns ``None``.
    """

    def decorator(target: Any, member: Any = None, descriptor: Any = None) -> Any:
        if member is not None:
            if not is_object(target):
                raise invalid_target_error(target)
            on_member(target, to_property_key(member), descriptor)
            return None

        if is_constructor(target):
            on_target(target)
            return target
        if _is_member_attribute(target):
            return bind_member(target, decorator)
        if not is_object(target):
            raise invalid_target_error(target)
        on_target(target)
        return target

    return decorator


def metadata(
    key: Any,
    value: Any,
    registry: Optional[MetadataRegistry] = None,
) -> Callable[..., Any]:
    """Decorator factory that defines one metadata entry on what it decorates.

    Args:
        key: Metadata key (must be hashable)
        value: Metadata value
        registry: Registry to write to. Defaults to the default registry at
            the time the decorator runs.

    Returns:
        A decorator usable on classes, on members (by syntax inside a class
        body, or through :func:`decorate`) and on arbitrary objects

    Example:
        Class and member metadata:
        >>> @metadata("table", "users")
        ... class User:
        ...     @metadata("column", "user_name")
        ...     def name(self): ...
        >>> get_metadata("table", User)
        'users'
        >>> get_metadata("column", User, "name")
        'user_name'
    """
    ensure_hashable(key)

    def _registry() -> MetadataRegistry:
        return registry if registry is not None else get_default_registry()

    def on_target(target: Any) -> None:
        _registry().define(key, value, target)

    def on_member(target: Any, member: PropertyKey, descriptor: Any) -> None:
        _registry().define(key, value, target, member)

    return dual_decorator(on_target, on_member)


def decorated(*decorators: ClassDecorator) -> Callable[[T], T]:
    """Class decorator applying ``decorators`` through :func:`decorate`.

    Example:
        >>> @decorated(metadata("a", 1), metadata("b", 2))
        ... class Service: ...
    """

    def decorator(cls: T) -> T:
        return decorate(list(decorators), cls)

    return decorator


def decorated_member(*decorators: MemberDecorator) -> Callable[[Any], Union[MemberBinding, Any]]:
    """Apply member decorators ``(target, member, descriptor)`` from a class body.

    Example:
        >>> def readonly(target, member, descriptor):
        ...     return property(descriptor)
        >>> class Account:
        ...     @decorated_member(readonly)
        ...     def balance(self):
        ...         return 0
    """

    def decorator(attribute: Any) -> MemberBinding:
        binding = attribute
        for member_decorator in reversed(decorators):
            binding = bind_member(binding, member_decorator)
        return binding

    return decorator
