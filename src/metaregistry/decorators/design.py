"""Design-type metadata recorded from annotations.

``emit_design_metadata`` records the annotated types of a class constructor or
of a member under well-known keys, so that dependency injection containers,
serializers and validators can discover them through the registry instead of
parsing annotations themselves:

* ``DESIGN_PARAMTYPES``: tuple of parameter types (``__init__`` for classes,
  the method itself for members and free functions), ``self``/``cls`` excluded
* ``DESIGN_RETURNTYPE``: return type of a method or free function
* ``DESIGN_TYPE``: type of a member (annotation, property return type, or the
  kind of callable for methods)

Unannotated parameters and returns are recorded as ``typing.Any``.
"""

import inspect
import typing
from typing import Any, Callable, Dict, Optional, Tuple

from metaregistry.decorators.engine import dual_decorator
from metaregistry.logging import get_logger
from metaregistry.store.context import get_default_registry
from metaregistry.store.registry import MetadataRegistry
from metaregistry.types.keys import PropertyKey

logger = get_logger(__name__)

DESIGN_TYPE = "design:type"
DESIGN_PARAMTYPES = "design:paramtypes"
DESIGN_RETURNTYPE = "design:returntype"


def _type_hints(obj: Any) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError) as exc:
        # Unresolvable forward references; fall back to the raw annotations
        logger.debug("Could not resolve type hints", extra={"reason": str(exc)})
        return dict(getattr(obj, "__annotations__", None) or {})


def _unwrap_callable(descriptor: Any) -> Optional[Callable[..., Any]]:
    if isinstance(descriptor, (classmethod, staticmethod)):
        return descriptor.__func__
    if inspect.isfunction(descriptor) or inspect.ismethod(descriptor):
        return descriptor
    return None


def _param_types(func: Callable[..., Any], skip_first: bool) -> Tuple[Any, ...]:
    hints = _type_hints(func)
    try:
        parameters = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        return ()
    if skip_first and parameters:
        parameters = parameters[1:]
    return tuple(
        hints.get(p.name, Any)
        for p in parameters
        if p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    )


def class_design_metadata(cls: type) -> Dict[str, Any]:
    """Design metadata for a class: the parameter types of its constructor."""
    init = vars(cls).get("__init__")
    if init is None or not inspect.isfunction(init):
        # inherited or C-level constructor; take the resolved one if it is Python code
        init = getattr(cls, "__init__", None)
    if not inspect.isfunction(init):
        return {DESIGN_PARAMTYPES: ()}
    return {DESIGN_PARAMTYPES: _param_types(init, skip_first=True)}


def function_design_metadata(func: Callable[..., Any]) -> Dict[str, Any]:
    """Design metadata for a free function: its parameter and return types."""
    return {
        DESIGN_PARAMTYPES: _param_types(func, skip_first=False),
        DESIGN_RETURNTYPE: _type_hints(func).get("return", Any),
    }


def member_design_metadata(owner: Any, member: PropertyKey, descriptor: Any) -> Dict[str, Any]:
    """Design metadata for ``owner.member`` given its current descriptor."""
    if descriptor is None and inspect.isclass(owner) and isinstance(member, str):
        descriptor = vars(owner).get(member)

    if isinstance(descriptor, property):
        getter_hints = _type_hints(descriptor.fget) if descriptor.fget else {}
        return {DESIGN_TYPE: getter_hints.get("return", Any)}

    func = _unwrap_callable(descriptor)
    if func is not None:
        skip_first = not isinstance(descriptor, staticmethod)
        return {
            DESIGN_TYPE: type(descriptor),
            DESIGN_PARAMTYPES: _param_types(func, skip_first=skip_first),
            DESIGN_RETURNTYPE: _type_hints(func).get("return", Any),
        }

    annotations = _type_hints(owner) if inspect.isclass(owner) else {}
    if isinstance(member, str) and member in annotations:
        return {DESIGN_TYPE: annotations[member]}
    if descriptor is not None:
        return {DESIGN_TYPE: type(descriptor)}
    return {DESIGN_TYPE: Any}


def emit_design_metadata(
    target: Any = None,
    member: Any = None,
    descriptor: Any = None,
    *,
    registry: Optional[MetadataRegistry] = None,
) -> Any:
    """Record design-type metadata for a class or a member.

    Usable bare (``@emit_design_metadata``), called with a registry
    (``@emit_design_metadata(registry=r)``) or inside :func:`decorate`.

    Example:
        >>> @emit_design_metadata
        ... class Service:
        ...     def __init__(self, repo: Repository, retries: int): ...
        >>> get_metadata(DESIGN_PARAMTYPES, Service)
        (<class 'Repository'>, <class 'int'>)
    """

    def _registry() -> MetadataRegistry:
        return registry if registry is not None else get_default_registry()

    def on_target(obj: Any) -> None:
        if inspect.isclass(obj):
            design = class_design_metadata(obj)
        elif inspect.isfunction(obj):
            design = function_design_metadata(obj)
        else:
            return
        for key, value in design.items():
            _registry().define(key, value, obj)

    def on_member(owner: Any, key: PropertyKey, current: Any) -> None:
        for design_key, value in member_design_metadata(owner, key, current).items():
            _registry().define(design_key, value, owner, key)

    decorator = dual_decorator(on_target, on_member)
    if target is None:
        return decorator
    return decorator(target, member, descriptor)
