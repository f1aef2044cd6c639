"""Decorator application engine and metadata decorator factories."""

from metaregistry.decorators.design import (
    DESIGN_PARAMTYPES,
    DESIGN_RETURNTYPE,
    DESIGN_TYPE,
    emit_design_metadata,
)
from metaregistry.decorators.engine import (
    MemberBinding,
    apply_member_decorators,
    decorate,
    decorated,
    decorated_member,
    dual_decorator,
    metadata,
)

__all__ = [
    "DESIGN_PARAMTYPES",
    "DESIGN_RETURNTYPE",
    "DESIGN_TYPE",
    "MemberBinding",
    "apply_member_decorators",
    "decorate",
    "decorated",
    "decorated_member",
    "dual_decorator",
    "emit_design_metadata",
    "metadata",
]
