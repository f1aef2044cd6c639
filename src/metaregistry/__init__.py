from metaregistry.__version__ import __version__

from metaregistry.api import (
    declare_parent,
    define_metadata,
    delete_metadata,
    get_metadata,
    get_metadata_keys,
    get_own_metadata,
    get_own_metadata_keys,
    get_parent,
    has_metadata,
    has_own_metadata,
)
from metaregistry.decorators import (
    DESIGN_PARAMTYPES,
    DESIGN_RETURNTYPE,
    DESIGN_TYPE,
    MemberBinding,
    apply_member_decorators,
    decorate,
    decorated,
    decorated_member,
    emit_design_metadata,
    metadata,
)
from metaregistry.store import (
    MetadataRegistry,
    ParentResolver,
    get_default_registry,
    set_default_registry,
    use_registry,
)
from metaregistry.types import Symbol, to_property_key

from metaregistry.common.exceptions import ErrorCode, MetadataError, MetadataTypeError


__all__ = [
    "__version__",

    # Decoration
    "decorate",
    "decorated",
    "decorated_member",
    "apply_member_decorators",
    "metadata",
    "emit_design_metadata",
    "MemberBinding",
    "DESIGN_TYPE",
    "DESIGN_PARAMTYPES",
    "DESIGN_RETURNTYPE",

    # Metadata functions (default registry)
    "define_metadata",
    "has_metadata",
    "has_own_metadata",
    "get_metadata",
    "get_own_metadata",
    "get_metadata_keys",
    "get_own_metadata_keys",
    "delete_metadata",
    "declare_parent",
    "get_parent",

    # Registries
    "MetadataRegistry",
    "ParentResolver",
    "get_default_registry",
    "set_default_registry",
    "use_registry",

    # Keys
    "Symbol",
    "to_property_key",

    # Exceptions (public API)
    "MetadataError",
    "MetadataTypeError",
    "ErrorCode",
]
