from metaregistry.utils.decorators import traced

__all__ = [
    "traced",
]
