from functools import lru_cache

from .base import RegistrySettings


@lru_cache(maxsize=1)
def get_settings() -> RegistrySettings:
    """Return the cached settings instance.

    Settings are read once from the environment (``METAREGISTRY_*``) and an
    optional ``.env`` file. Use :func:`reload_settings` after changing the
    environment.

    Example:
        >>> settings = get_settings()
        >>> settings.weak_references
        True
    """
    return RegistrySettings()


def reload_settings() -> RegistrySettings:
    """Drop the cached settings and read them again."""
    get_settings.cache_clear()
    return get_settings()
