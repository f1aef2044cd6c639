"""Settings for metaregistry, built on Pydantic Settings.

Configuration Sources (precedence order):
    1. Explicit constructor arguments (e.g. ``MetadataRegistry(weak_references=False)``)
    2. Environment variables prefixed with ``METAREGISTRY_``
    3. A ``.env`` file in the working directory
    4. Default values in code

Quick Start:
    >>> from metaregistry.settings import get_settings
    >>> settings = get_settings()
    >>> settings.thread_safe
    True
"""

from .base import RegistrySettings
from .main import get_settings, reload_settings

__all__ = [
    "RegistrySettings",
    "get_settings",
    "reload_settings",
]
