import pytest

from metaregistry.store import MetadataRegistry, use_registry


@pytest.fixture
def registry():
    """A fresh registry independent of the default one."""
    return MetadataRegistry(weak_references=True, thread_safe=True)


@pytest.fixture(autouse=True)
def isolated_default_registry():
    """Run every test against its own empty default registry."""
    with use_registry() as default:
        yield default
