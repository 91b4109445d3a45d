import pytest

from atlas.analysis.backends import BackendRotation
from fakes import TEST_BACKENDS, FakeInvoker, InMemoryDocumentStore


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def invoker() -> FakeInvoker:
    return FakeInvoker()


@pytest.fixture
def rotation() -> BackendRotation:
    return BackendRotation(TEST_BACKENDS)
