import pytest
from fastapi.testclient import TestClient

from storefront.core.config import Settings
from storefront.core.store import CartStore
from storefront.database.storage import CartPersistence, MemoryStorage
from storefront.main import create_app
from storefront.services.cart_service import CartService


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def persistence(storage):
    return CartPersistence(storage, "test-cart")


@pytest.fixture
def store(persistence):
    """Initialized store backed by in-memory storage"""
    s = CartStore(persistence)
    s.initialize()
    return s


@pytest.fixture
def service(store):
    return CartService(store)


@pytest.fixture
def settings():
    return Settings(cart_storage_backend="memory", sync_base_url=None, tax_rate=0.08)


@pytest.fixture
def client(settings):
    """Test client with a fresh application context per test"""
    with TestClient(create_app(settings)) as c:
        yield c
