"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient

from kenpos.application.connectivity import ConnectivityState, reset_connectivity
from kenpos.application.locks import AggregateLocks, reset_aggregate_locks
from kenpos.application.repository import Repositories
from kenpos.config import Settings, get_settings, reset_settings
from kenpos.core.entities import Cart, Customer, ProductType, Shift, Supplier
from kenpos.infrastructure.storage import InMemoryPersistenceStore
from tests.factories import make_item, make_product


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch) -> Generator[None, None, None]:
    """Point storage at a temp dir and drop process-wide singletons."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("SYNC_ENDPOINT_URL", raising=False)
    reset_settings()
    reset_aggregate_locks()
    reset_connectivity()
    yield
    reset_settings()
    reset_aggregate_locks()
    reset_connectivity()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def locks() -> AggregateLocks:
    return AggregateLocks()


@pytest.fixture
def online() -> ConnectivityState:
    return ConnectivityState(online=True)


@pytest.fixture
def offline() -> ConnectivityState:
    return ConnectivityState(online=False)


@pytest.fixture
def store() -> InMemoryPersistenceStore:
    """Store seeded with a product, a service, a customer, a supplier and an open shift."""
    records = {
        "products": [
            make_product().model_dump(mode="json"),
            make_product(
                id="prod_svc",
                name="Delivery",
                sku="SVC-1",
                price=200.0,
                product_type=ProductType.SERVICE,
                cost_price=None,
                stock=9999,
            ).model_dump(mode="json"),
            make_product(
                id="prod_cable",
                name="Copper Cable",
                sku="CB-1",
                price=50.0,
                cost_price=30.0,
                stock=100,
                unit_of_measure="m",
            ).model_dump(mode="json"),
        ],
        "customers": [
            Customer(id="cust001", name="Walk-in Customer").model_dump(mode="json"),
            Customer(
                id="cust_jane", name="Jane Wanjiku", phone="0712345678", loyalty_points=200
            ).model_dump(mode="json"),
        ],
        "suppliers": [
            Supplier(id="sup_1", name="Unga Distributors", credit_terms="Net 45").model_dump(
                mode="json"
            ),
        ],
        "shifts": [
            Shift(id="shift_1", user_id="cashier_1", starting_float=5000).model_dump(mode="json"),
        ],
    }
    return InMemoryPersistenceStore(records)


@pytest.fixture
def repos(store) -> Repositories:
    return Repositories.bind(store)


@pytest.fixture
async def cart_with_flour(repos) -> Cart:
    """Cashier 1 has two bags of flour in the cart."""
    cart = Cart(id="cashier_1", items=[make_item(quantity=2)])
    await repos.carts.save(cart)
    return cart


@pytest.fixture
async def api_client(store) -> AsyncGenerator[AsyncClient, None]:
    """API client backed by the seeded in-memory store."""
    from kenpos.api.dependencies import get_store
    from kenpos.api.main import app

    async def _store_override():
        return store

    app.dependency_overrides[get_store] = _store_override
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_store, None)
