"""Tests for RegistryUseCase."""

import pytest

from kenpos.application.dto.requests import (
    RegisterCustomerRequest,
    RegisterProductRequest,
    RegisterSupplierRequest,
)
from kenpos.application.use_cases import RegistryUseCase
from kenpos.core.entities import ProductType
from kenpos.core.exceptions import (
    DuplicateCustomerError,
    DuplicateSupplierError,
    ProtectedRecordError,
    RecordNotFoundError,
)
from kenpos.infrastructure.storage import InMemoryPersistenceStore


@pytest.fixture
def use_case(store):
    return RegistryUseCase(store=store)


class TestCustomers:
    async def test_register(self, use_case, repos):
        customer = await use_case.register_customer(
            RegisterCustomerRequest(user_id="admin", name="  Otieno ", phone="0722000000")
        )
        assert customer.name == "Otieno"
        assert customer.loyalty_points == 0
        assert await repos.customers.get(customer.id) is not None

    async def test_duplicate_phone(self, use_case):
        with pytest.raises(DuplicateCustomerError):
            await use_case.register_customer(
                RegisterCustomerRequest(user_id="admin", name="Other", phone="0712345678")
            )

    async def test_placeholder_phone_may_repeat(self, use_case):
        for name in ("A", "B"):
            await use_case.register_customer(RegisterCustomerRequest(user_id="admin", name=name))

    async def test_walk_in_is_protected(self, use_case):
        with pytest.raises(ProtectedRecordError):
            await use_case.delete_customer("cust001", "admin")

    async def test_delete(self, use_case, repos):
        await use_case.delete_customer("cust_jane", "admin")
        assert await repos.customers.get("cust_jane") is None
        with pytest.raises(RecordNotFoundError):
            await use_case.delete_customer("cust_jane", "admin")

    async def test_ensure_walk_in(self):
        store = InMemoryPersistenceStore()
        use_case = RegistryUseCase(store=store)
        first = await use_case.ensure_walk_in_customer()
        second = await use_case.ensure_walk_in_customer()
        assert first.id == second.id == "cust001"


class TestSuppliers:
    async def test_duplicate_name_ignores_case(self, use_case):
        with pytest.raises(DuplicateSupplierError):
            await use_case.register_supplier(
                RegisterSupplierRequest(user_id="admin", name="unga distributors ")
            )

    async def test_register(self, use_case):
        supplier = await use_case.register_supplier(
            RegisterSupplierRequest(user_id="admin", name="Bidco", credit_terms="Net 60")
        )
        assert supplier.credit_days == 60


class TestProducts:
    async def test_inventory_starts_empty(self, use_case):
        product = await use_case.register_product(
            RegisterProductRequest(user_id="admin", name="Sugar 1kg", price=180)
        )
        assert product.stock == 0

    async def test_service_never_runs_out(self, use_case):
        product = await use_case.register_product(
            RegisterProductRequest(
                user_id="admin", name="Installation", price=500, product_type=ProductType.SERVICE
            )
        )
        assert product.stock == 9999
