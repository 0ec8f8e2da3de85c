"""Customer, supplier and product registration endpoints."""

from fastapi import APIRouter, Depends, status

from kenpos.api.dependencies import get_registry_use_case, get_store
from kenpos.application.dto.requests import (
    RegisterCustomerRequest,
    RegisterProductRequest,
    RegisterSupplierRequest,
)
from kenpos.application.dto.responses import ErrorResponse
from kenpos.application.repository import Repositories
from kenpos.application.use_cases import RegistryUseCase
from kenpos.core.entities import Customer, Product, Supplier
from kenpos.core.interfaces import IPersistenceStore

customers_router = APIRouter(prefix="/api/customers", tags=["registry"])
suppliers_router = APIRouter(prefix="/api/suppliers", tags=["registry"])
products_router = APIRouter(prefix="/api/products", tags=["registry"])


@customers_router.get("", response_model=list[Customer])
async def list_customers(store: IPersistenceStore = Depends(get_store)) -> list[Customer]:
    return await Repositories.bind(store).customers.list()


@customers_router.get(
    "/{customer_id}", response_model=Customer, responses={404: {"model": ErrorResponse}}
)
async def get_customer(
    customer_id: str, store: IPersistenceStore = Depends(get_store)
) -> Customer:
    return await Repositories.bind(store).customers.require(customer_id)


@customers_router.post(
    "",
    response_model=Customer,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def register_customer(
    request: RegisterCustomerRequest,
    use_case: RegistryUseCase = Depends(get_registry_use_case),
) -> Customer:
    return await use_case.register_customer(request)


@customers_router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_customer(
    customer_id: str,
    user_id: str,
    use_case: RegistryUseCase = Depends(get_registry_use_case),
) -> None:
    """Delete a customer; the walk-in customer is protected."""
    await use_case.delete_customer(customer_id, user_id)


@suppliers_router.get("", response_model=list[Supplier])
async def list_suppliers(store: IPersistenceStore = Depends(get_store)) -> list[Supplier]:
    return await Repositories.bind(store).suppliers.list()


@suppliers_router.post(
    "",
    response_model=Supplier,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def register_supplier(
    request: RegisterSupplierRequest,
    use_case: RegistryUseCase = Depends(get_registry_use_case),
) -> Supplier:
    return await use_case.register_supplier(request)


@products_router.get("", response_model=list[Product])
async def list_products(store: IPersistenceStore = Depends(get_store)) -> list[Product]:
    return await Repositories.bind(store).products.list()


@products_router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def register_product(
    request: RegisterProductRequest,
    use_case: RegistryUseCase = Depends(get_registry_use_case),
) -> Product:
    return await use_case.register_product(request)
