"""Cart endpoints, one cart per cashier."""

from fastapi import APIRouter, Depends, status

from kenpos.api.dependencies import get_cart_use_case
from kenpos.application.dto.requests import (
    AddToCartRequest,
    SetCartCustomerRequest,
    UpdateCartItemRequest,
)
from kenpos.application.dto.responses import CartResponse, ErrorResponse
from kenpos.application.use_cases import CartUseCase

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("/{cashier_id}", response_model=CartResponse)
async def get_cart(
    cashier_id: str,
    use_case: CartUseCase = Depends(get_cart_use_case),
) -> CartResponse:
    """Current cart with computed totals."""
    return use_case.to_response(await use_case.get(cashier_id))


@router.post(
    "/{cashier_id}/items",
    response_model=CartResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def add_item(
    cashier_id: str,
    request: AddToCartRequest,
    use_case: CartUseCase = Depends(get_cart_use_case),
) -> CartResponse:
    """Add a product, merging with an existing line."""
    return use_case.to_response(await use_case.add_item(cashier_id, request))


@router.put(
    "/{cashier_id}/items/{product_id}",
    response_model=CartResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_item(
    cashier_id: str,
    product_id: str,
    request: UpdateCartItemRequest,
    use_case: CartUseCase = Depends(get_cart_use_case),
) -> CartResponse:
    cart = await use_case.update_quantity(cashier_id, product_id, request.quantity)
    return use_case.to_response(cart)


@router.delete("/{cashier_id}/items/{product_id}", response_model=CartResponse)
async def remove_item(
    cashier_id: str,
    product_id: str,
    use_case: CartUseCase = Depends(get_cart_use_case),
) -> CartResponse:
    return use_case.to_response(await use_case.remove_item(cashier_id, product_id))


@router.put(
    "/{cashier_id}/customer",
    response_model=CartResponse,
    responses={404: {"model": ErrorResponse}},
)
async def set_customer(
    cashier_id: str,
    request: SetCartCustomerRequest,
    use_case: CartUseCase = Depends(get_cart_use_case),
) -> CartResponse:
    return use_case.to_response(await use_case.set_customer(cashier_id, request.customer_id))


@router.delete("/{cashier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(
    cashier_id: str,
    use_case: CartUseCase = Depends(get_cart_use_case),
) -> None:
    await use_case.clear(cashier_id)
