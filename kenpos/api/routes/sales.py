"""Sale completion endpoints."""

from fastapi import APIRouter, Depends, status

from kenpos.api.dependencies import get_complete_sale_use_case, get_store
from kenpos.application.dto.requests import CompleteSaleRequest
from kenpos.application.dto.responses import CompleteSaleResponse, ErrorResponse
from kenpos.application.repository import Repositories
from kenpos.application.use_cases import CompleteSaleUseCase
from kenpos.core.entities import Sale
from kenpos.core.exceptions import RecordNotFoundError
from kenpos.core.interfaces import Collection, IPersistenceStore

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.post(
    "",
    response_model=CompleteSaleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def complete_sale(
    request: CompleteSaleRequest,
    use_case: CompleteSaleUseCase = Depends(get_complete_sale_use_case),
) -> CompleteSaleResponse:
    """Check out the cashier's cart.

    Stock, loyalty points, the shift and the sale record are written
    together or not at all.
    """
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get("", response_model=list[Sale])
async def list_sales(
    include_queued: bool = True,
    store: IPersistenceStore = Depends(get_store),
) -> list[Sale]:
    """Synced sales, followed by those still waiting in the offline queue."""
    repos = Repositories.bind(store)
    sales = await repos.sales.list()
    if include_queued:
        sales.extend(await repos.order_queue.list())
    return sales


@router.get("/{sale_id}", response_model=Sale, responses={404: {"model": ErrorResponse}})
async def get_sale(
    sale_id: str,
    store: IPersistenceStore = Depends(get_store),
) -> Sale:
    repos = Repositories.bind(store)
    sale = await repos.sales.get(sale_id) or await repos.order_queue.get(sale_id)
    if sale is None:
        raise RecordNotFoundError(Collection.SALES.value, sale_id)
    return sale
