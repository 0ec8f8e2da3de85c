"""Quotation endpoints."""

from fastapi import APIRouter, Depends, status

from kenpos.api.dependencies import get_quotation_use_case, get_store
from kenpos.application.dto.requests import ConvertQuotationRequest, CreateQuotationRequest
from kenpos.application.dto.responses import ErrorResponse
from kenpos.application.repository import Repositories
from kenpos.application.use_cases import QuotationUseCase
from kenpos.core.entities import Cart, Quotation
from kenpos.core.interfaces import IPersistenceStore

router = APIRouter(prefix="/api/quotations", tags=["quotations"])


@router.get("", response_model=list[Quotation])
async def list_quotations(store: IPersistenceStore = Depends(get_store)) -> list[Quotation]:
    return await Repositories.bind(store).quotations.list()


@router.post(
    "",
    response_model=Quotation,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_quotation(
    request: CreateQuotationRequest,
    use_case: QuotationUseCase = Depends(get_quotation_use_case),
) -> Quotation:
    return await use_case.create(request)


@router.post(
    "/{quotation_id}/convert",
    response_model=Cart,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def convert_quotation(
    quotation_id: str,
    request: ConvertQuotationRequest,
    use_case: QuotationUseCase = Depends(get_quotation_use_case),
) -> Cart:
    """Load a quotation into the cashier's cart for checkout."""
    return await use_case.convert_to_cart(quotation_id, request.cashier_id)
