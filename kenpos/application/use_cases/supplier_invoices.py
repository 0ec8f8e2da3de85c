"""Supplier invoice listing and payments."""

from kenpos.application.audit import record_audit
from kenpos.application.dto.requests import RecordSupplierPaymentRequest
from kenpos.application.locks import AggregateLocks, get_aggregate_locks, invoice_key
from kenpos.application.repository import Repositories
from kenpos.config import get_logger
from kenpos.core.entities import (
    MONEY_EPSILON,
    AuditAction,
    SupplierInvoice,
    SupplierPayment,
)
from kenpos.core.exceptions import OverpaymentError, ValidationError
from kenpos.core.interfaces.storage import IPersistenceStore
from kenpos.core.services.identifiers import new_id
from kenpos.core.services.pricing import round_money

logger = get_logger(__name__)


class SupplierInvoiceUseCase:
    """Record payments against supplier invoices."""

    def __init__(
        self,
        store: IPersistenceStore | None = None,
        locks: AggregateLocks | None = None,
    ):
        self._store = store
        self._locks = locks or get_aggregate_locks()

    async def _get_store(self) -> IPersistenceStore:
        if self._store is None:
            from kenpos.infrastructure.storage.sqlite import get_persistence_store

            self._store = await get_persistence_store()
        return self._store

    async def record_payment(
        self, invoice_id: str, request: RecordSupplierPaymentRequest
    ) -> SupplierInvoice:
        """Apply a payment; the invoice can never be paid beyond its total."""
        logger.info(
            "record_supplier_payment_started",
            invoice_id=invoice_id,
            amount=request.amount,
        )
        if request.amount <= 0:
            raise ValidationError("amount", "must be greater than zero", request.amount)

        store = await self._get_store()
        async with self._locks.hold(invoice_key(invoice_id)):
            async with store.transaction() as tx:
                repos = Repositories.bind(tx)
                invoice = await repos.supplier_invoices.require(invoice_id)
                amount = round_money(request.amount)
                if amount > invoice.balance + MONEY_EPSILON:
                    raise OverpaymentError("exceeds invoice balance", amount, invoice.balance)

                invoice.paid_amount = round_money(invoice.paid_amount + amount)
                invoice.status = SupplierInvoice.status_for(
                    invoice.paid_amount, invoice.total_amount
                )
                await repos.supplier_invoices.save(invoice)

                payment = SupplierPayment(
                    id=new_id("spay_"),
                    invoice_id=invoice.id,
                    supplier_id=invoice.supplier_id,
                    amount=amount,
                    method=request.method,
                )
                await repos.supplier_payments.save(payment)
                await record_audit(
                    repos,
                    request.user_id,
                    AuditAction.RECORD_SUPPLIER_PAYMENT,
                    {"invoice_id": invoice.id, "payment_id": payment.id, "amount": amount},
                )

        logger.info(
            "record_supplier_payment_complete",
            invoice_id=invoice.id,
            paid=invoice.paid_amount,
            status=invoice.status.value,
        )
        return invoice

    async def list_invoices(self, supplier_id: str | None = None) -> list[SupplierInvoice]:
        repos = Repositories.bind(await self._get_store())
        invoices = await repos.supplier_invoices.list()
        if supplier_id:
            invoices = [i for i in invoices if i.supplier_id == supplier_id]
        return invoices
