"""Tests for purchase order authoring."""

import pytest

from kenpos.application.dto.requests import (
    AddPurchaseOrderItemRequest,
    CreatePurchaseOrderRequest,
    PurchaseOrderLineRequest,
)
from kenpos.application.use_cases import PurchaseOrderUseCase
from kenpos.core.entities import AuditAction, POStatus
from kenpos.core.exceptions import InvalidStateTransitionError, RecordNotFoundError


@pytest.fixture
def use_case(store, locks):
    return PurchaseOrderUseCase(store=store, locks=locks)


async def _create(use_case, status="Draft"):
    return await use_case.create(
        CreatePurchaseOrderRequest(
            user_id="manager",
            supplier_id="sup_1",
            status=status,
            items=[
                PurchaseOrderLineRequest(product_id="prod_1", quantity=100, cost=10),
                PurchaseOrderLineRequest(product_id="prod_cable", quantity=50),
            ],
        )
    )


class TestCreate:
    async def test_create(self, use_case, repos):
        po = await _create(use_case)
        assert po.po_number.startswith("PO-")
        assert len(po.po_number) == len("PO-") + 6
        assert po.status == POStatus.DRAFT
        # cable falls back to its cost price of 30
        assert po.total_cost == 100 * 10 + 50 * 30
        assert (await repos.audit_logs.list())[0].action == AuditAction.ADD_PO

    async def test_duplicate_lines_merged(self, use_case):
        po = await use_case.create(
            CreatePurchaseOrderRequest(
                user_id="manager",
                supplier_id="sup_1",
                items=[
                    PurchaseOrderLineRequest(product_id="prod_1", quantity=5, cost=10),
                    PurchaseOrderLineRequest(product_id="prod_1", quantity=3, cost=10),
                ],
            )
        )
        assert len(po.items) == 1
        assert po.items[0].quantity == 8

    async def test_unknown_supplier(self, use_case):
        with pytest.raises(RecordNotFoundError):
            await use_case.create(
                CreatePurchaseOrderRequest(
                    user_id="manager",
                    supplier_id="sup_missing",
                    items=[PurchaseOrderLineRequest(product_id="prod_1", quantity=1)],
                )
            )

    async def test_draft_for_product(self, use_case):
        po = await use_case.draft_for_product("sup_1", "prod_1", 12, "manager")
        assert po.status == POStatus.DRAFT
        assert po.expected_date is not None
        assert po.items[0].quantity == 12


class TestTransitions:
    async def test_send_then_cancel(self, use_case, repos):
        po = await _create(use_case)
        sent = await use_case.send(po.id, "manager")
        assert sent.status == POStatus.SENT
        cancelled = await use_case.cancel(po.id, "manager")
        assert cancelled.status == POStatus.CANCELLED
        assert (await repos.purchase_orders.require(po.id)).status == POStatus.CANCELLED

    async def test_cannot_send_twice(self, use_case):
        po = await _create(use_case, status="Sent")
        with pytest.raises(InvalidStateTransitionError):
            await use_case.send(po.id, "manager")

    async def test_add_item_to_draft(self, use_case):
        po = await _create(use_case)
        updated = await use_case.add_item(
            po.id, AddPurchaseOrderItemRequest(user_id="manager", product_id="prod_1", quantity=5)
        )
        assert updated.line_for("prod_1").quantity == 105
        assert updated.total_cost == 105 * 10 + 50 * 30

    async def test_cannot_edit_cancelled_order(self, use_case):
        po = await _create(use_case)
        await use_case.cancel(po.id, "manager")
        with pytest.raises(InvalidStateTransitionError):
            await use_case.add_item(
                po.id,
                AddPurchaseOrderItemRequest(user_id="manager", product_id="prod_1", quantity=5),
            )

    async def test_list(self, use_case):
        await _create(use_case)
        assert len(await use_case.list_orders()) == 1
