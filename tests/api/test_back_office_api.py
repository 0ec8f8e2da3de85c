"""Tests for purchasing, registry, quotation, sync and data endpoints."""


class TestPurchasingEndpoints:
    async def test_order_receive_and_pay(self, api_client, repos):
        response = await api_client.post(
            "/api/purchase-orders",
            json={
                "user_id": "manager",
                "supplier_id": "sup_1",
                "items": [{"product_id": "prod_1", "quantity": 20}],
            },
        )
        assert response.status_code == 201
        po = response.json()
        assert po["status"] == "Draft"
        assert po["po_number"].startswith("PO-")
        assert po["total_cost"] == 12000

        sent = await api_client.post(
            f"/api/purchase-orders/{po['id']}/send", json={"user_id": "manager"}
        )
        assert sent.json()["status"] == "Sent"

        received = await api_client.post(
            f"/api/purchase-orders/{po['id']}/receive",
            json={"user_id": "manager", "items": [{"product_id": "prod_1", "quantity": 5}]},
        )
        assert received.status_code == 200
        body = received.json()
        assert body["purchase_order"]["status"] == "Partially Received"
        assert body["invoice"]["total_amount"] == 3000
        assert (await repos.products.require("prod_1")).stock == 15

        invoice_id = body["invoice"]["id"]
        invoices = (await api_client.get("/api/supplier-invoices?supplier_id=sup_1")).json()
        assert [i["id"] for i in invoices] == [invoice_id]

        paid = await api_client.post(
            f"/api/supplier-invoices/{invoice_id}/payments",
            json={"user_id": "manager", "amount": 1000},
        )
        assert paid.json()["status"] == "Partially Paid"

        over = await api_client.post(
            f"/api/supplier-invoices/{invoice_id}/payments",
            json={"user_id": "manager", "amount": 5000},
        )
        assert over.status_code == 422
        assert over.json()["error_code"] == "OVERPAYMENT"

    async def test_receive_draft_conflicts(self, api_client):
        po = (
            await api_client.post(
                "/api/purchase-orders",
                json={
                    "user_id": "manager",
                    "supplier_id": "sup_1",
                    "items": [{"product_id": "prod_1", "quantity": 1}],
                },
            )
        ).json()
        response = await api_client.post(
            f"/api/purchase-orders/{po['id']}/receive",
            json={"user_id": "manager", "items": [{"product_id": "prod_1", "quantity": 1}]},
        )
        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_STATE_TRANSITION"

    async def test_unknown_supplier(self, api_client):
        response = await api_client.post(
            "/api/purchase-orders",
            json={
                "user_id": "manager",
                "supplier_id": "sup_missing",
                "items": [{"product_id": "prod_1", "quantity": 1}],
            },
        )
        assert response.status_code == 404


class TestRegistryEndpoints:
    async def test_customer_registration(self, api_client):
        response = await api_client.post(
            "/api/customers",
            json={"user_id": "admin", "name": "Otieno", "phone": "0700000001"},
        )
        assert response.status_code == 201
        customer_id = response.json()["id"]

        duplicate = await api_client.post(
            "/api/customers",
            json={"user_id": "admin", "name": "Other", "phone": "0700000001"},
        )
        assert duplicate.status_code == 409
        assert duplicate.json()["error_code"] == "DUPLICATE_CUSTOMER"

        assert (await api_client.get(f"/api/customers/{customer_id}")).status_code == 200
        deleted = await api_client.delete(f"/api/customers/{customer_id}?user_id=admin")
        assert deleted.status_code == 204
        assert (await api_client.get(f"/api/customers/{customer_id}")).status_code == 404

    async def test_walk_in_customer_protected(self, api_client):
        response = await api_client.delete("/api/customers/cust001?user_id=admin")
        assert response.status_code == 409
        assert response.json()["error_code"] == "PROTECTED_RECORD"

    async def test_supplier_names_unique(self, api_client):
        response = await api_client.post(
            "/api/suppliers", json={"user_id": "admin", "name": "unga distributors"}
        )
        assert response.status_code == 409
        names = [s["name"] for s in (await api_client.get("/api/suppliers")).json()]
        assert names == ["Unga Distributors"]

    async def test_product_registration(self, api_client):
        response = await api_client.post(
            "/api/products",
            json={"user_id": "admin", "name": "Sugar 1kg", "price": 180, "cost_price": 140},
        )
        assert response.status_code == 201
        assert response.json()["stock"] == 0
        products = (await api_client.get("/api/products")).json()
        assert len(products) == 4


class TestQuotationEndpoints:
    async def test_create_and_convert(self, api_client):
        response = await api_client.post(
            "/api/quotations",
            json={
                "user_id": "cashier_1",
                "customer_id": "cust_jane",
                "items": [{"product_id": "prod_1", "quantity": 2, "price": 900}],
            },
        )
        assert response.status_code == 201
        quotation = response.json()
        assert quotation["quote_number"].startswith("QUO-")
        assert quotation["total"] == 1800

        cart = await api_client.post(
            f"/api/quotations/{quotation['id']}/convert", json={"cashier_id": "cashier_1"}
        )
        assert cart.status_code == 200
        assert cart.json()["quotation_id"] == quotation["id"]
        assert cart.json()["items"][0]["price"] == 900

        again = await api_client.post(
            f"/api/quotations/{quotation['id']}/convert", json={"cashier_id": "cashier_1"}
        )
        assert again.status_code == 409


class TestSyncEndpoints:
    async def test_status_and_run(self, api_client):
        await api_client.put("/api/sync/connectivity", json={"online": False})
        await api_client.post(
            "/api/cart/cashier_1/items", json={"product_id": "prod_1", "quantity": 1}
        )
        await api_client.post(
            "/api/sales",
            json={"cashier_id": "cashier_1", "payments": [{"method": "Cash", "amount": 1000}]},
        )

        status = (await api_client.get("/api/sync/status")).json()
        assert status == {"online": False, "queued_count": 1}

        # No endpoint configured: sales are accepted locally
        report = (await api_client.post("/api/sync/run")).json()
        assert report["success_count"] == 1
        assert report["failed_count"] == 0

        status = (await api_client.get("/api/sync/status")).json()
        assert status["queued_count"] == 0


class TestDataEndpoints:
    async def test_backup_then_restore(self, api_client, repos):
        backup = (await api_client.get("/api/data/backup?user_id=admin")).json()
        assert backup["version"] == 1
        assert len(backup["collections"]["products"]) == 3

        await api_client.post(
            "/api/customers", json={"user_id": "admin", "name": "Temp", "phone": "0799"}
        )
        response = await api_client.post("/api/data/restore?user_id=admin", json=backup)
        assert response.status_code == 200
        assert response.json()["restored"]["customers"] == 2
        assert len(await repos.customers.list()) == 2

    async def test_invalid_restore_writes_nothing(self, api_client, repos):
        payload = {
            "version": 1,
            "collections": {"customers": [], "products": [{"id": "p", "name": "x"}]},
        }
        response = await api_client.post("/api/data/restore?user_id=admin", json=payload)
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_BACKUP"
        assert len(await repos.customers.list()) == 2
