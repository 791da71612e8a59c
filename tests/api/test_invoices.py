"""
Tests for invoice API endpoints.
"""


def invoice_body(number="INV-001"):
    return {
        "number": number,
        "clientName": "Acme Ltd",
        "issueDate": "2024-01-01",
        "dueDate": "2024-01-31",
        "items": [{"description": "Consulting", "quantity": 2, "unitPrice": 150}],
        "tax": 30,
    }


class TestCreateInvoice:

    def test_create_returns_201(self, client, auth_headers):
        response = client.post("/api/invoices", headers=auth_headers, json=invoice_body())
        assert response.status_code == 201

        invoice = response.json()["invoice"]
        assert float(invoice["subtotal"]) == 300
        assert float(invoice["total"]) == 330
        assert invoice["status"] == "draft"
        assert invoice["createdBy"] == "user-1"

    def test_duplicate_number_returns_409(self, client, org_headers):
        client.post("/api/invoices", headers=org_headers, json=invoice_body())
        response = client.post("/api/invoices", headers=org_headers, json=invoice_body())
        assert response.status_code == 409

    def test_due_before_issue_returns_422(self, client, org_headers):
        body = invoice_body()
        body["dueDate"] = "2023-12-31"
        response = client.post("/api/invoices", headers=org_headers, json=body)
        assert response.status_code == 422

    def test_list_scoped_to_tenant(self, client, org_headers):
        client.post("/api/invoices", headers=org_headers, json=invoice_body())
        assert len(client.get("/api/invoices", headers=org_headers).json()) == 1
        assert client.get("/api/invoices", headers={"x-org-id": "org-b"}).json() == []


class TestInvoiceStatus:

    def _create(self, client, headers):
        return client.post("/api/invoices", headers=headers, json=invoice_body()).json()["invoice"]

    def test_valid_transition(self, client, org_headers):
        invoice = self._create(client, org_headers)
        response = client.post(
            f"/api/invoices/{invoice['id']}/status",
            headers=org_headers,
            json={"status": "sent"},
        )
        assert response.status_code == 200
        assert response.json()["invoice"]["status"] == "sent"

    def test_invalid_transition_returns_422(self, client, org_headers):
        invoice = self._create(client, org_headers)
        response = client.post(
            f"/api/invoices/{invoice['id']}/status",
            headers=org_headers,
            json={"status": "paid"},
        )
        assert response.status_code == 422

    def test_other_tenant_returns_404(self, client, org_headers):
        invoice = self._create(client, org_headers)
        response = client.post(
            f"/api/invoices/{invoice['id']}/status",
            headers={"x-org-id": "org-b"},
            json={"status": "sent"},
        )
        assert response.status_code == 404
