"""
Tests for chart of accounts API endpoints.

These test the HTTP layer: tenant resolution, status codes,
response format and error mapping. Business rules are tested
in test_accounting_service.py.
"""

from tenant_ledger.auth import issue_token


def create_account(client, headers, code="1000", name="Cash", type_="ASSET"):
    return client.post("/api/accounts", headers=headers, json={
        "code": code,
        "name": name,
        "type": type_,
    })


class TestTenantResolution:

    def test_missing_org_header_returns_400(self, client):
        response = client.get("/api/accounts")
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing org header"

    def test_org_taken_from_token(self, client, org_headers):
        create_account(client, org_headers)
        token = issue_token("user-1", org_id="org-a")

        response = client.get(
            "/api/accounts", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 200
        assert [a["code"] for a in response.json()] == ["1000"]

    def test_header_wins_over_token(self, client, org_headers):
        create_account(client, org_headers)
        token = issue_token("user-1", org_id="org-a")

        response = client.get("/api/accounts", headers={
            "x-org-id": "org-b",
            "Authorization": f"Bearer {token}",
        })
        assert response.json() == []


class TestCreateAccount:

    def test_create_account_returns_201(self, client, org_headers):
        response = create_account(client, org_headers)
        assert response.status_code == 201

    def test_create_account_returns_camel_case(self, client, org_headers):
        data = create_account(client, org_headers).json()
        assert data["code"] == "1000"
        assert data["type"] == "ASSET"
        assert data["isActive"] is True
        assert data["parentId"] is None

    def test_duplicate_code_returns_409(self, client, org_headers):
        create_account(client, org_headers)
        response = create_account(client, org_headers, name="Cash Again")
        assert response.status_code == 409

    def test_same_code_in_other_tenant(self, client, org_headers):
        create_account(client, org_headers)
        response = create_account(client, {"x-org-id": "org-b"})
        assert response.status_code == 201

    def test_invalid_type_returns_422(self, client, org_headers):
        response = create_account(client, org_headers, type_="PROFIT")
        assert response.status_code == 422

    def test_unknown_parent_returns_404(self, client, org_headers):
        response = client.post("/api/accounts", headers=org_headers, json={
            "code": "1010",
            "name": "Petty Cash",
            "type": "ASSET",
            "parentId": "00000000-0000-0000-0000-000000000001",
        })
        assert response.status_code == 404


class TestListAccounts:

    def test_ordered_by_code(self, client, org_headers):
        create_account(client, org_headers, code="4000", name="Revenue", type_="INCOME")
        create_account(client, org_headers, code="1000")

        codes = [a["code"] for a in client.get("/api/accounts", headers=org_headers).json()]
        assert codes == ["1000", "4000"]

    def test_tenants_isolated(self, client, org_headers):
        create_account(client, org_headers)
        response = client.get("/api/accounts", headers={"x-org-id": "org-b"})
        assert response.json() == []


class TestDeactivateAccount:

    def test_requires_token(self, client, org_headers):
        account = create_account(client, org_headers).json()
        response = client.post(
            f"/api/accounts/{account['id']}/deactivate", headers=org_headers
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized"

    def test_invalid_token_rejected(self, client, org_headers):
        account = create_account(client, org_headers).json()
        response = client.post(
            f"/api/accounts/{account['id']}/deactivate",
            headers={**org_headers, "Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401

    def test_deactivate(self, client, auth_headers):
        account = create_account(client, auth_headers).json()
        response = client.post(
            f"/api/accounts/{account['id']}/deactivate", headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["isActive"] is False

        active = client.get("/api/accounts", headers=auth_headers).json()
        assert active == []
        everything = client.get(
            "/api/accounts",
            headers=auth_headers,
            params={"includeInactive": "true"},
        ).json()
        assert [a["code"] for a in everything] == ["1000"]

    def test_unknown_account_returns_404(self, client, auth_headers):
        response = client.post(
            "/api/accounts/00000000-0000-0000-0000-000000000001/deactivate",
            headers=auth_headers,
        )
        assert response.status_code == 404
