"""
Tests for client, account type and account endpoints.
"""


def create_client(client, email="lucia@example.com", user_id=None):
    headers = {"X-User-Id": str(user_id)} if user_id else {}
    return client.post("/api/clients", json={
        "first_name": "Lucia",
        "last_name": "Gomez",
        "email": email,
        "phone": "555-0100",
    }, headers=headers)


def create_account_type(client, name="Checking"):
    return client.post("/api/account-types", json={"name": name})


def open_account(client, client_id, type_id, number="001-0001", balance=100):
    return client.post("/api/accounts", json={
        "account_number": number,
        "client_id": client_id,
        "account_type_id": type_id,
        "balance": balance,
    })


class TestClients:

    def test_create_client_returns_201(self, client):
        response = create_client(client)
        assert response.status_code == 201
        assert response.json()["is_active"] is True

    def test_duplicate_email_returns_409(self, client):
        create_client(client)
        response = create_client(client)
        assert response.status_code == 409
        assert response.json() == {
            "success": False,
            "error": "CONFLICT",
            "message": "Client with email 'lucia@example.com' already exists",
        }

    def test_acting_user_is_recorded(self, client):
        client_id = create_client(client, user_id=12).json()["id"]
        entries = client.get("/api/audit-log", params={"user_id": 12}).json()
        assert entries[0]["entity_name"] == "Client"
        assert entries[0]["entity_id"] == client_id

    def test_deactivate_and_activate(self, client):
        client_id = create_client(client).json()["id"]

        response = client.put(f"/api/clients/{client_id}/deactivate")
        assert response.json()["is_active"] is False

        response = client.put(f"/api/clients/{client_id}/activate")
        assert response.json()["is_active"] is True

    def test_update_client(self, client):
        client_id = create_client(client).json()["id"]
        response = client.put(f"/api/clients/{client_id}", json={"address": "Calle 5"})
        assert response.status_code == 200
        assert response.json()["address"] == "Calle 5"

    def test_missing_client_returns_404(self, client):
        assert client.get("/api/clients/404").status_code == 404


class TestAccounts:

    def test_open_account_returns_201(self, client):
        client_id = create_client(client).json()["id"]
        type_id = create_account_type(client).json()["id"]

        response = open_account(client, client_id, type_id)

        assert response.status_code == 201
        assert float(response.json()["balance"]) == 100.0

    def test_list_includes_display_names(self, client):
        client_id = create_client(client).json()["id"]
        type_id = create_account_type(client).json()["id"]
        open_account(client, client_id, type_id)

        rows = client.get("/api/accounts").json()
        assert rows[0]["client_name"] == "Lucia Gomez"
        assert rows[0]["account_type_name"] == "Checking"

    def test_active_listing_hides_inactive(self, client):
        client_id = create_client(client).json()["id"]
        type_id = create_account_type(client).json()["id"]
        first = open_account(client, client_id, type_id, number="A-1").json()
        open_account(client, client_id, type_id, number="A-2")
        client.put(f"/api/accounts/{first['id']}/deactivate")

        active = client.get("/api/accounts/active").json()
        assert [a["account_number"] for a in active] == ["A-2"]

    def test_balance_is_not_editable(self, client):
        client_id = create_client(client).json()["id"]
        type_id = create_account_type(client).json()["id"]
        account_id = open_account(client, client_id, type_id).json()["id"]

        response = client.put(f"/api/accounts/{account_id}", json={"balance": 1_000_000})

        assert response.status_code == 200
        assert float(response.json()["balance"]) == 100.0

    def test_negative_opening_balance_returns_422(self, client):
        client_id = create_client(client).json()["id"]
        type_id = create_account_type(client).json()["id"]
        response = open_account(client, client_id, type_id, balance=-1)
        assert response.status_code == 422

    def test_client_accounts(self, client):
        client_id = create_client(client).json()["id"]
        type_id = create_account_type(client).json()["id"]
        open_account(client, client_id, type_id)

        accounts = client.get(f"/api/clients/{client_id}/accounts").json()
        assert len(accounts) == 1


class TestAccountTypes:

    def test_delete_in_use_returns_409(self, client):
        client_id = create_client(client).json()["id"]
        type_id = create_account_type(client).json()["id"]
        open_account(client, client_id, type_id)

        response = client.delete(f"/api/account-types/{type_id}")
        assert response.status_code == 409

    def test_delete_unused_returns_204(self, client):
        type_id = create_account_type(client, name="Unused").json()["id"]
        assert client.delete(f"/api/account-types/{type_id}").status_code == 204
        assert client.get(f"/api/account-types/{type_id}").status_code == 404
