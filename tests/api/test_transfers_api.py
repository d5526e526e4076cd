"""
Tests for the transfer endpoints.

These test the HTTP layer: status codes, the success envelope
and the tagged error shape. Business rules are covered in
test_transfer_service.py.
"""

import pytest


def transfer_body(source_id, destination_id, amount, user_id):
    return {
        "transferred_at": "2024-05-01T10:30:00",
        "amount": amount,
        "source_account_id": source_id,
        "destination_account_id": destination_id,
        "authorizing_user_id": user_id,
    }


def balance(client, account_id):
    return float(client.get(f"/api/accounts/{account_id}").json()["balance"])


class TestCreateTransfer:

    def test_successful_transfer(self, client, staff_user, open_account):
        source = open_account("1000.50")
        destination = open_account("200.00")

        response = client.post("/api/transfers", json=transfer_body(
            source.id, destination.id, 300.00, staff_user.id,
        ))

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Transfer completed"
        assert data["transfer"]["source_account_id"] == source.id
        assert float(data["transfer"]["amount"]) == 300.0
        assert balance(client, source.id) == 700.50
        assert balance(client, destination.id) == 500.00

    def test_transfer_is_audited(self, client, staff_user, open_account):
        source = open_account("100.00")
        destination = open_account("0.00")
        transfer_id = client.post("/api/transfers", json=transfer_body(
            source.id, destination.id, 25, staff_user.id,
        )).json()["transfer"]["id"]

        entries = client.get("/api/audit-log", params={"entity_name": "Transfer"}).json()
        assert len(entries) == 1
        assert entries[0]["action"] == "CREATE"
        assert entries[0]["entity_id"] == transfer_id
        assert entries[0]["user_id"] == staff_user.id

    def test_insufficient_funds_shape(self, client, staff_user, open_account):
        source = open_account("50.00")
        destination = open_account("0.00")

        response = client.post("/api/transfers", json=transfer_body(
            source.id, destination.id, 100.00, staff_user.id,
        ))

        assert response.status_code == 409
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "INSUFFICIENT_FUNDS"
        assert "Insufficient funds" in data["message"]
        assert balance(client, source.id) == 50.00
        assert client.get("/api/transfers").json() == []

    @pytest.mark.parametrize("overrides, kind, status", [
        ({"amount": None}, "MISSING_FIELDS", 400),
        ({"destination_account_id": "SOURCE"}, "SAME_ACCOUNT", 400),
        ({"destination_account_id": 999}, "ACCOUNT_NOT_FOUND", 404),
        ({"amount": 0}, "INVALID_AMOUNT", 400),
        ({"amount": -5}, "INVALID_AMOUNT", 400),
    ])
    def test_rejection_kinds(
        self, client, staff_user, open_account, overrides, kind, status
    ):
        source = open_account("100.00")
        destination = open_account("0.00")
        body = transfer_body(source.id, destination.id, 10, staff_user.id)
        for key, value in overrides.items():
            body[key] = source.id if value == "SOURCE" else value

        response = client.post("/api/transfers", json=body)

        assert response.status_code == status
        assert response.json()["error"] == kind

    def test_inactive_account_kind(self, client, staff_user, open_account):
        source = open_account("100.00")
        destination = open_account("0.00")
        client.put(f"/api/accounts/{destination.id}/deactivate")

        response = client.post("/api/transfers", json=transfer_body(
            source.id, destination.id, 10, staff_user.id,
        ))

        assert response.status_code == 409
        assert response.json()["error"] == "INACTIVE_ACCOUNT"

    def test_unknown_authorizing_user_returns_409(self, client, open_account):
        source = open_account("100.00")
        destination = open_account("0.00")

        response = client.post("/api/transfers", json=transfer_body(
            source.id, destination.id, 10, 404,
        ))

        assert response.status_code == 409
        assert response.json()["error"] == "PERSISTENCE_ERROR"
        assert balance(client, source.id) == 100.00

    def test_wrong_type_is_request_error(self, client):
        response = client.post("/api/transfers", json={"amount": "lots"})
        assert response.status_code == 422


class TestReadTransfers:

    def test_get_and_list(self, client, staff_user, open_account):
        source = open_account("100.00")
        destination = open_account("0.00")
        created = client.post("/api/transfers", json=transfer_body(
            source.id, destination.id, 10, staff_user.id,
        )).json()["transfer"]

        assert client.get(f"/api/transfers/{created['id']}").json()["id"] == created["id"]
        listed = client.get("/api/transfers", params={"account_id": destination.id})
        assert [t["id"] for t in listed.json()] == [created["id"]]

    def test_missing_transfer_returns_404(self, client):
        response = client.get("/api/transfers/999")
        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_transfers_cannot_be_deleted(self, client):
        response = client.delete("/api/transfers/1")
        assert response.status_code == 405
