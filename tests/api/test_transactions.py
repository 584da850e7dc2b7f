"""
Tests for transaction endpoints.

These test the HTTP layer: status codes, error bodies and
ownership. Transfer semantics are tested in
test_transaction_service.py.
"""

from decimal import Decimal

import pytest

from conftest import auth_headers, create_user, open_account
from bank_api.errors import StorageConflict, StorageUnavailable
from bank_api.services import AccountService, TransactionService

MISSING_ID = "00000000-0000-0000-0000-000000000000"


def setup_accounts(db_session):
    """Helper: a logged-in user with two accounts and a stranger with one."""
    user = create_user(db_session)
    stranger = create_user(db_session, email="stranger@test.com")
    checking = open_account(db_session, user, "1000.00")
    savings = open_account(db_session, user, "2000.00")
    theirs = open_account(db_session, stranger, "300.00")
    return checking, savings, theirs


class TestTransfer:

    def test_transfer_returns_both_legs(self, client, db_session):
        checking, savings, _ = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/transfer", json={
            "from_account_id": str(checking.id),
            "to_account_id": str(savings.id),
            "amount": "500.00",
            "description": "rent",
        }, headers=headers)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Transfer successful"
        assert Decimal(data["withdrawal"]["amount"]) == Decimal("-500.00")
        assert Decimal(data["deposit"]["amount"]) == Decimal("500.00")
        assert data["withdrawal"]["transaction_type"] == "TRANSFER"

        balance = client.get(f"/accounts/{checking.id}", headers=headers).json()
        assert Decimal(balance["balance"]) == Decimal("500.00")

    def test_transfer_to_someone_else(self, client, db_session):
        checking, _, theirs = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/transfer", json={
            "from_account_id": str(checking.id),
            "to_account_id": str(theirs.id),
            "amount": "50.00",
        }, headers=headers)

        assert response.status_code == 201

    def test_transfer_from_someone_else_returns_403(self, client, db_session):
        checking, _, theirs = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/transfer", json={
            "from_account_id": str(theirs.id),
            "to_account_id": str(checking.id),
            "amount": "50.00",
        }, headers=headers)

        assert response.status_code == 403

    @pytest.mark.parametrize("amount, code", [
        ("0", "INVALID_AMOUNT"),
        ("-100.00", "INVALID_AMOUNT"),
        ("5000.00", "INSUFFICIENT_FUNDS"),
    ])
    def test_rejections_return_400(self, client, db_session, amount, code):
        checking, savings, _ = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/transfer", json={
            "from_account_id": str(checking.id),
            "to_account_id": str(savings.id),
            "amount": amount,
        }, headers=headers)

        assert response.status_code == 400
        assert response.json()["code"] == code

    def test_self_transfer_returns_400(self, client, db_session):
        checking, _, _ = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/transfer", json={
            "from_account_id": str(checking.id),
            "to_account_id": str(checking.id),
            "amount": "1.00",
        }, headers=headers)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_TARGET"

    def test_missing_target_returns_404(self, client, db_session):
        checking, _, _ = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/transfer", json={
            "from_account_id": str(checking.id),
            "to_account_id": MISSING_ID,
            "amount": "1.00",
        }, headers=headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "target account not found"

    @pytest.mark.parametrize("error, status", [
        (StorageConflict("retry"), 409),
        (StorageUnavailable("down"), 503),
    ])
    def test_storage_errors(self, client, db_session, monkeypatch, error, status):
        checking, savings, _ = setup_accounts(db_session)
        headers = auth_headers(client)

        def fail(self, *args, **kwargs):
            raise error

        monkeypatch.setattr(TransactionService, "transfer", fail)

        response = client.post("/transactions/transfer", json={
            "from_account_id": str(checking.id),
            "to_account_id": str(savings.id),
            "amount": "1.00",
        }, headers=headers)

        assert response.status_code == status
        assert response.json()["code"] == error.code


class TestDepositWithdraw:

    def test_deposit(self, client, db_session):
        checking, _, _ = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/deposit", json={
            "account_id": str(checking.id), "amount": "25.50",
        }, headers=headers)

        assert response.status_code == 201
        data = response.json()
        assert data["transaction_type"] == "DEPOSIT"
        assert data["description"] == "Deposit"
        assert Decimal(data["balance"]) == Decimal("1025.50")

    def test_withdraw(self, client, db_session):
        checking, _, _ = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/withdraw", json={
            "account_id": str(checking.id), "amount": "25.50",
        }, headers=headers)

        assert response.status_code == 201
        assert Decimal(response.json()["amount"]) == Decimal("-25.50")

    def test_overdraw_returns_400(self, client, db_session):
        checking, _, _ = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/withdraw", json={
            "account_id": str(checking.id), "amount": "1000.01",
        }, headers=headers)

        assert response.status_code == 400

    def test_deposit_to_someone_else_returns_403(self, client, db_session):
        _, _, theirs = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/deposit", json={
            "account_id": str(theirs.id), "amount": "1.00",
        }, headers=headers)

        assert response.status_code == 403

    def test_deposit_to_missing_account_returns_404(self, client, db_session):
        setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/deposit", json={
            "account_id": MISSING_ID, "amount": "1.00",
        }, headers=headers)

        assert response.status_code == 404


class TestHistory:

    def test_account_history_has_total_header(self, client, db_session):
        checking, savings, _ = setup_accounts(db_session)
        headers = auth_headers(client)
        for _ in range(3):
            client.post("/transactions/transfer", json={
                "from_account_id": str(checking.id),
                "to_account_id": str(savings.id),
                "amount": "1.00",
            }, headers=headers)

        response = client.get(
            f"/transactions/account/{checking.id}?limit=2&offset=0", headers=headers
        )

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "4"
        assert len(response.json()) == 2

    def test_other_users_history_returns_403(self, client, db_session):
        _, _, theirs = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.get(f"/transactions/account/{theirs.id}", headers=headers)

        assert response.status_code == 403

    def test_get_single_entry(self, client, db_session):
        checking, _, theirs = setup_accounts(db_session)
        headers = auth_headers(client)
        mine = client.get(f"/transactions/account/{checking.id}", headers=headers).json()[0]
        their_entry = TransactionService.with_session(db_session).get_account_transactions(
            theirs.id
        )[0][0]

        assert client.get(f"/transactions/{mine['id']}", headers=headers).status_code == 200
        assert client.get(
            f"/transactions/{their_entry.id}", headers=headers
        ).status_code == 403
        assert client.get(f"/transactions/{MISSING_ID}", headers=headers).status_code == 404

    def test_global_listing(self, client, db_session):
        setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.get("/transactions", headers=headers)

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "3"


class TestClosedAccountEntries:

    def test_entry_of_deleted_account_hidden_from_others(self, client, db_session):
        owner = create_user(db_session)
        account = open_account(db_session, owner, "100.00")
        entry = TransactionService.with_session(db_session).deposit(
            account.id, Decimal("5.00")
        )
        entry_id = entry.id
        AccountService.with_session(db_session).delete_account(account.id)
        db_session.commit()
        create_user(db_session, email="stranger@test.com")
        headers = auth_headers(client, email="stranger@test.com")

        response = client.get(f"/transactions/{entry_id}", headers=headers)

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


class TestAmountRange:

    def test_huge_deposit_returns_400(self, client, db_session):
        checking, _, _ = setup_accounts(db_session)
        headers = auth_headers(client)

        response = client.post("/transactions/deposit", json={
            "account_id": str(checking.id), "amount": "100000000000000000",
        }, headers=headers)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_AMOUNT"
