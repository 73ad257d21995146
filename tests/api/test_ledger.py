"""
Tests for ledger API endpoints.

These test the HTTP layer: status codes, response format,
and error handling. Business logic is tested in
test_bookkeeping_service.py.
"""

import pytest


def post_action(client, **body):
    return client.post("/ledger", json=body)


class TestGetLedger:

    def test_returns_summary(self, client):
        response = client.get("/ledger")
        assert response.status_code == 200

        data = response.json()
        assert {
            "accounts", "recentEntries", "cashPosition", "pendingTransfers",
            "totals", "expensesByCategory", "taxEstimate", "expenseCategories",
        } <= set(data)
        ids = [a["id"] for a in data["accounts"]]
        assert ids[:6] == [
            "CASH_ON_HAND", "BANK_FULTON", "KRAKEN_PENDING",
            "KRAKEN", "OWNER_EQUITY", "REVENUE",
        ]
        assert "EXPENSE:SOFTWARE" in ids

    def test_summary_is_stable(self, client):
        post_action(client, action="cash_income", amountUsd=500)

        first = client.get("/ledger").json()
        second = client.get("/ledger").json()
        assert first == second


class TestPostLedger:

    def test_cash_income(self, client):
        response = post_action(
            client, action="cash_income", amountUsd=500, clientName="Acme"
        )
        assert response.status_code == 200

        data = response.json()
        assert len(data["result"]["entries"]) == 2
        accounts = {a["id"]: a for a in data["summary"]["accounts"]}
        assert accounts["CASH_ON_HAND"]["balanceCents"] == 50000
        assert accounts["CASH_ON_HAND"]["balanceUsd"] == 500.0
        assert accounts["REVENUE"]["balanceCents"] == 50000
        assert data["summary"]["totals"]["revenueCents"] == 50000

    def test_camel_case_alias(self, client):
        response = post_action(client, action="recordCapitalContribution", amountUsd="75.25")
        assert response.status_code == 200
        cash = response.json()["summary"]["cashPosition"]["cashOnHandCents"]
        assert cash == 7525

    @pytest.mark.parametrize("amount", [0, -10, "ten", None])
    def test_invalid_amount_returns_400(self, client, amount):
        response = post_action(client, action="owner_draw", amountUsd=amount)
        assert response.status_code == 400
        assert "amountUsd" in response.json()["error"]

        summary = client.get("/ledger").json()
        assert summary["recentEntries"] == []

    def test_huge_amount_returns_400(self, client):
        response = post_action(client, action="cash_income", amountUsd=1e20)
        assert response.status_code == 400
        assert response.json() == {
            "error": "amountUsd must be at most $100,000,000,000"
        }
        assert client.get("/ledger").json()["recentEntries"] == []

    def test_unknown_action_returns_400(self, client):
        response = post_action(client, action="teleport", amountUsd=5)
        assert response.status_code == 400
        assert response.json() == {"error": "Unknown action: teleport"}

    def test_unknown_category_returns_400(self, client):
        response = post_action(
            client, action="expense", amountUsd=20, category="yachts"
        )
        assert response.status_code == 400
        assert "Unknown expense category" in response.json()["error"]
        assert client.get("/ledger").json()["recentEntries"] == []

    def test_expense_paid_from_bank(self, client):
        response = post_action(
            client, action="expense", amountUsd=19.99, category="software",
            paidFrom="bank", vendor="GitHub", note="Copilot",
        )
        assert response.status_code == 200
        summary = response.json()["summary"]
        assert summary["cashPosition"]["bankCents"] == -1999
        assert summary["expensesByCategory"][0]["id"] == "software"
        assert summary["expensesByCategory"][0]["totalCents"] == 1999

    def test_ach_then_complete(self, client):
        post_action(client, action="capital_contribution", amountUsd=1000)
        post_action(client, action="deposit_to_bank", amountUsd=1000)

        response = post_action(client, action="ach_to_kraken", amountUsd=400)
        assert response.status_code == 200
        transfer = response.json()["result"]["transfer"]
        assert transfer["status"] == "PLANNED"
        assert transfer["amountUsd"] == 400.0
        assert response.json()["summary"]["cashPosition"]["pendingOutCents"] == 40000

        response = post_action(
            client, action="complete_transfer",
            transferId=transfer["id"], reference="KR-42",
        )
        assert response.status_code == 200
        data = response.json()
        assert data["result"]["transfer"]["status"] == "CONFIRMED"
        assert data["result"]["transfer"]["krakenRef"] == "KR-42"
        position = data["summary"]["cashPosition"]
        assert position["krakenCents"] == 40000
        assert position["krakenPendingCents"] == 0
        assert position["bankCents"] == 60000
        assert data["summary"]["pendingTransfers"] == []

    def test_complete_unknown_transfer_returns_404(self, client):
        response = post_action(client, action="complete_transfer", transferId="nope")
        assert response.status_code == 404
        assert response.json() == {"error": "Transfer not found"}

    def test_reset(self, client, settings):
        post_action(client, action="cash_income", amountUsd=10)

        response = post_action(client, action="reset")
        assert response.status_code == 200
        assert response.json()["result"]["message"] == "Ledger reset to initial state"
        assert response.json()["summary"]["recentEntries"] == []

    def test_reset_forbidden_in_production(self, client, settings, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        post_action(client, action="cash_income", amountUsd=10)

        response = post_action(client, action="resetLedger")
        assert response.status_code == 403
        assert response.json() == {"error": "Reset only available in development"}
