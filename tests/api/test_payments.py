"""
Tests for payment receipt API endpoints.
"""


class TestManualPayment:

    def test_returns_201(self, client):
        response = client.post("/payments/manual", json={
            "amountUsd": 1250.5,
            "method": "ach",
            "clientName": "Acme",
            "clientEmail": "ap@acme.test",
        })
        assert response.status_code == 201

        receipt = response.json()["receipt"]
        assert receipt["status"] == "RECEIVED"
        assert receipt["method"] == "ACH"
        assert receipt["amountCents"] == 125050
        assert receipt["amountUsd"] == 1250.5
        assert receipt["description"] == "ACH payment - $1250.50"
        assert receipt["transfers"] == []

    def test_over_maximum_returns_400(self, client):
        response = client.post("/payments/manual", json={
            "amountUsd": 2_000_000, "method": "wire",
        })
        assert response.status_code == 400
        assert response.json() == {"error": "Maximum amount is $1,000,000"}

    def test_requires_admin(self, anon_client):
        response = anon_client.post("/payments/manual", json={
            "amountUsd": 10, "method": "cash",
        })
        assert response.status_code == 401


class TestListPayments:

    def test_list_with_summary(self, client):
        client.post("/payments/manual", json={"amountUsd": 100, "method": "cash"})
        client.post("/payments/manual", json={"amountUsd": 40, "method": "check"})

        data = client.get("/payments").json()
        assert data["count"] == 2
        assert data["summary"]["totalReceivedCents"] == 14000
        assert data["summary"]["byMethod"]["CASH"] == {"count": 1, "amountCents": 10000}

    def test_filter_by_method(self, client):
        client.post("/payments/manual", json={"amountUsd": 100, "method": "cash"})
        client.post("/payments/manual", json={"amountUsd": 40, "method": "check"})

        data = client.get("/payments", params={"method": "check"}).json()
        assert [r["method"] for r in data["receipts"]] == ["CHECK"]

    def test_bad_date_returns_400(self, client):
        response = client.get("/payments", params={"startDate": "yesterday"})
        assert response.status_code == 400
        assert "error" in response.json()
