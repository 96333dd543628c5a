"""
Integration tests for the Bank Simulator API
Tests end-to-end workflows using FastAPI TestClient
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from banksim.api import create_app
from banksim.api.dependencies import set_bank
from banksim.bank import Bank
from banksim.seed import build_demo_bank


@pytest.fixture
def bank():
    return Bank("API Bank", Decimal('1000000'))


@pytest.fixture
def client(bank):
    """Create a test client serving a fresh bank"""
    previous = set_bank(bank)
    yield TestClient(create_app())
    set_bank(previous)


def add_client(client, name, deposit=None, account_type="checking"):
    client_id = client.post("/clients", json={"name": name}).json()["client_id"]
    if deposit is not None:
        r = client.post(f"/clients/{client_id}/accounts",
                        json={"initial_deposit": deposit, "account_type": account_type})
        assert r.status_code == 201
    return client_id


class TestHealthEndpoints:
    """Test basic health endpoint"""

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"


class TestClientFlow:
    """End-to-end client management tests"""

    def test_create_and_get_client(self, client):
        r = client.post("/clients", json={"name": "Ivan Petrov"})
        assert r.status_code == 201
        assert r.json()["client_id"] == 1

        r = client.get("/clients/1")
        assert r.status_code == 200
        data = r.json()
        assert data["name"] == "Ivan Petrov"
        assert data["balance"] == "0.00"
        assert data["accounts"] == []
        assert data["loans"] == []

    def test_empty_name_rejected(self, client):
        assert client.post("/clients", json={"name": ""}).status_code == 422

    def test_unknown_client(self, client):
        r = client.get("/clients/99")
        assert r.status_code == 404
        assert "not found" in r.json()["detail"]

    def test_open_account(self, client):
        client_id = add_client(client, "Anna")
        r = client.post(f"/clients/{client_id}/accounts",
                        json={"initial_deposit": "75000", "account_type": "savings"})
        assert r.status_code == 201
        data = r.json()
        assert data["account_number"] == "ACC1000001"
        assert data["interest_rate"] == "3.5"
        assert data["balance"] == "75000.00"

    def test_negative_deposit(self, client):
        client_id = add_client(client, "Anna")
        r = client.post(f"/clients/{client_id}/accounts", json={"initial_deposit": "-5"})
        assert r.status_code == 400

    def test_list_clients(self, client):
        add_client(client, "A", "10")
        add_client(client, "B")
        data = client.get("/clients").json()
        assert [c["name"] for c in data["clients"]] == ["A", "B"]


class TestLoanFlow:
    """Loan application through the API"""

    def test_grant_loan(self, client):
        client_id = add_client(client, "Ivan", "4000")
        r = client.post(f"/clients/{client_id}/loans",
                        json={"amount": "20000", "interest_rate": "12", "term_months": 24})
        assert r.status_code == 201
        assert r.json()["monthly_payment"] == "941.47"

        loans = client.get(f"/clients/{client_id}").json()["loans"]
        assert loans[0]["remaining_balance"] == "20000.00"

    def test_insufficient_own_funds(self, client, bank):
        client_id = add_client(client, "Ivan", "3999")
        r = client.post(f"/clients/{client_id}/loans",
                        json={"amount": "20000", "interest_rate": "12", "term_months": 24})
        assert r.status_code == 422
        assert r.json()["detail"] == "insufficient_own_funds"
        assert bank.get_client(client_id).balance == Decimal('3999')

    def test_exposure_limit(self, client):
        client_id = add_client(client, "Corp", "500000")
        r = client.post(f"/clients/{client_id}/loans",
                        json={"amount": "200000", "interest_rate": "10", "term_months": 12})
        assert r.status_code == 422
        assert r.json()["detail"] == "exceeds_exposure_limit"

    def test_invalid_term(self, client):
        client_id = add_client(client, "Ivan", "4000")
        r = client.post(f"/clients/{client_id}/loans",
                        json={"amount": "1000", "interest_rate": "12", "term_months": 0})
        assert r.status_code == 400

    @pytest.mark.parametrize("term", [1201, 300000000])
    def test_term_above_limit(self, client, bank, term):
        client_id = add_client(client, "Ivan", "4000")
        r = client.post(f"/clients/{client_id}/loans",
                        json={"amount": "1000", "interest_rate": "12", "term_months": term})
        assert r.status_code == 400
        assert "between 1 and 1200" in r.json()["detail"]
        assert bank.get_client(client_id).loans == []

    def test_unrepresentable_rate(self, client):
        client_id = add_client(client, "Ivan", "4000")
        r = client.post(f"/clients/{client_id}/loans",
                        json={"amount": "1000", "interest_rate": "1E+900", "term_months": 1200})
        assert r.status_code == 400


class TestAccountFlow:
    """Deposits and withdrawals by account number"""

    def test_deposit_and_withdraw(self, client):
        add_client(client, "Ivan", "100")
        r = client.post("/accounts/ACC1000001/deposit", json={"amount": "50"})
        assert r.status_code == 200
        assert r.json()["balance"] == "150.00"

        r = client.post("/accounts/ACC1000001/withdraw", json={"amount": "150"})
        assert r.status_code == 200
        assert r.json()["balance"] == "0.00"

        r = client.post("/accounts/ACC1000001/withdraw", json={"amount": "1"})
        assert r.status_code == 422
        assert r.json()["detail"] == "insufficient_funds"

    def test_unknown_account(self, client):
        r = client.post("/accounts/ACC1/deposit", json={"amount": "50"})
        assert r.status_code == 404


class TestTransferFlow:
    """Client-to-client transfers"""

    def test_transfer(self, client):
        sender = add_client(client, "Ivan", "100")
        receiver = add_client(client, "Anna")

        r = client.post("/transfers", json={"from_client_id": sender, "to_client_id": receiver, "amount": "100"})
        assert r.status_code == 200
        assert client.get(f"/clients/{sender}").json()["balance"] == "0.00"
        assert client.get(f"/clients/{receiver}").json()["balance"] == "100.00"

    def test_insufficient_funds(self, client):
        sender = add_client(client, "Ivan", "100")
        receiver = add_client(client, "Anna")
        r = client.post("/transfers", json={"from_client_id": sender, "to_client_id": receiver, "amount": "100.01"})
        assert r.status_code == 422
        assert r.json()["detail"] == "insufficient_funds"

    def test_same_client(self, client):
        sender = add_client(client, "Ivan", "100")
        r = client.post("/transfers", json={"from_client_id": sender, "to_client_id": sender, "amount": "1"})
        assert r.status_code == 400

    def test_zero_amount(self, client):
        sender = add_client(client, "Ivan", "100")
        receiver = add_client(client, "Anna")
        r = client.post("/transfers", json={"from_client_id": sender, "to_client_id": receiver, "amount": "0"})
        assert r.status_code == 400


class TestSimulationFlow:
    """Bank status and month processing"""

    def test_status(self, client):
        add_client(client, "Ivan", "50000")
        data = client.get("/bank/status").json()
        assert data["name"] == "API Bank"
        assert data["month"] == 0
        assert data["capital"] == "1050000.00"
        assert data["reserve_fund"] == "100000.00"
        assert data["client_count"] == 1
        assert data["total_deposits"] == "50000.00"
        assert data["total_loans"] == "0.00"

    def test_process_month_default(self, client):
        r = client.post("/bank/process-month")
        assert r.status_code == 200
        data = r.json()
        assert data["month"] == 1
        assert data["events"] == []
        assert data["status"]["capital"] == "1001000.00"

    def test_delinquency_event(self, client):
        client_id = add_client(client, "Ivan", "2400")
        client.post(f"/clients/{client_id}/loans",
                    json={"amount": "12000", "interest_rate": "0", "term_months": 12})
        sink = add_client(client, "Sink")
        client.post("/transfers", json={"from_client_id": client_id, "to_client_id": sink, "amount": "13900"})

        data = client.post("/bank/process-month", json={"months": 1}).json()

        assert len(data["events"]) == 1
        event = data["events"][0]
        assert event["event_type"] == "loan.delinquent"
        assert event["month"] == 1
        assert event["data"]["interest_rate"] == "5"

    def test_demo_year(self, client):
        set_bank(build_demo_bank())
        data = client.post("/bank/process-month", json={"months": 12}).json()
        assert data["month"] == 12
        assert [e["event_type"] for e in data["events"]] == ["loan.paid_off"]
        assert data["status"]["total_loans"] == "20000.00"

    def test_months_bounds(self, client):
        assert client.post("/bank/process-month", json={"months": 0}).status_code == 422
