import pytest
from fastapi.testclient import TestClient

from db import Store
from main import create_app


@pytest.fixture
def store():
    store = Store(":memory:")
    yield store
    store.close()


@pytest.fixture
def client(store):
    return TestClient(create_app(store))


@pytest.fixture
def post_ruleset(client):
    def _post(**overrides):
        body = {
            "startDate": "2024-01-01",
            "endDate": "2024-12-31",
            "budget": 100,
            "redemptionLimit": 5,
            "minTransactions": 0,
            "amount": 10,
        }
        body.update(overrides)
        response = client.post("/ruleset", json=body)
        assert response.status_code == 200, response.json()
        return response.json()["ruleSet"]
    return _post


@pytest.fixture
def post_transaction(client):
    def _post(tx_id, customer_id, date="2024-06-01", **extra):
        body = {"id": tx_id, "customerId": customer_id, "date": date, **extra}
        return client.post("/transaction", json=body)
    return _post
