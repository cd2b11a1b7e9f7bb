from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from cashminder.db.repository import InMemoryRepository
from cashminder.dependencies import get_ledger_service
from cashminder.main import app
from cashminder.models.budget import Budget
from cashminder.models.category import Category
from cashminder.models.goal import SavingsGoal
from cashminder.models.transaction import Transaction, TransactionCreate
from cashminder.utils.ledger import LedgerService

HEADERS = {"X-User-Id": "u1"}


@pytest.fixture
def client():
    categories = InMemoryRepository(Category)
    categories.save(Category(id="food", name="Food", is_income=False))
    categories.save(Category(id="salary", name="Salary", is_income=True))
    ledger = LedgerService(
        InMemoryRepository(Transaction),
        categories,
        InMemoryRepository(Budget),
        InMemoryRepository(SavingsGoal),
    )

    yesterday = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0) - timedelta(days=1)
    ledger.add_transaction("u1", TransactionCreate(amount=100, category_id="salary", date=yesterday, is_income=True))
    ledger.add_transaction("u1", TransactionCreate(amount=40, category_id="food", date=yesterday, is_income=False))

    app.dependency_overrides[get_ledger_service] = lambda: ledger
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_analytics_requires_user(client):
    assert client.get("/api/analytics").status_code == 401


def test_analytics_default_range(client):
    response = client.get("/api/analytics", headers=HEADERS)
    assert response.status_code == 200

    data = response.json()
    assert data["totalIncome"] == 100
    assert data["totalExpenses"] == 40
    assert data["netSavings"] == 60
    assert data["categoryData"][0]["category"] == "Food"
    assert len(data["monthlyData"]) == 6
    assert data["insights"][0]["type"] == "positive"


def test_analytics_named_and_custom_range(client):
    assert client.get("/api/analytics", params={"range": "yearToDate"}, headers=HEADERS).status_code == 200

    start = (datetime.now() - timedelta(days=3)).isoformat()
    end = datetime.now().isoformat()
    response = client.get("/api/analytics", params={"start": start, "end": end}, headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["totalExpenses"] == 40


def test_analytics_bad_range(client):
    response = client.get("/api/analytics", params={"range": "forever"}, headers=HEADERS)
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_TIME_RANGE"

    response = client.get("/api/analytics", params={"start": datetime.now().isoformat()}, headers=HEADERS)
    assert response.status_code == 400


def test_time_ranges(client):
    response = client.get("/api/analytics/ranges")
    assert response.status_code == 200
    assert set(response.json()) == {"last7days", "last30days", "last3months", "last6months", "yearToDate"}


def test_dashboard(client):
    response = client.get("/api/dashboard", headers=HEADERS)
    assert response.status_code == 200

    data = response.json()
    assert data["totalIncome"] == 100
    assert len(data["recentTransactions"]) == 2
    assert data["goals"] == []
