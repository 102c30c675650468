from types import SimpleNamespace
from datetime import datetime, timedelta, timezone

import pytest

from smart_budget import models
from smart_budget.services.budgets import budget_status
from smart_budget.services.expenses import apply_to_budget


def create_budget(client, headers, **body):
    payload = {"totalAmount": 1000}
    payload.update(body)
    return client.post("/api/budgets", json=payload, headers=headers)


def spend(client, headers, amount, budget_id=None, **extra):
    body = {"amount": amount, "reason": "Groceries", **extra}
    if budget_id is not None:
        body.update(trackingMode="budget", budgetId=budget_id)
    return client.post("/api/expenses", json=body, headers=headers)


def test_create_budget_without_prior_spend(client, headers, user):
    resp = create_budget(client, headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Budget created successfully"
    budget = body["budget"]
    assert budget["totalAmount"] == 1000
    assert budget["remainingAmount"] == 1000
    assert budget["userId"] == user.id
    assert budget["startDate"]
    assert budget["endDate"]


def test_default_end_date_is_thirty_days_out(client, headers, db):
    budget_id = create_budget(client, headers).json()["budget"]["id"]
    budget = db.get(models.Budget, budget_id)
    assert budget.end_date - budget.start_date == timedelta(days=30)


def test_explicit_dates_are_kept(client, headers):
    budget = create_budget(
        client, headers,
        startDate="2024-05-01T00:00:00Z", endDate="2024-05-31T00:00:00Z"
    ).json()["budget"]
    assert budget["startDate"].startswith("2024-05-01T00:00:00")
    assert budget["endDate"].startswith("2024-05-31T00:00:00")


def test_remaining_seeded_from_all_prior_expenses(client, headers):
    first = create_budget(client, headers, totalAmount=50).json()["budget"]
    spend(client, headers, 120)
    spend(client, headers, 30, budget_id=first["id"])

    budget = create_budget(client, headers, totalAmount=400).json()["budget"]
    assert budget["remainingAmount"] == 400 - 150


def test_seed_ignores_other_users(client, headers, make_user, headers_for):
    spend(client, headers_for(make_user()), 999)
    budget = create_budget(client, headers, totalAmount=100).json()["budget"]
    assert budget["remainingAmount"] == 100


@pytest.mark.parametrize("total", [0, -10])
def test_rejects_non_positive_total(client, headers, total):
    resp = create_budget(client, headers, totalAmount=total)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Budget amount must be a positive number"


def test_rejects_missing_total(client, headers):
    resp = client.post("/api/budgets", json={}, headers=headers)
    assert resp.status_code == 400


def test_budget_expense_decrements_remaining(client, headers, notifier, user):
    budget = create_budget(client, headers).json()["budget"]

    resp = spend(client, headers, 200, budget_id=budget["id"])
    assert resp.status_code == 201
    body = resp.json()
    assert body["expense"]["budgetId"] == budget["id"]
    assert body["expense"]["trackingMode"] == "budget"
    assert body["budget"]["remainingAmount"] == 800

    assert notifier.names() == ["expense_added", "budget_updated"]
    user_id, _, payload = notifier.events[1]
    assert user_id == user.id
    assert payload == {"id": budget["id"], "totalAmount": 1000, "remainingAmount": 800}
    _, _, expense_payload = notifier.events[0]
    assert set(expense_payload) == {"id", "amount", "reason", "category", "trackingMode", "date"}
    assert expense_payload["amount"] == 200


def test_overspend_scenario(client, headers):
    budget_id = create_budget(client, headers, totalAmount=1000).json()["budget"]["id"]

    assert spend(client, headers, 200, budget_id=budget_id).json()["budget"]["remainingAmount"] == 800
    resp = spend(client, headers, 900, budget_id=budget_id)
    assert resp.status_code == 201
    assert resp.json()["budget"]["remainingAmount"] == -100

    current = client.get("/api/budgets", headers=headers).json()["budget"]
    assert current["remainingAmount"] == -100

    tracked = client.get("/api/expenses", params={"trackingMode": "budget"}, headers=headers).json()["expenses"]
    assert len(tracked) == 2
    assert sum(e["amount"] for e in tracked) == 1100


def test_interleaved_decrements_are_not_lost(db, session_factory, user):
    budget = models.Budget(user_id=user.id, total_amount=100, remaining_amount=100)
    db.add(budget)
    db.commit()
    budget_id = budget.id

    first, second = session_factory(), session_factory()
    try:
        stale = first.get(models.Budget, budget_id)
        assert stale.remaining_amount == 100

        apply_to_budget(second, user.id, budget_id, 30)
        second.commit()

        # first still holds the pre-update copy when it writes
        assert stale.remaining_amount == 100
        apply_to_budget(first, user.id, budget_id, 45)
        first.commit()
    finally:
        first.close()
        second.close()

    db.expire_all()
    assert db.get(models.Budget, budget_id).remaining_amount == 100 - 30 - 45


def test_foreign_budget_is_untouched(client, headers, make_user, headers_for, notifier, db):
    owner = make_user()
    foreign = create_budget(client, headers_for(owner), totalAmount=500).json()["budget"]
    notifier.events.clear()

    resp = spend(client, headers, 75, budget_id=foreign["id"])
    assert resp.status_code == 201
    assert resp.json()["budget"] is None
    assert resp.json()["expense"]["budgetId"] == foreign["id"]

    db.expire_all()
    assert db.get(models.Budget, foreign["id"]).remaining_amount == 500
    assert notifier.names() == ["expense_added"]


def test_missing_budget_still_records_expense(client, headers, notifier):
    resp = spend(client, headers, 42, budget_id=12345)
    assert resp.status_code == 201
    assert resp.json()["budget"] is None
    assert notifier.names() == ["expense_added"]
    expenses = client.get("/api/expenses", headers=headers).json()["expenses"]
    assert [e["amount"] for e in expenses] == [42]


def test_current_budget_is_latest(client, headers):
    assert client.get("/api/budgets", headers=headers).json() == {"budget": None}

    create_budget(client, headers, totalAmount=100)
    latest = create_budget(client, headers, totalAmount=300).json()["budget"]

    current = client.get("/api/budgets", headers=headers).json()["budget"]
    assert current["id"] == latest["id"]

    history = client.get("/api/budgets/all", headers=headers).json()["budgets"]
    assert [b["totalAmount"] for b in history] == [300, 100]


def test_budget_history_is_private(client, headers, make_user, headers_for):
    create_budget(client, headers_for(make_user()))
    assert client.get("/api/budgets/all", headers=headers).json() == {"budgets": []}


def test_status_endpoint(client, headers):
    assert client.get("/api/budgets/status", headers=headers).json()["status"] == "none"

    budget_id = create_budget(client, headers, totalAmount=100).json()["budget"]["id"]
    spend(client, headers, 120, budget_id=budget_id)

    status = client.get("/api/budgets/status", headers=headers).json()
    assert status["status"] == "exceeded"
    assert status["spent"] == 120
    assert status["remainingPercentage"] == -20
    assert status["budget"]["id"] == budget_id


def _budget(total, remaining):
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return SimpleNamespace(
        id=1, user_id=1, total_amount=total, remaining_amount=remaining,
        start_date=now, end_date=now + timedelta(days=30), created_at=now,
    )


@pytest.mark.parametrize("remaining, expected", [
    (1000, "ok"),
    (100, "ok"),
    (99, "warning"),
    (1, "warning"),
    (0, "ok"),
    (-1, "exceeded"),
])
def test_status_thresholds(remaining, expected):
    assert budget_status(_budget(1000, remaining)).status == expected


def test_budgets_require_token(client):
    assert client.get("/api/budgets").status_code == 401
    assert client.get("/api/budgets/all").status_code == 401
    assert client.post("/api/budgets", json={"totalAmount": 5}).status_code == 401
