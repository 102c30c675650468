from smart_budget.auth import verify_password
from smart_budget.scripts.seed_admin import seed_admin


def test_seed_admin_creates_admin(db):
    admin = seed_admin(db, "admin@smartexpense.com", "admin123")
    assert admin.role == "admin"
    assert admin.name == "Admin User"
    assert verify_password("admin123", admin.password_hash)


def test_seed_admin_is_idempotent(db):
    first = seed_admin(db, "admin@smartexpense.com", "admin123")
    second = seed_admin(db, "admin@smartexpense.com", "other-password")
    assert first.id == second.id
    assert verify_password("admin123", second.password_hash)


def test_seeded_admin_can_read_analytics(client, db):
    seed_admin(db, "admin@smartexpense.com", "admin123")
    login = client.post("/api/auth/login", json={"email": "admin@smartexpense.com", "password": "admin123"})
    token = login.json()["token"]

    resp = client.get("/api/admin/analytics", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["totalUsers"] == 1
    assert resp.json()["activeUsers7Days"] == 1
