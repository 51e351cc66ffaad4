import pytest
from fastapi.testclient import TestClient

from courtbook.constants import Role
from courtbook.main import create_app

ALICE = {"X-Identity-Id": "alice", "X-Identity-Email": "alice@example.com"}
BOB = {"X-Identity-Id": "bob"}
ROOT = {"X-Identity-Id": "root"}


@pytest.fixture
def client(ctx):
    ctx.roles.assign_role("root", Role.ADMIN)
    with TestClient(create_app(context=ctx)) as c:
        yield c


def _book(client, headers, slots, method="on_site"):
    return client.post(
        "/reservations",
        json={"date": "2025-06-01", "slots": slots, "payment_method": method},
        headers=headers,
    )


def test_health_is_public(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "change_feed": "local"}


def test_identity_required(client):
    assert client.get("/slots/day", params={"date": "2025-06-01"}).status_code == 401
    assert client.get("/me").status_code == 401


def test_me_reports_role(client):
    assert client.get("/me", headers=ALICE).json()["role"] == "customer"
    assert client.get("/me", headers=ROOT).json()["role"] == "admin"


def test_day_slots(client):
    _book(client, BOB, ["09:00"])

    response = client.get("/slots/day", params={"date": "2025-06-01"}, headers=ALICE)

    assert response.status_code == 200
    body = response.json()
    assert len(body["slots"]) == 28
    assert body["free_count"] == 27
    assert body["slot_step_minutes"] == 30
    assert body["slots"][2] == {"time": "09:00", "ends_at": "09:30", "state": "held_by_other"}


def test_quote(client):
    response = client.post("/reservations/quote", json={"slots": ["09:00", "09:30"]}, headers=ALICE)

    assert response.status_code == 200
    body = response.json()
    assert body["blocks"] == 2
    assert body["total"] == "135.00"
    assert body["currency"] == "BRL"


def test_commit_and_conflict(client):
    response = _book(client, ALICE, ["09:00", "09:30"], method="card_simulated")

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Reservation confirmed! Payment (card_simulated) paid."
    assert body["payment_status"] == "paid"
    assert body["total"] == "135.00"
    assert [r["slot"] for r in body["reservations"]] == ["09:00", "09:30"]
    assert body["reservations"][0]["created_at"].endswith(("Z", "+00:00"))

    conflict = _book(client, BOB, ["09:30", "10:00"])

    assert conflict.status_code == 409
    detail = conflict.json()["detail"]
    assert detail["code"] == "slot_conflict"
    assert detail["details"] == {"slots": ["09:30"]}

    mine = client.get("/reservations/mine", params={"date": "2025-06-01"}, headers=BOB)
    assert mine.json() == []


def test_invalid_selection(client):
    response = _book(client, ALICE, [])

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_request"


def test_cancel_flow(client):
    [reservation] = _book(client, ALICE, ["12:00"]).json()["reservations"]
    path = f"/reservations/{reservation['id']}"

    forbidden = client.delete(path, headers=BOB)
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"]["code"] == "unauthorized"

    ok = client.delete(path, headers=ALICE)
    assert ok.status_code == 200
    assert ok.json()["message"] == "Reservation cancelled."

    gone = client.delete(path, headers=ALICE)
    assert gone.status_code == 404


def test_admin_cancels_any(client):
    [reservation] = _book(client, ALICE, ["13:00"]).json()["reservations"]

    response = client.delete(f"/reservations/{reservation['id']}", headers=ROOT)

    assert response.status_code == 200


def test_admin_views(client):
    _book(client, ALICE, ["09:00"], method="card_simulated")
    _book(client, BOB, ["10:00"])

    assert client.get("/admin/revenue", params={"date": "2025-06-01"}, headers=ALICE).status_code == 403

    revenue = client.get("/admin/revenue", params={"date": "2025-06-01"}, headers=ROOT).json()
    assert revenue["paid_total"] == "67.50"
    assert revenue["pending_total"] == "67.50"
    assert revenue["paid_count"] == 1

    day = client.get("/admin/reservations", params={"date": "2025-06-01"}, headers=ROOT).json()
    assert day["kind"] == "admin"
    assert [r["owner_id"] for r in day["reservations"]] == ["alice", "bob"]


def test_user_roles_admin_only(client):
    assert client.get("/user_roles/", headers=ALICE).status_code == 403

    response = client.put("/user_roles/bob", json={"role": "admin"}, headers=ROOT)
    assert response.status_code == 200
    assert response.json()["role"] == "admin"

    assert client.get("/me", headers=BOB).json()["role"] == "admin"
    ids = [a["identity_id"] for a in client.get("/user_roles/", headers=ROOT).json()]
    assert ids == ["bob", "root"]
