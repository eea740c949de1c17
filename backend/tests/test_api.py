from datetime import date, datetime, timedelta

from jose import jwt

from conftest import make_user, make_resident, auth_headers
from models.log import Log
from models.session import AuthSession
from models.users import User

NEW_PROFILE = {
    "full_name": "Test Person",
    "age": 30,
    "gender": "male",
    "phone_number": "555",
    "house_number": "H1",
    "current_location": "village",
    "occupation": "farming",
}


def _assertion(claims, secret="test-idp-secret"):
    return jwt.encode(claims, secret, algorithm="HS256")


# ---------- authentication ----------

def test_protected_routes_require_token(client, db):
    for path in ["/residents", "/residents/me", "/analytics/stats", "/admin/users", "/export/residents", "/me"]:
        res = client.get(path)
        assert res.status_code == 401, path
        assert res.headers["WWW-Authenticate"] == "Bearer"


def test_garbage_token_is_rejected(client):
    res = client.get("/residents", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


def test_login_upserts_user_and_opens_session(client, db):
    token = _assertion({"sub": "u7", "email": "u7@example.com", "first_name": "Usha"})

    res = client.post("/login", json={"id_token": token})

    assert res.status_code == 200
    access = res.json()["access_token"]
    me = client.get("/me", headers={"Authorization": f"Bearer {access}"})
    assert me.status_code == 200
    assert me.json()["id"] == "u7"
    assert me.json()["role"] == "user"
    assert db.query(AuthSession).count() == 1
    assert db.query(Log).filter(Log.action == "LOGIN", Log.status == "SUCCESS").count() == 1


def test_login_keeps_existing_role(client, db):
    make_user(db, "u7", role="admin")

    res = client.post("/login", json={"id_token": _assertion({"sub": "u7", "first_name": "New"})})

    assert res.status_code == 200
    user = db.query(User).filter(User.id == "u7").first()
    db.refresh(user)
    assert user.role == "admin"
    assert user.first_name == "New"


def test_login_with_forged_assertion(client, db):
    res = client.post("/login", json={"id_token": _assertion({"sub": "u7"}, secret="wrong")})

    assert res.status_code == 401
    assert db.query(User).count() == 0
    assert db.query(Log).filter(Log.action == "LOGIN", Log.status == "FAIL").count() == 1


def test_logout_ends_session(client, db, alice):
    headers = auth_headers(db, alice)

    assert client.post("/logout", headers=headers).status_code == 204
    assert client.get("/me", headers=headers).status_code == 401


def test_expired_session_is_rejected(client, db, alice):
    headers = auth_headers(db, alice)
    session = db.query(AuthSession).first()
    session.expire = datetime.utcnow() - timedelta(minutes=1)
    db.commit()

    assert client.get("/me", headers=headers).status_code == 401


def test_role_is_read_fresh_on_every_request(client, db, alice):
    headers = auth_headers(db, alice)
    assert client.get("/admin/users", headers=headers).status_code == 403

    alice.role = "admin"
    db.commit()

    assert client.get("/admin/users", headers=headers).status_code == 200


# ---------- residents ----------

def test_create_and_fetch_own_profile(client, db, alice):
    headers = auth_headers(db, alice)
    assert client.get("/residents/me", headers=headers).json() is None

    res = client.post("/residents", json={**NEW_PROFILE, "user_id": "someone-else"}, headers=headers)

    assert res.status_code == 201
    body = res.json()
    assert body["user_id"] == "u1"
    assert body["show_phone"] is False and body["is_visible"] is True

    mine = client.get("/residents/me", headers=headers).json()
    assert mine["id"] == body["id"]
    assert mine["user"]["id"] == "u1"


def test_create_validation_error(client, db, alice):
    res = client.post("/residents", json={**NEW_PROFILE, "age": 0, "gender": "x"}, headers=auth_headers(db, alice))

    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation error"
    assert {tuple(e["loc"][-1:]) for e in body["errors"]} == {("age",), ("gender",)}


def test_duplicate_profile_is_rejected(client, db, alice):
    headers = auth_headers(db, alice)
    assert client.post("/residents", json=NEW_PROFILE, headers=headers).status_code == 201
    assert client.post("/residents", json=NEW_PROFILE, headers=headers).status_code == 400
    failed = db.query(Log).filter(Log.action == "RESIDENT_CREATE", Log.status == "FAIL").all()
    assert len(failed) == 1
    assert failed[0].user_id == alice.id


def test_list_with_filters(client, db, alice):
    make_resident(db, "r1", full_name="Rahul Kumar", current_location="city")
    make_resident(db, "r2", full_name="Kumar Village", current_location="village")
    make_resident(db, "r3", full_name="Hidden Kumar", current_location="city", is_visible=False)
    make_resident(db, "r4", full_name="Long Gone", current_location="abroad",
                  departure_date=date.today() - timedelta(days=400))
    make_resident(db, "r5", full_name="Back Soon", current_location="city",
                  expected_return_date=date.today())
    headers = auth_headers(db, alice)

    everyone = client.get("/residents", headers=headers).json()
    city_kumar = client.get("/residents", params={"search": "kumar", "location": "city"}, headers=headers).json()
    away = client.get("/residents", params={"away_long": "true"}, headers=headers).json()
    returning = client.get("/residents", params={"returning": "true"}, headers=headers).json()

    assert len(everyone) == 4
    assert [r["full_name"] for r in city_kumar] == ["Rahul Kumar"]
    assert [r["full_name"] for r in away] == ["Long Gone"]
    assert [r["full_name"] for r in returning] == ["Back Soon"]


def test_list_rejects_unknown_location(client, db, alice):
    res = client.get("/residents", params={"location": "moon"}, headers=auth_headers(db, alice))
    assert res.status_code == 400
    assert res.json()["errors"][0]["loc"] == ["location"]


def test_get_resident_by_id(client, db, alice):
    hidden = make_resident(db, "u2", is_visible=False)
    headers = auth_headers(db, alice)

    assert client.get(f"/residents/{hidden.id}", headers=headers).status_code == 200
    assert client.get("/residents/999", headers=headers).status_code == 404


def test_update_requires_owner_or_admin(client, db, alice, bob, admin):
    resident = make_resident(db, "u2", age=40)

    res = client.put(f"/residents/{resident.id}", json={"age": 41}, headers=auth_headers(db, alice))
    assert res.status_code == 403

    res = client.put(f"/residents/{resident.id}", json={"age": 42}, headers=auth_headers(db, bob))
    assert res.status_code == 200
    assert res.json()["age"] == 42
    assert res.json()["full_name"] == "Test Person"

    res = client.put(f"/residents/{resident.id}", json={"age": 43}, headers=auth_headers(db, admin))
    assert res.status_code == 200
    assert db.query(Log).filter(Log.action == "RESIDENT_UPDATE", Log.status == "FAIL").count() == 1


def test_delete_resident(client, db, alice, bob):
    resident = make_resident(db, "u2")

    assert client.delete(f"/residents/{resident.id}", headers=auth_headers(db, alice)).status_code == 403
    assert client.delete(f"/residents/{resident.id}", headers=auth_headers(db, bob)).status_code == 204
    assert client.delete(f"/residents/{resident.id}", headers=auth_headers(db, bob)).status_code == 404


# ---------- analytics ----------

def test_analytics_endpoints(client, db, alice):
    make_resident(db, "r1", current_location="village", occupation="farming")
    make_resident(db, "r2", current_location="abroad", occupation="job")
    make_resident(db, "r3", current_location="abroad", occupation="job")
    make_resident(db, "r4", current_location="city", occupation="job", is_visible=False)
    headers = auth_headers(db, alice)

    totals = client.get("/analytics/stats", headers=headers).json()
    locations = client.get("/analytics/location", headers=headers).json()
    occupations = client.get("/analytics/occupation", headers=headers).json()

    assert totals == {"total": 3, "in_village": 1, "in_city": 0, "abroad": 2}
    assert locations == [{"location": "village", "count": 1}, {"location": "abroad", "count": 2}]
    assert occupations == [{"occupation": "job", "count": 2}, {"occupation": "farming", "count": 1}]


# ---------- admin ----------

def test_admin_routes_forbidden_for_users(client, db, alice, bob):
    headers = auth_headers(db, alice)
    assert client.get("/admin/users", headers=headers).status_code == 403
    assert client.put("/admin/users/u2/role", json={"role": "admin"}, headers=headers).status_code == 403
    assert client.delete("/admin/users/u2", headers=headers).status_code == 403
    assert client.get("/export/residents", headers=headers).status_code == 403
    assert client.get("/logs", headers=headers).status_code == 403


def test_admin_lists_users_with_resident(client, db, admin, alice):
    make_resident(db, "u1", full_name="Alice")

    users = client.get("/admin/users", headers=auth_headers(db, admin)).json()

    by_id = {u["id"]: u for u in users}
    assert by_id["u1"]["resident"]["full_name"] == "Alice"
    assert by_id["admin-1"]["resident"] is None


def test_admin_changes_role(client, db, admin, alice):
    headers = auth_headers(db, admin)

    bad = client.put("/admin/users/u1/role", json={"role": "owner"}, headers=headers)
    assert bad.status_code == 400

    missing = client.put("/admin/users/ghost/role", json={"role": "admin"}, headers=headers)
    assert missing.status_code == 404

    ok = client.put("/admin/users/u1/role", json={"role": "admin"}, headers=headers)
    assert ok.status_code == 200
    assert ok.json()["role"] == "admin"


def test_admin_deletes_user(client, db, admin, alice):
    make_resident(db, "u1")
    headers = auth_headers(db, admin)

    assert client.delete("/admin/users/admin-1", headers=headers).status_code == 400
    assert client.delete("/admin/users/u1", headers=headers).status_code == 204
    assert client.delete("/admin/users/u1", headers=headers).status_code == 404


def test_export_csv(client, db, admin):
    make_resident(db, "u1", full_name="Hidden One", is_visible=False)

    res = client.get("/export/residents", headers=auth_headers(db, admin))

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert res.headers["content-disposition"] == 'attachment; filename="village_residents.csv"'
    lines = res.text.split("\n")
    assert lines[0].startswith("Name,Age,Gender,Phone")
    assert lines[1].startswith('"Hidden One",30,male')


def test_admin_reads_audit_log(client, db, admin, alice):
    resident = make_resident(db, "u1")
    client.delete(f"/residents/{resident.id}", headers=auth_headers(db, alice))

    page = client.get("/logs", params={"action": "RESIDENT_DELETE"}, headers=auth_headers(db, admin)).json()

    assert page["total"] == 1
    assert page["items"][0]["user_id"] == "u1"
    assert page["items"][0]["meta"] == {"resident_id": resident.id}


def test_audit_log_rejects_bad_date(client, db, admin):
    res = client.get("/logs", params={"date_from": "yesterday"}, headers=auth_headers(db, admin))
    assert res.status_code == 400
