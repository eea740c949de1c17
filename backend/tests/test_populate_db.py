from conftest import make_user
from models.resident import Resident
from populate_db import promote_admin, populate_demo_residents


def test_promote_existing_user(db):
    make_user(db, "u1")
    assert promote_admin(db, "u1").role == "admin"


def test_promote_unknown_user_creates_account(db):
    user = promote_admin(db, "boss")
    assert user.id == "boss"
    assert user.role == "admin"


def test_populate_is_repeatable(db):
    assert populate_demo_residents(db, count=5) == 5
    assert populate_demo_residents(db, count=5) == 0
    assert db.query(Resident).count() == 5
