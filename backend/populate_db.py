import os
import sys
import random
from datetime import date, timedelta

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from models.users import Role
from services.directory import DirectoryService

# Configuration
DEMO_USERS = 25
FIRST_NAMES = ["Rahul", "Priya", "Amit", "Sunita", "Vikram", "Anita", "Suresh", "Kavita", "Manoj", "Pooja"]
LAST_NAMES = ["Kumar", "Singh", "Yadav", "Sharma", "Mahto", "Prasad"]
CITIES = ["Patna", "Delhi", "Mumbai", "Kolkata", "Bengaluru", "Pune"]
COUNTRIES = ["UAE", "Qatar", "Saudi Arabia", "Malaysia", "Singapore"]
COMPANIES = [None, "Kumar Textiles", "Tata Steel", "Infosys", "L&T Construction", "Self"]
# End Configuration


def promote_admin(db, user_id: str):
    """Bootstraps the first admin; afterwards roles are changed through the admin API."""
    service = DirectoryService(db)
    if service.get_user(user_id) is None:
        service.upsert_user({"id": user_id})
    return service.update_user_role(user_id, Role.ADMIN.value)


def _demo_profile(rng: random.Random, n: int) -> dict:
    location = rng.choice(["village", "city", "abroad"])
    today = date.today()
    departure = None if location == "village" else today - timedelta(days=rng.randint(30, 900))
    returning = None if location == "village" else today + timedelta(days=rng.randint(-10, 120))
    return {
        "full_name": f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
        "age": rng.randint(16, 70),
        "gender": rng.choice(["male", "female", "other"]),
        "phone_number": f"9{rng.randint(100000000, 999999999)}",
        "house_number": f"H{n:03d}",
        "current_location": location,
        "current_city": rng.choice(CITIES) if location == "city" else None,
        "current_country": rng.choice(COUNTRIES) if location == "abroad" else None,
        "departure_date": departure,
        "expected_return_date": returning,
        "occupation": rng.choice(["student", "job", "business", "farming", "unemployed"]),
        "company": rng.choice(COMPANIES),
        "is_visible": rng.random() > 0.1,
        "show_phone": rng.random() > 0.5,
    }


def populate_demo_residents(db, count: int = DEMO_USERS, seed: int = 7) -> int:
    """Creates demo accounts with one resident profile each; existing accounts are skipped."""
    rng = random.Random(seed)
    service = DirectoryService(db)
    created = 0
    for n in range(1, count + 1):
        user_id = f"demo-{n}"
        if service.get_resident_by_user(user_id) is not None:
            continue
        service.upsert_user({"id": user_id, "email": f"{user_id}@example.com"})
        service.create_resident(user_id, _demo_profile(rng, n))
        created += 1
    return created


if __name__ == "__main__":
    init_db()
    session = SessionLocal()
    try:
        if len(sys.argv) > 1:
            admin = promote_admin(session, sys.argv[1])
            print(f"User {admin.id} is now admin.")
        created = populate_demo_residents(session)
        print(f"Created {created} demo residents.")
    finally:
        session.close()
