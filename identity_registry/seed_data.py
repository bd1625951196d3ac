import logging
import random
import re
import string
import sys
from faker import Faker
from sqlalchemy.orm import Session
from identity_registry.core.database import SessionLocal, connect
from identity_registry.services.user_service import UserService

logger = logging.getLogger(__name__)

MIN_AGE = 18
MAX_AGE = 60

AP_DISTRICTS = [
    "Kurnool", "Anantapur", "Kadapa", "Chittoor", "Visakhapatnam",
    "Vizianagaram", "Srikakulam", "East Godavari", "West Godavari", "Krishna",
]

TG_DISTRICTS = [
    "Hyderabad", "Warangal", "Nizamabad", "Khammam", "Karimnagar",
    "Adilabad", "Mahabubnagar", "Ranga Reddy", "Medak", "Nalgonda",
]

DISTRICTS = AP_DISTRICTS + TG_DISTRICTS


def generate_pan(rng: random.Random) -> str:
    letters = string.ascii_uppercase
    first_three = "".join(rng.choices(letters, k=3))
    fourth = "P"  # individual holder
    fifth = rng.choice(letters)
    digits = "".join(rng.choices(string.digits, k=4))
    check = rng.choice(letters)
    return f"{first_three}{fourth}{fifth}{digits}{check}"


def generate_unique(generator, existing: set) -> str:
    while True:
        value = generator()
        if value not in existing:
            existing.add(value)
            return value


def make_mobile(index: int) -> str:
    prefixes = ["9", "8", "7", "6"]
    prefix = prefixes[index % len(prefixes)]
    rest = f"{index:09d}"[-9:]
    return f"{prefix}{rest}"


def make_address(rng: random.Random, fake: Faker) -> str:
    district = rng.choice(DISTRICTS)
    state = "Andhra Pradesh" if district in AP_DISTRICTS else "Telangana"
    return f"{fake.building_number()}, {fake.street_name()}, {district}, {state}"


def build_payloads(count: int, seed: int = 42) -> list:
    rng = random.Random(seed)
    fake = Faker("en_IN")
    fake.seed_instance(seed)

    existing_pans, existing_aadhaars, existing_emails = set(), set(), set()
    payloads = []
    for i in range(1, count + 1):
        name = fake.name()
        local_part = re.sub(r"[^a-z]+", ".", name.lower()).strip(".") or "user"
        current_address = make_address(rng, fake)
        payloads.append({
            "name":              name,
            "email":             generate_unique(lambda: f"{local_part}{rng.randint(1, 9999)}@{fake.free_email_domain()}", existing_emails),
            "primary_mobile":    make_mobile(i),
            "secondary_mobile":  make_mobile(i + count) if rng.random() < 0.5 else None,
            "aadhaar_number":    generate_unique(lambda: "".join(rng.choices(string.digits, k=12)), existing_aadhaars),
            "pan_number":        generate_unique(lambda: generate_pan(rng), existing_pans),
            "date_of_birth":     fake.date_of_birth(minimum_age=MIN_AGE, maximum_age=MAX_AGE).isoformat(),
            "place_of_birth":    rng.choice(DISTRICTS),
            "current_address":   current_address,
            "permanent_address": current_address if rng.random() < 0.6 else make_address(rng, fake),
            "created_by":        "seed",
        })
    return payloads


def seed(db: Session, count: int = 25, seed: int = 42) -> list:
    created = []
    for payload in build_payloads(count, seed):
        if payload["secondary_mobile"] is None:
            payload.pop("secondary_mobile")
        created.append(UserService.create_user(db, payload))
    logger.info(f"Seeded {len(created)} users")
    return created


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    count = int(sys.argv[1]) if len(sys.argv) > 1 else 25
    connect()
    db = SessionLocal()
    try:
        seed(db, count)
    finally:
        db.close()
