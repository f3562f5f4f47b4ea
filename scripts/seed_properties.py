"""
scripts/seed_properties.py

Fill the directory with synthetic properties scattered around a few US
city centers:

    python -m scripts.seed_properties --count 500 --seed 42

Uses DATABASE_URL from the environment / .env like the API does.
"""

import argparse
import random
import sys
import os

# Make sure app is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import settings
from app.core.database import RecordStore
from app.models.property import OwnerSex
from app.schemas.property import PropertyCreate
from app.services.property_store import create_property


# (city, state, zip prefix, longitude, latitude)
CITY_CENTERS = [
    ("San Francisco", "CA", "941", -122.4194, 37.7749),
    ("Oakland", "CA", "946", -122.2711, 37.8044),
    ("Los Angeles", "CA", "900", -118.2437, 34.0522),
    ("New York", "NY", "100", -74.0060, 40.7128),
    ("Chicago", "IL", "606", -87.6298, 41.8781),
    ("Austin", "TX", "787", -97.7431, 30.2672),
    ("Seattle", "WA", "981", -122.3321, 47.6062),
    ("Miami", "FL", "331", -80.1918, 25.7617),
]

FIRST_NAMES = ["James", "Maria", "Wei", "Aisha", "Carlos", "Priya", "John", "Elena", "Kofi", "Sara"]
LAST_NAMES = ["Smith", "Garcia", "Chen", "Khan", "Johnson", "Patel", "Brown", "Rossi", "Mensah", "Kim"]
STREETS = ["Main St", "Oak Ave", "Pine Rd", "Maple Dr", "Cedar Ln", "Elm St", "Lake Blvd", "Hill Way"]
OCCUPATIONS = ["Engineer", "Doctor", "Teacher", "Lawyer", "Entrepreneur", "Designer", "Nurse", "Investor"]
PROPERTY_KINDS = ["Villa", "Residence", "Apartments", "Estate", "Townhouse", "Lofts"]


def build_property(rng: random.Random) -> PropertyCreate:
    city, state, zip_prefix, lng, lat = rng.choice(CITY_CENTERS)
    first, last = rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)
    monthly_income = round(rng.uniform(1500, 60000), 2)

    return PropertyCreate(
        name=f"{rng.choice(LAST_NAMES)} {rng.choice(PROPERTY_KINDS)}",
        address={
            "street": f"{rng.randint(1, 9999)} {rng.choice(STREETS)}",
            "city": city,
            "state": state,
            "zip_code": f"{zip_prefix}{rng.randint(0, 99):02d}",
        },
        # Roughly a 25 km scatter around the city center
        location={
            "longitude": round(lng + rng.uniform(-0.25, 0.25), 6),
            "latitude": round(lat + rng.uniform(-0.2, 0.2), 6),
        },
        owner_details={
            "owner_name": f"{first} {last}",
            "age": rng.randint(21, 90),
            "sex": rng.choice(list(OwnerSex)),
            "email": f"{first.lower()}.{last.lower()}{rng.randint(1, 999)}@example.com",
            "mobile_number": f"+1{rng.randint(2000000000, 9999999999)}",
            "occupation": rng.choice(OCCUPATIONS),
            "monthly_income": monthly_income,
            "total_wealth": round(monthly_income * rng.uniform(12, 240), 2),
        },
    )


def seed(count: int, seed_value=None) -> int:
    rng = random.Random(seed_value)
    store = RecordStore(settings.DATABASE_URL, spatialite_path=settings.SPATIALITE_LIBRARY_PATH).open()
    created = 0
    try:
        with store.session() as db:
            for _ in range(count):
                create_property(db, build_property(rng))
                created += 1
    finally:
        store.close()
    return created


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed synthetic properties")
    parser.add_argument("--count", type=int, default=100)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    if args.count < 1:
        print("❌ --count must be at least 1.")
        sys.exit(1)

    print(f"\n── Seeding {args.count} properties ───────────────")
    try:
        created = seed(args.count, args.seed)
    except Exception as e:
        print(f"❌ Failed: {e}")
        sys.exit(1)

    print(f"✅ Created {created} properties in {settings.DATABASE_URL}\n")


if __name__ == "__main__":
    main()
