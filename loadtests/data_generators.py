"""Faker-based payloads for the storefront load test journeys.

Product ids match the demo catalog inserted by ``storefront-manage seed-catalog``.
"""

import random
import uuid

from faker import Faker

fake = Faker("en_IN")

DEMO_TEE = "demo-tee"
DEMO_TEE_VARIANTS = ("demo-tee-m", "demo-tee-l")
DEMO_TEE_COLORS = ("Navy", "White", None)
DEMO_HONEY = "demo-honey"


def user_id() -> str:
    return f"lt-{uuid.uuid4().hex[:12]}"


def tee_line() -> dict:
    return {
        "productId": DEMO_TEE,
        "variantId": random.choice(DEMO_TEE_VARIANTS),
        "colorKey": random.choice(DEMO_TEE_COLORS),
        "qty": random.randint(1, 2),
    }


def honey_line() -> dict:
    return {"productId": DEMO_HONEY, "qty": random.randint(1, 3)}


def phone() -> str:
    return f"9{random.randint(100000000, 999999999)}"


def address_data() -> dict:
    """AddressRequest payload; every required field is non-blank."""
    return {
        "fullName": fake.name()[:100],
        "phone": phone(),
        "pincode": fake.postcode()[:12],
        "state": fake.state()[:100],
        "city": fake.city()[:100],
        "addressLine1": fake.street_address()[:255],
        "landmark": random.choice([None, "Near the metro station", "Opposite the park"]),
    }


def contact_data() -> dict:
    return {"name": fake.name()[:100], "phone": phone(), "email": fake.email()}
