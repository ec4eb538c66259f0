"""
Deterministic sample listings.

Serves the in-memory catalog backend and the database seed script.

- Deterministic: fixed seed, private Random instance, same dataset every run
- Realism-lite: prices correlated with year and make band, mileage with age
- Arbitrage score derived from the discount against market value
"""

from __future__ import annotations

import random
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from carbitrage.domain.vehicle import Condition, Location, Vehicle

RANDOM_SEED = 42
NUM_VEHICLES = 60
CURRENT_YEAR = 2025
LISTING_WINDOW_START = datetime(2025, 1, 1, tzinfo=timezone.utc)

# Make bands with base prices (USD)
MAKES = {
    "economy": {
        "makes": ["Nissan", "Chevrolet", "Kia", "Hyundai"],
        "base_price_min": Decimal("18000"),
        "base_price_max": Decimal("28000"),
    },
    "mid_range": {
        "makes": ["Toyota", "Honda", "Mazda", "Ford", "Subaru"],
        "base_price_min": Decimal("25000"),
        "base_price_max": Decimal("45000"),
    },
    "premium": {
        "makes": ["BMW", "Mercedes-Benz", "Audi", "Tesla", "Lexus"],
        "base_price_min": Decimal("42000"),
        "base_price_max": Decimal("80000"),
    },
}

# (model, body type) by make
MODELS_BY_MAKE = {
    "Nissan": [("Altima", "Sedan"), ("Rogue", "SUV"), ("Frontier", "Truck")],
    "Chevrolet": [("Malibu", "Sedan"), ("Equinox", "SUV"), ("Silverado", "Truck")],
    "Kia": [("Forte", "Sedan"), ("Sportage", "SUV"), ("Soul", "Hatchback")],
    "Hyundai": [("Elantra", "Sedan"), ("Tucson", "SUV"), ("Kona", "SUV")],
    "Toyota": [("Camry", "Sedan"), ("Corolla", "Sedan"), ("RAV4", "SUV"), ("Tacoma", "Truck")],
    "Honda": [("Accord", "Sedan"), ("Civic", "Sedan"), ("CR-V", "SUV")],
    "Mazda": [("Mazda3", "Hatchback"), ("CX-5", "SUV"), ("MX-5 Miata", "Convertible")],
    "Ford": [("F-150", "Truck"), ("Escape", "SUV"), ("Mustang", "Coupe")],
    "Subaru": [("Outback", "Wagon"), ("Forester", "SUV"), ("Impreza", "Sedan")],
    "BMW": [("3 Series", "Sedan"), ("X3", "SUV"), ("X5", "SUV")],
    "Mercedes-Benz": [("C-Class", "Sedan"), ("GLC", "SUV"), ("E-Class", "Sedan")],
    "Audi": [("A4", "Sedan"), ("Q5", "SUV"), ("Q7", "SUV")],
    "Tesla": [("Model 3", "Sedan"), ("Model Y", "SUV")],
    "Lexus": [("ES", "Sedan"), ("RX", "SUV"), ("NX", "SUV")],
}

TRANSMISSIONS = ["Automatic", "Manual", "CVT"]
FUEL_TYPES = ["Gasoline", "Hybrid", "Diesel", "Electric"]
DRIVETRAINS = ["FWD", "RWD", "AWD", "4WD"]
COLORS = ["Black", "White", "Silver", "Gray", "Blue", "Red"]
FEATURES = [
    "Backup Camera",
    "Bluetooth",
    "Heated Seats",
    "Sunroof",
    "Navigation",
    "Apple CarPlay",
    "Blind Spot Monitor",
    "Adaptive Cruise Control",
]

LOCATIONS = [
    ("Austin", "TX", "78701"),
    ("Dallas", "TX", "75201"),
    ("Houston", "TX", "77002"),
    ("Phoenix", "AZ", "85004"),
    ("Denver", "CO", "80202"),
    ("Atlanta", "GA", "30303"),
    ("Miami", "FL", "33130"),
    ("Orlando", "FL", "32801"),
    ("Seattle", "WA", "98101"),
    ("San Diego", "CA", "92101"),
    ("Los Angeles", "CA", "90012"),
    ("Chicago", "IL", "60602"),
]

VIN_ALPHABET = "ABCDEFGHJKLMNPRSTUVWXYZ0123456789"


def calculate_market_value(rng: random.Random, make: str, year: int) -> Decimal:
    """
    Market value from make band and age.

    - Newer vehicles are worth more
    - Depreciation ~10% per year, capped at 70%
    - Rounded to the nearest 100
    """
    band = next(
        (data for data in MAKES.values() if make in data["makes"]),
        MAKES["mid_range"],
    )
    base_price = Decimal(rng.randint(int(band["base_price_min"]), int(band["base_price_max"])))

    years_old = max(0, CURRENT_YEAR - year)
    depreciation = min(Decimal("0.10") * years_old, Decimal("0.70"))
    value = base_price * (Decimal("1") - depreciation)

    return max((value / 100).quantize(Decimal("1")) * 100, Decimal("5000"))


def _arbitrage_score(price: Decimal, market_value: Decimal) -> int:
    """0-100; 50 at market value, +5 per percent below it."""
    discount_pct = (market_value - price) / market_value * Decimal("100")
    score = Decimal("50") + discount_pct * Decimal("5")
    return int(max(Decimal("0"), min(Decimal("100"), score)).quantize(Decimal("1")))


def _vin(rng: random.Random) -> str:
    return "".join(rng.choice(VIN_ALPHABET) for _ in range(17))


def generate_vehicle(rng: random.Random) -> Vehicle:
    """Generate a single listing with realistic-looking data."""
    category = rng.choice(list(MAKES.keys()))
    make = rng.choice(MAKES[category]["makes"])
    model, body_type = rng.choice(MODELS_BY_MAKE[make])

    # 2016-2025, weighted toward newer
    year = rng.choices(range(2016, 2026), weights=[1, 1, 2, 2, 3, 3, 4, 5, 6, 7], k=1)[0]
    years_old = CURRENT_YEAR - year

    if years_old == 0:
        condition = Condition.NEW
        mileage = rng.randint(0, 50)
    else:
        condition = Condition.CERTIFIED if rng.random() < 0.3 else Condition.USED
        mileage = rng.randint(2000, max(3000, years_old * 12000 + rng.randint(0, 10000)))

    if make == "Tesla":
        fuel_type = "Electric"
        transmission = "Automatic"
    else:
        fuel_type = rng.choices(FUEL_TYPES, weights=[8, 3, 1, 1], k=1)[0]
        transmission = rng.choices(TRANSMISSIONS, weights=[7, 1, 2], k=1)[0]

    market_value = calculate_market_value(rng, make, year)
    # Asking price within -15%..+10% of market value, rounded to 100
    ratio = Decimal(str(round(rng.uniform(0.85, 1.10), 3)))
    price = (market_value * ratio / 100).quantize(Decimal("1")) * 100
    original_price = price + Decimal(rng.choice([0, 0, 500, 1000, 2500]))

    city, state, zip_code = rng.choice(LOCATIONS)
    created_at = LISTING_WINDOW_START + timedelta(minutes=rng.randint(0, 60 * 24 * 180))

    return Vehicle(
        id=str(uuid.UUID(int=rng.getrandbits(128), version=4)),
        make=make,
        model=model,
        year=year,
        price=price,
        mileage=mileage,
        condition=condition,
        body_type=body_type,
        fuel_type=fuel_type,
        transmission=transmission,
        location=Location(city=city, state=state, zip_code=zip_code),
        arbitrage_score=_arbitrage_score(price, market_value),
        description=f"{year} {make} {model} in {rng.choice(COLORS).lower()}, {condition.value}.",
        drivetrain=rng.choice(DRIVETRAINS),
        exterior_color=rng.choice(COLORS),
        interior_color=rng.choice(["Black", "Gray", "Beige"]),
        engine="Electric Motor" if fuel_type == "Electric" else f"{rng.choice(['1.5L', '2.0L', '2.5L', '3.5L'])} I4",
        vin=_vin(rng),
        images=(f"https://images.carbitrage.dev/{make.lower()}-{model.lower().replace(' ', '-')}.jpg",),
        features=tuple(sorted(rng.sample(FEATURES, k=rng.randint(2, 5)))),
        original_price=original_price if original_price > price else None,
        market_value=market_value,
        created_at=created_at,
    )


def generate_vehicles(count: int = NUM_VEHICLES, seed: int = RANDOM_SEED) -> list[Vehicle]:
    rng = random.Random(seed)
    return [generate_vehicle(rng) for _ in range(count)]
