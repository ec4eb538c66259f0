#!/usr/bin/env python3
"""
Seed the vehicles table with the deterministic sample listings.

Features:
- Deterministic: same dataset as the in-memory backend (fixed seed)
- Idempotent: safe to run multiple times (clears before seeding)

Usage:
    DATABASE_URL=postgresql://... python scripts/seed_vehicles.py
"""

from __future__ import annotations

import sys
from pathlib import Path
from uuid import UUID

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from carbitrage.domain.vehicle import Vehicle
from carbitrage.infra.db.models.vehicle import VehicleRow
from carbitrage.infra.db.session import get_session
from carbitrage.infra.sample_data import NUM_VEHICLES, RANDOM_SEED, generate_vehicles


def to_row(vehicle: Vehicle) -> VehicleRow:
    return VehicleRow(
        id=UUID(vehicle.id),
        make=vehicle.make,
        model=vehicle.model,
        year=vehicle.year,
        price=vehicle.price,
        original_price=vehicle.original_price,
        market_value=vehicle.market_value,
        mileage=vehicle.mileage,
        condition=vehicle.condition.value,
        body_type=vehicle.body_type,
        fuel_type=vehicle.fuel_type,
        transmission=vehicle.transmission,
        drivetrain=vehicle.drivetrain,
        exterior_color=vehicle.exterior_color,
        interior_color=vehicle.interior_color,
        engine=vehicle.engine,
        vin=vehicle.vin,
        description=vehicle.description,
        images=list(vehicle.images),
        features=list(vehicle.features),
        city=vehicle.location.city,
        state=vehicle.location.state,
        zip_code=vehicle.location.zip_code,
        arbitrage_score=vehicle.arbitrage_score,
        is_active=vehicle.is_active,
        created_at=vehicle.created_at,
    )


def seed_vehicles(num_vehicles: int = NUM_VEHICLES, seed: int = RANDOM_SEED) -> None:
    """
    Replace the vehicles table contents with generated listings.

    Args:
        num_vehicles: Number of listings to generate
        seed: Random seed for deterministic results
    """
    print(f"Seeding database with {num_vehicles} vehicles (seed={seed})...")

    with get_session() as session:
        # Step 1: Clear existing data (idempotent)
        deleted_count = session.query(VehicleRow).delete()
        print(f"   Deleted {deleted_count} existing vehicles")

        # Step 2: Generate and insert new listings
        rows = [to_row(vehicle) for vehicle in generate_vehicles(num_vehicles, seed)]
        session.add_all(rows)
        session.flush()

        print(f"Seeded {len(rows)} vehicles")
        for i, row in enumerate(rows[:5], 1):
            print(
                f"   {i}. {row.year} {row.make} {row.model} - "
                f"${row.price:,.2f} (score {row.arbitrage_score}, {row.city}, {row.state})"
            )

        if len(rows) > 5:
            print(f"   ... and {len(rows) - 5} more")


if __name__ == "__main__":
    try:
        seed_vehicles()
    except Exception as e:
        print(f"Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
