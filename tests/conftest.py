from __future__ import annotations

import itertools
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable

import pytest

from carbitrage.domain.vehicle import Condition, Location, Vehicle

BASE_CREATED_AT = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def make_vehicle() -> Callable[..., Vehicle]:
    """Factory for listings; each call gets a fresh UUID and a later created_at."""
    counter = itertools.count(1)

    def _make(**overrides: Any) -> Vehicle:
        n = next(counter)
        fields: dict[str, Any] = {
            "id": str(uuid.UUID(int=n)),
            "make": "Toyota",
            "model": "Camry",
            "year": 2020,
            "price": Decimal("25000.00"),
            "mileage": 30000,
            "condition": Condition.USED,
            "body_type": "Sedan",
            "fuel_type": "Gasoline",
            "transmission": "Automatic",
            "location": Location(city="Austin", state="TX", zip_code="78701"),
            "arbitrage_score": 50,
            "created_at": BASE_CREATED_AT + timedelta(days=n),
        }
        fields.update(overrides)
        return Vehicle(**fields)

    return _make
