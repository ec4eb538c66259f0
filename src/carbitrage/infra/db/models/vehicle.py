from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Float, Index, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY, UUID
from sqlalchemy.orm import Mapped, mapped_column

from carbitrage.infra.db.models.base import Base


class VehicleRow(Base):
    __tablename__ = "vehicles"
    __table_args__ = (
        Index("ix_vehicles_make_model", "make", "model"),
        Index("ix_vehicles_price_year", "price", "year"),
        Index("ix_vehicles_state_city", "state", "city"),
        Index("ix_vehicles_condition_body_type", "condition", "body_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    make: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    model: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False, index=True
    )
    original_price: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2))
    market_value: Mapped[Decimal | None] = mapped_column(Numeric(precision=12, scale=2))
    mileage: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    condition: Mapped[str] = mapped_column(String(20), nullable=False, index=True)  # new|used|certified
    body_type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    fuel_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    transmission: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    drivetrain: Mapped[str | None] = mapped_column(String(20))
    exterior_color: Mapped[str | None] = mapped_column(String(30))
    interior_color: Mapped[str | None] = mapped_column(String(30))
    engine: Mapped[str | None] = mapped_column(String(100))
    vin: Mapped[str | None] = mapped_column(String(17), unique=True)

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    images: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list)
    features: Mapped[list[str]] = mapped_column(ARRAY(String(100)), nullable=False, default=list)

    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(50), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(10), nullable=False, default="")
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)

    arbitrage_score: Mapped[int | None] = mapped_column(Integer, index=True)  # 0-100
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
