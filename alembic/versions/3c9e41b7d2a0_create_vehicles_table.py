"""Create vehicles table

Revision ID: 3c9e41b7d2a0
Revises:
Create Date: 2026-10-18 09:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c9e41b7d2a0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SINGLE_COLUMN_INDEXES = (
    "make",
    "model",
    "year",
    "price",
    "mileage",
    "condition",
    "body_type",
    "fuel_type",
    "transmission",
    "arbitrage_score",
    "is_active",
    "created_at",
)

COMPOSITE_INDEXES = {
    "ix_vehicles_make_model": ["make", "model"],
    "ix_vehicles_price_year": ["price", "year"],
    "ix_vehicles_state_city": ["state", "city"],
    "ix_vehicles_condition_body_type": ["condition", "body_type"],
}


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "vehicles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("make", sa.String(length=50), nullable=False),
        sa.Column("model", sa.String(length=50), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column("original_price", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("market_value", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("mileage", sa.Integer(), nullable=False),
        sa.Column("condition", sa.String(length=20), nullable=False),
        sa.Column("body_type", sa.String(length=30), nullable=False),
        sa.Column("fuel_type", sa.String(length=20), nullable=False),
        sa.Column("transmission", sa.String(length=20), nullable=False),
        sa.Column("drivetrain", sa.String(length=20), nullable=True),
        sa.Column("exterior_color", sa.String(length=30), nullable=True),
        sa.Column("interior_color", sa.String(length=30), nullable=True),
        sa.Column("engine", sa.String(length=100), nullable=True),
        sa.Column("vin", sa.String(length=17), nullable=True, unique=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("images", postgresql.ARRAY(sa.Text()), nullable=False),
        sa.Column("features", postgresql.ARRAY(sa.String(length=100)), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=False),
        sa.Column("state", sa.String(length=50), nullable=False),
        sa.Column("zip_code", sa.String(length=10), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("arbitrage_score", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )

    for column in SINGLE_COLUMN_INDEXES:
        op.create_index(f"ix_vehicles_{column}", "vehicles", [column])
    for name, columns in COMPOSITE_INDEXES.items():
        op.create_index(name, "vehicles", columns)


def downgrade() -> None:
    """Downgrade schema."""
    for name in COMPOSITE_INDEXES:
        op.drop_index(name, table_name="vehicles")
    for column in SINGLE_COLUMN_INDEXES:
        op.drop_index(f"ix_vehicles_{column}", table_name="vehicles")
    op.drop_table("vehicles")
