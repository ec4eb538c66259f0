from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from carbitrage.domain.errors import ValidationError


# ==============================================================================
# Domain Exceptions
# ==============================================================================


class FilterValidationError(ValidationError):
    """Raised when filter parameters are invalid."""

    pass


class PagingValidationError(ValidationError):
    """Raised when paging parameters are invalid."""

    pass


DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 50


class Condition(str, Enum):
    NEW = "new"
    USED = "used"
    CERTIFIED = "certified"


class SortKey(str, Enum):
    PRICE = "price"
    YEAR = "year"
    MILEAGE = "mileage"
    SCORE = "score"
    CREATED_AT = "created_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class Location:
    city: str
    state: str
    zip_code: str = ""


@dataclass(frozen=True)
class Vehicle:
    """A single listing available for search. Never mutated by the search domain."""

    id: str
    make: str
    model: str
    year: int
    price: Decimal
    mileage: int
    condition: Condition
    body_type: str
    fuel_type: str
    transmission: str
    location: Location
    arbitrage_score: int | None = None
    description: str = ""
    drivetrain: str | None = None
    exterior_color: str | None = None
    interior_color: str | None = None
    engine: str | None = None
    vin: str | None = None
    images: tuple[str, ...] = ()
    features: tuple[str, ...] = ()
    original_price: Decimal | None = None
    market_value: Decimal | None = None
    is_active: bool = True
    created_at: datetime | None = None

    @property
    def savings(self) -> Decimal:
        """Discount against the original price, zero when there is none."""
        if self.original_price is not None and self.original_price > self.price:
            return self.original_price - self.price
        return Decimal("0")

    @property
    def savings_percentage(self) -> int:
        if not self.original_price or not self.savings:
            return 0
        percentage = self.savings / self.original_price * Decimal("100")
        return int(percentage.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @property
    def full_location(self) -> str:
        return f"{self.location.city}, {self.location.state} {self.location.zip_code}".rstrip()


@dataclass(frozen=True, slots=True)
class VehicleSearchCriteria:
    """
    Typed filter request.

    Every field is optional: None (or an empty tuple) means "no constraint".
    Multi-value fields are OR-ed internally, fields are AND-ed together.
    """

    query: str | None = None
    makes: tuple[str, ...] = ()
    models: tuple[str, ...] = ()
    year_min: int | None = None
    year_max: int | None = None
    price_min: Decimal | None = None
    price_max: Decimal | None = None
    mileage_max: int | None = None
    conditions: tuple[Condition, ...] = ()
    body_types: tuple[str, ...] = ()
    fuel_types: tuple[str, ...] = ()
    transmissions: tuple[str, ...] = ()
    city: str | None = None
    state: str | None = None

    def validate(self) -> None:
        """
        Validate filter parameters.

        Raises:
            FilterValidationError: If filter parameters are invalid
        """
        # Guardrails: prevent float leakage past boundary
        if self.price_min is not None and not isinstance(self.price_min, Decimal):
            raise FilterValidationError.for_field(
                "price_min", "price_min must be Decimal or None (no floats past the boundary)"
            )
        if self.price_max is not None and not isinstance(self.price_max, Decimal):
            raise FilterValidationError.for_field(
                "price_max", "price_max must be Decimal or None (no floats past the boundary)"
            )

        for condition in self.conditions:
            if not isinstance(condition, Condition):
                raise FilterValidationError.for_field(
                    "condition",
                    f"condition must be a Condition, got {condition!r}",
                    code="INVALID_CONDITION",
                )

        if self.price_min is not None and self.price_min < 0:
            raise FilterValidationError.for_field(
                "price_min", "price_min must be >= 0", code="INVALID_RANGE"
            )
        if self.mileage_max is not None and self.mileage_max < 0:
            raise FilterValidationError.for_field(
                "mileage_max", "mileage_max must be >= 0", code="INVALID_RANGE"
            )

        if (
            self.year_min is not None
            and self.year_max is not None
            and self.year_min > self.year_max
        ):
            raise FilterValidationError.for_field(
                "year_min", "year_min cannot be greater than year_max", code="INVALID_RANGE"
            )
        if (
            self.price_min is not None
            and self.price_max is not None
            and self.price_min > self.price_max
        ):
            raise FilterValidationError.for_field(
                "price_min", "price_min cannot be greater than price_max", code="INVALID_RANGE"
            )


@dataclass(frozen=True, slots=True)
class SortSpec:
    key: SortKey = SortKey.SCORE
    order: SortOrder = SortOrder.DESC


@dataclass(frozen=True, slots=True)
class PageSpec:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def validate(self) -> None:
        """
        Validate paging parameters.

        A page past the last result is valid and yields an empty page.

        Raises:
            PagingValidationError: If paging parameters are invalid
        """
        if self.page < 1:
            raise PagingValidationError.for_field(
                "page", "page must be >= 1", code="INVALID_RANGE"
            )
        if self.limit <= 0:
            raise PagingValidationError.for_field(
                "limit", "limit must be > 0", code="INVALID_RANGE"
            )
        if self.limit > MAX_PAGE_SIZE:
            raise PagingValidationError.for_field(
                "limit", f"limit must be <= {MAX_PAGE_SIZE}", code="INVALID_RANGE"
            )
