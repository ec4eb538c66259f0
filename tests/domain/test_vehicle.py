from __future__ import annotations

from decimal import Decimal
from typing import Callable

import pytest

from carbitrage.domain.vehicle import (
    MAX_PAGE_SIZE,
    Condition,
    FilterValidationError,
    Location,
    PageSpec,
    PagingValidationError,
    SortKey,
    SortOrder,
    SortSpec,
    Vehicle,
    VehicleSearchCriteria,
)


# ==============================================================================
# Vehicle
# ==============================================================================


def test_savings_against_original_price(make_vehicle: Callable[..., Vehicle]) -> None:
    vehicle = make_vehicle(price=Decimal("18000"), original_price=Decimal("20000"))

    assert vehicle.savings == Decimal("2000")
    assert vehicle.savings_percentage == 10


def test_savings_zero_without_original_price(make_vehicle: Callable[..., Vehicle]) -> None:
    vehicle = make_vehicle(original_price=None)

    assert vehicle.savings == Decimal("0")
    assert vehicle.savings_percentage == 0


def test_savings_zero_when_original_price_is_lower(make_vehicle: Callable[..., Vehicle]) -> None:
    vehicle = make_vehicle(price=Decimal("20000"), original_price=Decimal("19000"))

    assert vehicle.savings == Decimal("0")
    assert vehicle.savings_percentage == 0


def test_savings_percentage_rounds_half_up(make_vehicle: Callable[..., Vehicle]) -> None:
    # 250 / 2000 = 12.5%
    vehicle = make_vehicle(price=Decimal("1750"), original_price=Decimal("2000"))

    assert vehicle.savings_percentage == 13


def test_full_location(make_vehicle: Callable[..., Vehicle]) -> None:
    vehicle = make_vehicle(location=Location(city="Miami", state="FL", zip_code="33130"))
    assert vehicle.full_location == "Miami, FL 33130"

    no_zip = make_vehicle(location=Location(city="Miami", state="FL"))
    assert no_zip.full_location == "Miami, FL"


def test_vehicle_is_immutable(make_vehicle: Callable[..., Vehicle]) -> None:
    vehicle = make_vehicle()

    with pytest.raises(AttributeError):
        vehicle.price = Decimal("1")  # type: ignore[misc]


# ==============================================================================
# VehicleSearchCriteria.validate()
# ==============================================================================


def test_empty_criteria_is_valid() -> None:
    VehicleSearchCriteria().validate()


def test_zero_bounds_are_valid() -> None:
    VehicleSearchCriteria(price_min=Decimal("0"), price_max=Decimal("0"), mileage_max=0).validate()


def test_equal_bounds_are_valid() -> None:
    VehicleSearchCriteria(year_min=2020, year_max=2020).validate()


@pytest.mark.parametrize(
    "criteria, message",
    [
        (VehicleSearchCriteria(year_min=2022, year_max=2020), "year_min cannot be greater"),
        (
            VehicleSearchCriteria(price_min=Decimal("30000"), price_max=Decimal("20000")),
            "price_min cannot be greater",
        ),
        (VehicleSearchCriteria(price_min=Decimal("-1")), "price_min must be >= 0"),
        (VehicleSearchCriteria(mileage_max=-5), "mileage_max must be >= 0"),
    ],
)
def test_invalid_criteria_raise(criteria: VehicleSearchCriteria, message: str) -> None:
    with pytest.raises(FilterValidationError, match=message):
        criteria.validate()


def test_inverted_range_names_the_lower_bound_field() -> None:
    with pytest.raises(FilterValidationError) as exc_info:
        VehicleSearchCriteria(year_min=2022, year_max=2020).validate()

    assert exc_info.value.errors == [
        {
            "field": "year_min",
            "message": "year_min cannot be greater than year_max",
            "code": "INVALID_RANGE",
        }
    ]


def test_float_prices_are_rejected() -> None:
    with pytest.raises(FilterValidationError, match="Decimal"):
        VehicleSearchCriteria(price_max=30000.0).validate()  # type: ignore[arg-type]


def test_untyped_condition_is_rejected() -> None:
    with pytest.raises(FilterValidationError, match="Condition"):
        VehicleSearchCriteria(conditions=("new",)).validate()  # type: ignore[arg-type]


def test_typed_conditions_are_valid() -> None:
    VehicleSearchCriteria(conditions=(Condition.NEW, Condition.CERTIFIED)).validate()


# ==============================================================================
# SortSpec / PageSpec
# ==============================================================================


def test_default_sort_is_best_score_first() -> None:
    sort = SortSpec()

    assert sort.key is SortKey.SCORE
    assert sort.order is SortOrder.DESC


def test_page_offset() -> None:
    assert PageSpec(page=1, limit=12).offset == 0
    assert PageSpec(page=3, limit=12).offset == 24


def test_page_past_the_end_is_valid() -> None:
    PageSpec(page=1000, limit=12).validate()


@pytest.mark.parametrize(
    "paging",
    [
        PageSpec(page=0),
        PageSpec(page=-1),
        PageSpec(limit=0),
        PageSpec(limit=MAX_PAGE_SIZE + 1),
    ],
)
def test_invalid_paging_raises(paging: PageSpec) -> None:
    with pytest.raises(PagingValidationError):
        paging.validate()
