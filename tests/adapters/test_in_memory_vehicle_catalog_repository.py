"""
Test suite for InMemoryVehicleCatalogRepository.

Serves as the reference implementation for the VehicleCatalogRepository
contract: search results and totals, facets, lookups and suggestions, all
restricted to active listings.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable

import pytest

from carbitrage.adapters.in_memory_vehicle_catalog_repository import (
    InMemoryVehicleCatalogRepository,
)
from carbitrage.domain.search import SUGGESTIONS_PER_TYPE, Suggestion
from carbitrage.domain.vehicle import (
    PageSpec,
    SortKey,
    SortOrder,
    SortSpec,
    Vehicle,
    VehicleSearchCriteria,
)
from carbitrage.ports.vehicle_catalog_repository import SearchResult


@pytest.fixture()
def vehicles(make_vehicle: Callable[..., Vehicle]) -> list[Vehicle]:
    return [
        make_vehicle(make="Toyota", model="Corolla", price=Decimal("20000.00"), arbitrage_score=70),
        make_vehicle(make="Toyota", model="Camry", price=Decimal("24000.00"), arbitrage_score=90),
        make_vehicle(make="Honda", model="Civic", price=Decimal("21000.00"), arbitrage_score=60),
        make_vehicle(make="Mazda", model="CX-5", body_type="SUV", arbitrage_score=80),
        make_vehicle(make="Toyota", model="Corolla", arbitrage_score=100, is_active=False),
    ]


@pytest.fixture()
def repo(vehicles: list[Vehicle]) -> InMemoryVehicleCatalogRepository:
    return InMemoryVehicleCatalogRepository(vehicles)


# ==============================================================================
# search()
# ==============================================================================


def test_search_returns_search_result(repo: InMemoryVehicleCatalogRepository) -> None:
    result = repo.search(VehicleSearchCriteria(), SortSpec(), PageSpec())

    assert isinstance(result, SearchResult)
    assert result.total_count == 4
    assert [v.arbitrage_score for v in result.vehicles] == [90, 80, 70, 60]


def test_search_total_count_is_before_paging(repo: InMemoryVehicleCatalogRepository) -> None:
    result = repo.search(
        VehicleSearchCriteria(makes=("toyota",)), SortSpec(), PageSpec(page=1, limit=1)
    )

    assert len(result.vehicles) == 1
    assert result.total_count == 2


def test_search_sorts_by_price(repo: InMemoryVehicleCatalogRepository) -> None:
    result = repo.search(
        VehicleSearchCriteria(),
        SortSpec(SortKey.PRICE, SortOrder.ASC),
        PageSpec(),
    )

    assert [v.price for v in result.vehicles] == sorted(v.price for v in result.vehicles)


def test_search_facets_are_scoped_to_matches(repo: InMemoryVehicleCatalogRepository) -> None:
    result = repo.search(VehicleSearchCriteria(makes=("toyota",)), SortSpec(), PageSpec())

    assert [(o.label, o.count) for o in result.facets.makes] == [("Toyota", 2)]
    assert result.facets.price_range is not None
    assert result.facets.price_range.max == Decimal("24000.00")


def test_search_page_past_the_end(repo: InMemoryVehicleCatalogRepository) -> None:
    result = repo.search(VehicleSearchCriteria(), SortSpec(), PageSpec(page=9, limit=12))

    assert result.vehicles == []
    assert result.total_count == 4


def test_search_preserves_decimal_prices(repo: InMemoryVehicleCatalogRepository) -> None:
    result = repo.search(
        VehicleSearchCriteria(price_min=Decimal("21000.00"), price_max=Decimal("21000.00")),
        SortSpec(),
        PageSpec(),
    )

    assert [v.price for v in result.vehicles] == [Decimal("21000.00")]


def test_empty_repository() -> None:
    repo = InMemoryVehicleCatalogRepository([])

    result = repo.search(VehicleSearchCriteria(), SortSpec(), PageSpec())

    assert result.vehicles == []
    assert result.total_count == 0
    assert result.facets.year_range is None


# ==============================================================================
# filter_options()
# ==============================================================================


def test_filter_options_cover_active_catalog(repo: InMemoryVehicleCatalogRepository) -> None:
    facets = repo.filter_options()

    assert [(o.value, o.count) for o in facets.makes] == [
        ("honda", 1),
        ("mazda", 1),
        ("toyota", 2),
    ]
    assert [o.label for o in facets.body_types] == ["SUV", "Sedan"]


# ==============================================================================
# get_by_id() / find_similar() / featured()
# ==============================================================================


def test_get_by_id(repo: InMemoryVehicleCatalogRepository, vehicles: list[Vehicle]) -> None:
    assert repo.get_by_id(vehicles[2].id) == vehicles[2]


def test_get_by_id_missing_or_inactive(
    repo: InMemoryVehicleCatalogRepository, vehicles: list[Vehicle]
) -> None:
    assert repo.get_by_id("00000000-0000-0000-0000-00000000ffff") is None
    assert repo.get_by_id(vehicles[4].id) is None


def test_find_similar_skips_inactive(
    repo: InMemoryVehicleCatalogRepository, vehicles: list[Vehicle]
) -> None:
    similar = repo.find_similar(vehicles[0], limit=6)

    # Camry: same make, same body type, price within 20%; the inactive Corolla is skipped
    assert [v.id for v in similar] == [vehicles[1].id]


def test_featured_returns_top_scores(repo: InMemoryVehicleCatalogRepository) -> None:
    assert [v.arbitrage_score for v in repo.featured(2)] == [90, 80]


# ==============================================================================
# suggestion_source()
# ==============================================================================


def test_suggestion_source_counts_active_listings(repo: InMemoryVehicleCatalogRepository) -> None:
    assert repo.suggestion_source("toy") == [Suggestion("make", "Toyota", "Toyota", 2)]
    assert repo.suggestion_source("cor") == [
        Suggestion("model", "Corolla", "Toyota Corolla", 1)
    ]


def test_suggestion_source_matches_models_on_model_only(
    repo: InMemoryVehicleCatalogRepository,
) -> None:
    # Same rule as the SQL adapter: 'toy' is in the make, not in any model
    source = repo.suggestion_source("toy")

    assert [s.type for s in source] == ["make"]


def test_suggestion_source_caps_each_type(make_vehicle: Callable[..., Vehicle]) -> None:
    makes = ["Mazda", "Maserati", "Mahindra", "Maybach", "Marcos", "Matra", "Mack"]
    repo = InMemoryVehicleCatalogRepository([make_vehicle(make=m, model="X") for m in makes])

    source = repo.suggestion_source("ma")

    assert len([s for s in source if s.type == "make"]) == SUGGESTIONS_PER_TYPE
