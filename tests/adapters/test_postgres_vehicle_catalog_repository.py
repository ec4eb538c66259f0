"""
Unit test suite for PostgresVehicleCatalogRepository.

Verifies the PostgreSQL implementation using a mocked Session:
- Predicate AST → SQL WHERE clause translation (compiled for the postgresql dialect)
- ORDER BY with NULL placement and deterministic tiebreakers
- Query sequence of search(): COUNT, page SELECT, facet GROUP BYs, MIN/MAX
- Type conversions (UUID → string, NUMERIC → Decimal, str → Condition)
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import Any
from unittest.mock import Mock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Session

from carbitrage.adapters.postgres_vehicle_catalog_repository import (
    PostgresVehicleCatalogRepository,
    like_pattern,
    order_by,
    to_clause,
    to_where,
)
from carbitrage.domain.errors import InternalError
from carbitrage.domain.query import (
    AnyOf,
    Between,
    ContainsAny,
    EqualsAny,
    Keywords,
    Not,
    VehicleField,
    VehicleQuery,
)
from carbitrage.domain.search import (
    SUGGESTIONS_PER_TYPE,
    FacetSummary,
    NumericRange,
    Suggestion,
)
from carbitrage.domain.vehicle import (
    Condition,
    Location,
    PageSpec,
    SortKey,
    SortOrder,
    SortSpec,
    Vehicle,
    VehicleSearchCriteria,
)
from carbitrage.infra.db.models.vehicle import VehicleRow
from carbitrage.ports.vehicle_catalog_repository import SearchResult

ROW_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")


def compile_sql(clause: Any) -> tuple[str, dict[str, Any]]:
    compiled = clause.compile(dialect=postgresql.dialect())
    return str(compiled), compiled.params


def make_row(**overrides: Any) -> VehicleRow:
    fields: dict[str, Any] = {
        "id": ROW_ID,
        "make": "Toyota",
        "model": "Camry",
        "year": 2020,
        "price": Decimal("25000.00"),
        "mileage": 30000,
        "condition": "used",
        "body_type": "Sedan",
        "fuel_type": "Gasoline",
        "transmission": "Automatic",
        "city": "Austin",
        "state": "TX",
        "zip_code": "78701",
        "arbitrage_score": 75,
        "is_active": True,
    }
    fields.update(overrides)
    return VehicleRow(**fields)


def facet_results(
    price_range: tuple[Any, Any] = (None, None), year_range: tuple[Any, Any] = (None, None)
) -> list[Mock]:
    """Six GROUP BY results (makes first, with one Toyota) followed by the MIN/MAX row."""
    results = []
    for rows in ([("Toyota", 2)], [], [], [], [], []):
        result = Mock()
        result.all.return_value = rows
        results.append(result)

    range_result = Mock()
    range_result.one.return_value = (*price_range, *year_range)
    results.append(range_result)
    return results


@pytest.fixture()
def mock_session() -> Mock:
    """Mock SQLAlchemy session."""
    return Mock(spec=Session)


# ==============================================================================
# Predicate Translation
# ==============================================================================


def test_like_pattern_escapes_wildcards() -> None:
    assert like_pattern("50%_off\\") == "%50\\%\\_off\\\\%"


def test_contains_any_translates_to_ilike() -> None:
    sql, params = compile_sql(to_clause(ContainsAny(VehicleField.MAKE, ("toy", "hon"))))

    assert "vehicles.make ILIKE" in sql
    assert " OR " in sql
    assert sorted(params.values()) == ["%hon%", "%toy%"]


def test_equals_any_translates_to_lower_in() -> None:
    sql, params = compile_sql(
        to_clause(EqualsAny(VehicleField.CONDITION, ("new", "CERTIFIED")))
    )

    assert "lower(vehicles.condition) IN" in sql
    assert ["new", "certified"] in params.values()


def test_equals_any_on_id_compares_uuids() -> None:
    sql, params = compile_sql(to_clause(EqualsAny(VehicleField.ID, (str(ROW_ID),))))

    assert "vehicles.id IN" in sql
    assert [ROW_ID] in params.values()


def test_between_translates_to_inclusive_bounds() -> None:
    sql, params = compile_sql(
        to_clause(Between(VehicleField.PRICE, Decimal("0"), Decimal("30000")))
    )

    assert "vehicles.price >=" in sql
    assert "vehicles.price <=" in sql
    assert Decimal("0") in params.values()


def test_between_without_bounds_is_true() -> None:
    sql, _ = compile_sql(to_clause(Between(VehicleField.YEAR)))

    assert sql == "true"


def test_keywords_and_terms_or_fields() -> None:
    sql, params = compile_sql(
        to_clause(Keywords((VehicleField.MAKE, VehicleField.CITY), ("toyota", "austin")))
    )

    assert " AND " in sql
    assert " OR " in sql
    assert sorted(params.values()) == ["%austin%", "%austin%", "%toyota%", "%toyota%"]


def test_any_of_and_not() -> None:
    sql, _ = compile_sql(
        to_clause(
            AnyOf(
                (
                    EqualsAny(VehicleField.MODEL, ("camry",)),
                    Not(EqualsAny(VehicleField.BODY_TYPE, ("sedan",))),
                )
            )
        )
    )

    assert " OR " in sql
    assert "NOT IN" in sql


def test_unsupported_predicate_raises_internal_error() -> None:
    with pytest.raises(InternalError, match="Unsupported predicate"):
        to_clause(object())  # type: ignore[arg-type]


def test_where_always_restricts_to_active() -> None:
    where = to_where(VehicleQuery())

    assert len(where) == 1
    sql, _ = compile_sql(where[0])
    assert sql == "vehicles.is_active IS true"


# ==============================================================================
# Ordering
# ==============================================================================


def test_default_order_is_score_then_newest_then_id() -> None:
    ordering = [compile_sql(clause)[0] for clause in order_by(SortSpec())]

    assert ordering == [
        "vehicles.arbitrage_score DESC NULLS LAST",
        "vehicles.created_at DESC",
        "vehicles.id",
    ]


def test_ascending_order_puts_nulls_first() -> None:
    ordering = [compile_sql(c)[0] for c in order_by(SortSpec(SortKey.PRICE, SortOrder.ASC))]

    assert ordering[0] == "vehicles.price ASC NULLS FIRST"


def test_created_at_order_has_no_duplicate_tiebreak() -> None:
    ordering = [
        compile_sql(c)[0] for c in order_by(SortSpec(SortKey.CREATED_AT, SortOrder.DESC))
    ]

    assert ordering == ["vehicles.created_at DESC NULLS LAST", "vehicles.id"]


# ==============================================================================
# search()
# ==============================================================================


def test_search_executes_count_page_and_facet_queries(mock_session: Mock) -> None:
    count_result = Mock()
    count_result.scalar.return_value = 2

    select_result = Mock()
    select_result.scalars.return_value.all.return_value = [make_row()]

    mock_session.execute.side_effect = [
        count_result,
        select_result,
        *facet_results((Decimal("20000.00"), Decimal("25000.00")), (2019, 2020)),
    ]

    repo = PostgresVehicleCatalogRepository(mock_session)

    result = repo.search(VehicleSearchCriteria(), SortSpec(), PageSpec())

    # COUNT + SELECT + 6 facet GROUP BYs + MIN/MAX
    assert mock_session.execute.call_count == 9
    assert isinstance(result, SearchResult)
    assert result.total_count == 2
    assert len(result.vehicles) == 1
    assert [(o.value, o.label, o.count) for o in result.facets.makes] == [("toyota", "Toyota", 2)]
    assert result.facets.price_range == NumericRange(Decimal("20000.00"), Decimal("25000.00"))
    assert result.facets.year_range == NumericRange(2019, 2020)


def test_search_applies_paging_to_select(mock_session: Mock) -> None:
    count_result = Mock()
    count_result.scalar.return_value = 40

    select_result = Mock()
    select_result.scalars.return_value.all.return_value = []

    mock_session.execute.side_effect = [count_result, select_result, *facet_results()]

    repo = PostgresVehicleCatalogRepository(mock_session)
    repo.search(VehicleSearchCriteria(), SortSpec(), PageSpec(page=3, limit=12))

    page_query = mock_session.execute.call_args_list[1][0][0]
    sql, params = compile_sql(page_query)

    assert "LIMIT" in sql
    assert "OFFSET" in sql
    assert 24 in params.values()
    assert 12 in params.values()


def test_search_filters_every_query_with_same_where(mock_session: Mock) -> None:
    count_result = Mock()
    count_result.scalar.return_value = 0

    select_result = Mock()
    select_result.scalars.return_value.all.return_value = []

    mock_session.execute.side_effect = [count_result, select_result, *facet_results()]

    repo = PostgresVehicleCatalogRepository(mock_session)
    result = repo.search(
        VehicleSearchCriteria(makes=("toyota",), conditions=(Condition.NEW,)),
        SortSpec(),
        PageSpec(),
    )

    for call in mock_session.execute.call_args_list:
        sql, _ = compile_sql(call[0][0])
        assert "vehicles.make ILIKE" in sql
        assert "lower(vehicles.condition) IN" in sql

    assert result.total_count == 0
    assert result.facets.price_range is None
    assert result.facets.year_range is None


# ==============================================================================
# filter_options()
# ==============================================================================


def test_filter_options_runs_facet_queries_only(mock_session: Mock) -> None:
    mock_session.execute.side_effect = facet_results(
        (Decimal("1.00"), Decimal("2.00")), (2018, 2024)
    )

    repo = PostgresVehicleCatalogRepository(mock_session)
    facets = repo.filter_options()

    assert mock_session.execute.call_count == 7
    assert isinstance(facets, FacetSummary)
    assert facets.year_range == NumericRange(2018, 2024)


# ==============================================================================
# get_by_id() and Type Conversion
# ==============================================================================


def test_get_by_id_converts_row_to_domain(mock_session: Mock) -> None:
    mock_session.execute.return_value.scalar_one_or_none.return_value = make_row(
        images=["https://img/1.jpg"], original_price=Decimal("27000.00")
    )

    repo = PostgresVehicleCatalogRepository(mock_session)
    vehicle = repo.get_by_id(str(ROW_ID))

    assert isinstance(vehicle, Vehicle)
    assert vehicle.id == str(ROW_ID)
    assert isinstance(vehicle.price, Decimal)
    assert vehicle.price == Decimal("25000.00")
    assert vehicle.condition is Condition.USED
    assert vehicle.location.city == "Austin"
    assert vehicle.images == ("https://img/1.jpg",)
    assert vehicle.features == ()
    assert vehicle.savings == Decimal("2000.00")


def test_get_by_id_returns_none_when_missing(mock_session: Mock) -> None:
    mock_session.execute.return_value.scalar_one_or_none.return_value = None

    repo = PostgresVehicleCatalogRepository(mock_session)

    assert repo.get_by_id(str(ROW_ID)) is None


def test_get_by_id_returns_none_for_malformed_id(mock_session: Mock) -> None:
    repo = PostgresVehicleCatalogRepository(mock_session)

    assert repo.get_by_id("not-a-uuid") is None
    mock_session.execute.assert_not_called()


def test_unknown_stored_condition_raises_internal_error(mock_session: Mock) -> None:
    mock_session.execute.return_value.scalar_one_or_none.return_value = make_row(
        condition="salvage"
    )

    repo = PostgresVehicleCatalogRepository(mock_session)

    with pytest.raises(InternalError) as exc_info:
        repo.get_by_id(str(ROW_ID))

    assert exc_info.value.context["condition"] == "salvage"


# ==============================================================================
# find_similar() / featured()
# ==============================================================================


def test_find_similar_excludes_source_and_limits(mock_session: Mock) -> None:
    mock_session.execute.return_value.scalars.return_value.all.return_value = []
    source = Vehicle(
        id=str(ROW_ID),
        make="Toyota",
        model="Camry",
        year=2020,
        price=Decimal("25000.00"),
        mileage=30000,
        condition=Condition.USED,
        body_type="Sedan",
        fuel_type="Gasoline",
        transmission="Automatic",
        location=Location("Austin", "TX"),
    )

    repo = PostgresVehicleCatalogRepository(mock_session)
    assert repo.find_similar(source, limit=6) == []

    sql, params = compile_sql(mock_session.execute.call_args[0][0])
    assert "vehicles.id NOT IN" in sql
    assert "LIMIT" in sql
    assert 6 in params.values()


def test_featured_orders_by_score(mock_session: Mock) -> None:
    mock_session.execute.return_value.scalars.return_value.all.return_value = [make_row()]

    repo = PostgresVehicleCatalogRepository(mock_session)
    featured = repo.featured(limit=3)

    assert [v.arbitrage_score for v in featured] == [75]
    sql, _ = compile_sql(mock_session.execute.call_args[0][0])
    assert "ORDER BY vehicles.arbitrage_score DESC NULLS LAST" in sql


# ==============================================================================
# suggestion_source()
# ==============================================================================


def test_suggestion_source_builds_typed_suggestions(mock_session: Mock) -> None:
    makes, models, locations = Mock(), Mock(), Mock()
    makes.all.return_value = [("Toyota", 12)]
    models.all.return_value = [("Toyota", "Tacoma", 3)]
    locations.all.return_value = [("Toledo", "OH", 1)]
    mock_session.execute.side_effect = [makes, models, locations]

    repo = PostgresVehicleCatalogRepository(mock_session)
    source = repo.suggestion_source("to")

    assert source == [
        Suggestion("make", "Toyota", "Toyota", 12),
        Suggestion("model", "Tacoma", "Toyota Tacoma", 3),
        Suggestion("location", "Toledo, OH", "Toledo, OH", 1),
    ]
    sql, params = compile_sql(mock_session.execute.call_args_list[0][0][0])
    assert "GROUP BY vehicles.make" in sql
    assert "%to%" in params.values()


def test_suggestion_source_matches_each_type_on_its_own_column(mock_session: Mock) -> None:
    empty = Mock()
    empty.all.return_value = []
    mock_session.execute.return_value = empty

    PostgresVehicleCatalogRepository(mock_session).suggestion_source("toy")

    make_sql, make_params = compile_sql(mock_session.execute.call_args_list[0][0][0])
    model_sql, model_params = compile_sql(mock_session.execute.call_args_list[1][0][0])
    location_sql, _ = compile_sql(mock_session.execute.call_args_list[2][0][0])
    assert "vehicles.make ILIKE" in make_sql
    assert "vehicles.model ILIKE" in model_sql
    assert "vehicles.make ILIKE" not in model_sql
    assert "vehicles.city" in location_sql and "vehicles.state" in location_sql
    assert SUGGESTIONS_PER_TYPE in make_params.values()
    assert SUGGESTIONS_PER_TYPE in model_params.values()
