"""PostgreSQL implementation of VehicleCatalogRepository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import and_, func, not_, or_, select, true
from sqlalchemy.orm import Session

from carbitrage.domain.errors import InternalError
from carbitrage.domain.query import (
    AnyOf,
    Between,
    ContainsAny,
    EqualsAny,
    Keywords,
    Not,
    Predicate,
    VehicleField,
    VehicleQuery,
    build_query,
    similar_query,
)
from carbitrage.domain.search import (
    FACET_FIELDS,
    SUGGESTIONS_PER_TYPE,
    FacetOption,
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
from carbitrage.ports.vehicle_catalog_repository import SearchResult, VehicleCatalogRepository

if TYPE_CHECKING:
    from sqlalchemy.sql import ColumnElement, Select

logger = logging.getLogger(__name__)

COLUMNS: dict[VehicleField, Any] = {
    VehicleField.ID: VehicleRow.id,
    VehicleField.MAKE: VehicleRow.make,
    VehicleField.MODEL: VehicleRow.model,
    VehicleField.YEAR: VehicleRow.year,
    VehicleField.PRICE: VehicleRow.price,
    VehicleField.MILEAGE: VehicleRow.mileage,
    VehicleField.CONDITION: VehicleRow.condition,
    VehicleField.BODY_TYPE: VehicleRow.body_type,
    VehicleField.FUEL_TYPE: VehicleRow.fuel_type,
    VehicleField.TRANSMISSION: VehicleRow.transmission,
    VehicleField.CITY: VehicleRow.city,
    VehicleField.STATE: VehicleRow.state,
    VehicleField.DESCRIPTION: VehicleRow.description,
}

SORT_COLUMNS: dict[SortKey, Any] = {
    SortKey.PRICE: VehicleRow.price,
    SortKey.YEAR: VehicleRow.year,
    SortKey.MILEAGE: VehicleRow.mileage,
    SortKey.SCORE: VehicleRow.arbitrage_score,
    SortKey.CREATED_AT: VehicleRow.created_at,
}


def like_pattern(value: str) -> str:
    """Substring pattern for ILIKE with LIKE wildcards escaped."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def to_clause(predicate: Predicate) -> ColumnElement[bool]:
    """Translate one domain predicate into a SQL boolean expression."""
    if isinstance(predicate, ContainsAny):
        column = COLUMNS[predicate.field]
        return or_(*(column.ilike(like_pattern(v), escape="\\") for v in predicate.values))

    if isinstance(predicate, EqualsAny):
        if predicate.field is VehicleField.ID:
            return VehicleRow.id.in_([UUID(value) for value in predicate.values])
        column = COLUMNS[predicate.field]
        return func.lower(column).in_([value.lower() for value in predicate.values])

    if isinstance(predicate, Between):
        column = COLUMNS[predicate.field]
        bounds = []
        if predicate.lower is not None:
            bounds.append(column >= predicate.lower)
        if predicate.upper is not None:
            bounds.append(column <= predicate.upper)
        return and_(*bounds) if bounds else true()

    if isinstance(predicate, Keywords):
        return and_(
            *(
                or_(
                    *(
                        COLUMNS[field].ilike(like_pattern(term), escape="\\")
                        for field in predicate.fields
                    )
                )
                for term in predicate.terms
            )
        )

    if isinstance(predicate, AnyOf):
        return or_(*(to_clause(inner) for inner in predicate.predicates))

    if isinstance(predicate, Not):
        return not_(to_clause(predicate.predicate))

    raise InternalError(f"Unsupported predicate: {type(predicate).__name__}")


def to_where(query: VehicleQuery) -> list[ColumnElement[bool]]:
    """Active-only restriction followed by the query predicates (AND semantics)."""
    return [VehicleRow.is_active.is_(True), *(to_clause(p) for p in query.predicates)]


def order_by(sort: SortSpec) -> list[Any]:
    column = SORT_COLUMNS[sort.key]
    if sort.order is SortOrder.DESC:
        ordering = [column.desc().nulls_last()]
    else:
        ordering = [column.asc().nulls_first()]

    if sort.key is not SortKey.CREATED_AT:
        ordering.append(VehicleRow.created_at.desc())

    # Final tiebreaker keeps pages disjoint across requests
    ordering.append(VehicleRow.id)
    return ordering


class PostgresVehicleCatalogRepository(VehicleCatalogRepository):
    """
    PostgreSQL implementation of VehicleCatalogRepository.

    - Translates the domain predicate AST into SQL WHERE clauses
    - Returns total_count via COUNT(*) over the same WHERE clause
    - Computes facets with GROUP BY and MIN/MAX over the same WHERE clause
    - Converts VehicleRow (infrastructure) to Vehicle (domain)
    """

    def __init__(self, session: Session) -> None:
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self._session = session

    def search(
        self, criteria: VehicleSearchCriteria, sort: SortSpec, paging: PageSpec
    ) -> SearchResult:
        """
        Search catalog with filters, sorting and paging.

        Executes, in order:
        1. COUNT(*) of matching vehicles (before paging)
        2. SELECT with ORDER BY / OFFSET / LIMIT for the page
        3. One GROUP BY query per facet field plus one MIN/MAX query

        Note:
            Assumes inputs are validated by UseCase (contract programming).
        """
        where = to_where(build_query(criteria))
        query = select(VehicleRow).where(*where)

        count_query = select(func.count()).select_from(query.subquery())
        total_count = self._session.execute(count_query).scalar() or 0

        page_query = query.order_by(*order_by(sort)).offset(paging.offset).limit(paging.limit)
        rows = self._session.execute(page_query).scalars().all()

        logger.debug(
            "Postgres search executed",
            extra={"total": total_count, "page": paging.page, "limit": paging.limit},
        )

        return SearchResult(
            vehicles=[self._to_domain(row) for row in rows],
            total_count=total_count,
            facets=self._facets(where),
        )

    def filter_options(self) -> FacetSummary:
        return self._facets(to_where(VehicleQuery()))

    def get_by_id(self, vehicle_id: str) -> Vehicle | None:
        """
        Get an active vehicle by ID.

        Returns:
            Vehicle entity if found, None otherwise (including malformed IDs)
        """
        try:
            query = select(VehicleRow).where(
                VehicleRow.id == UUID(vehicle_id), VehicleRow.is_active.is_(True)
            )
        except ValueError:  # Invalid UUID format
            return None

        row = self._session.execute(query).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def find_similar(self, vehicle: Vehicle, limit: int) -> list[Vehicle]:
        query = (
            select(VehicleRow)
            .where(*to_where(similar_query(vehicle)))
            .order_by(*order_by(SortSpec()))
            .limit(limit)
        )
        rows = self._session.execute(query).scalars().all()
        return [self._to_domain(row) for row in rows]

    def featured(self, limit: int) -> list[Vehicle]:
        query = (
            select(VehicleRow)
            .where(*to_where(VehicleQuery()))
            .order_by(*order_by(SortSpec()))
            .limit(limit)
        )
        rows = self._session.execute(query).scalars().all()
        return [self._to_domain(row) for row in rows]

    def suggestion_source(self, text: str) -> list[Suggestion]:
        """Top matches per suggestion type, most listings first."""
        pattern = like_pattern(text.strip())
        active = VehicleRow.is_active.is_(True)
        listings = func.count().label("listings")

        makes = self._session.execute(
            select(VehicleRow.make, listings)
            .where(active, VehicleRow.make.ilike(pattern, escape="\\"))
            .group_by(VehicleRow.make)
            .order_by(listings.desc())
            .limit(SUGGESTIONS_PER_TYPE)
        ).all()
        models = self._session.execute(
            select(VehicleRow.make, VehicleRow.model, listings)
            .where(active, VehicleRow.model.ilike(pattern, escape="\\"))
            .group_by(VehicleRow.make, VehicleRow.model)
            .order_by(listings.desc())
            .limit(SUGGESTIONS_PER_TYPE)
        ).all()
        locations = self._session.execute(
            select(VehicleRow.city, VehicleRow.state, listings)
            .where(
                active,
                or_(
                    VehicleRow.city.ilike(pattern, escape="\\"),
                    VehicleRow.state.ilike(pattern, escape="\\"),
                ),
            )
            .group_by(VehicleRow.city, VehicleRow.state)
            .order_by(listings.desc())
            .limit(SUGGESTIONS_PER_TYPE)
        ).all()

        return [
            *(Suggestion("make", make, make, count) for make, count in makes),
            *(Suggestion("model", model, f"{make} {model}", count) for make, model, count in models),
            *(
                Suggestion("location", f"{city}, {state}", f"{city}, {state}", count)
                for city, state, count in locations
            ),
        ]

    def _facets(self, where: list[ColumnElement[bool]]) -> FacetSummary:
        options: dict[str, list[FacetOption]] = {}
        for name, facet_field in FACET_FIELDS.items():
            column = COLUMNS[facet_field]
            facet_query: Select[Any] = (
                select(column, func.count()).where(*where).group_by(column).order_by(column)
            )
            options[name] = [
                FacetOption(value=str(label).lower(), label=str(label), count=count)
                for label, count in self._session.execute(facet_query).all()
            ]

        price_min, price_max, year_min, year_max = self._session.execute(
            select(
                func.min(VehicleRow.price),
                func.max(VehicleRow.price),
                func.min(VehicleRow.year),
                func.max(VehicleRow.year),
            ).where(*where)
        ).one()

        return FacetSummary(
            **options,
            price_range=NumericRange(price_min, price_max) if price_min is not None else None,
            year_range=NumericRange(year_min, year_max) if year_min is not None else None,
        )

    def _to_domain(self, row: VehicleRow) -> Vehicle:
        """
        Convert database model (VehicleRow) to domain entity (Vehicle).

        Raises:
            InternalError: If the stored condition is outside the known set
        """
        try:
            condition = Condition(row.condition)
        except ValueError:
            raise InternalError(
                "Stored vehicle has an unknown condition",
                vehicle_id=str(row.id),
                condition=row.condition,
            ) from None

        return Vehicle(
            id=str(row.id),
            make=row.make,
            model=row.model,
            year=row.year,
            price=row.price,  # Already Decimal from NUMERIC column
            mileage=row.mileage,
            condition=condition,
            body_type=row.body_type,
            fuel_type=row.fuel_type,
            transmission=row.transmission,
            location=Location(city=row.city, state=row.state, zip_code=row.zip_code or ""),
            arbitrage_score=row.arbitrage_score,
            description=row.description or "",
            drivetrain=row.drivetrain,
            exterior_color=row.exterior_color,
            interior_color=row.interior_color,
            engine=row.engine,
            vin=row.vin,
            images=tuple(row.images or ()),
            features=tuple(row.features or ()),
            original_price=row.original_price,
            market_value=row.market_value,
            is_active=row.is_active is not False,
            created_at=row.created_at,
        )
