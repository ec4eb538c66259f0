"""Vehicle search engine.

Pure functions over a snapshot of listings: filter, sort, paginate, facet
and suggest. Nothing here performs I/O or mutates its inputs; the in-memory
repository calls these directly and the PostgreSQL repository mirrors their
semantics in SQL.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Sequence

from carbitrage.domain.query import (
    VehicleField,
    VehicleQuery,
    build_query,
    field_value,
    similar_query,
)
from carbitrage.domain.vehicle import (
    PageSpec,
    SortKey,
    SortOrder,
    SortSpec,
    Vehicle,
    VehicleSearchCriteria,
)

DEFAULT_SUGGESTION_LIMIT = 8
MIN_SUGGESTION_QUERY_LENGTH = 2
SUGGESTIONS_PER_TYPE = 5

# Facet name -> field, in response order
FACET_FIELDS: dict[str, VehicleField] = {
    "makes": VehicleField.MAKE,
    "models": VehicleField.MODEL,
    "body_types": VehicleField.BODY_TYPE,
    "conditions": VehicleField.CONDITION,
    "fuel_types": VehicleField.FUEL_TYPE,
    "transmissions": VehicleField.TRANSMISSION,
}


@dataclass(frozen=True, slots=True)
class FacetOption:
    value: str  # lowercase token for filtering
    label: str  # original value for display
    count: int


@dataclass(frozen=True, slots=True)
class NumericRange:
    min: Decimal | int
    max: Decimal | int


@dataclass(frozen=True, slots=True)
class FacetSummary:
    """Distinct-value breakdowns plus numeric ranges (None when nothing matched)."""

    makes: list[FacetOption] = field(default_factory=list)
    models: list[FacetOption] = field(default_factory=list)
    body_types: list[FacetOption] = field(default_factory=list)
    conditions: list[FacetOption] = field(default_factory=list)
    fuel_types: list[FacetOption] = field(default_factory=list)
    transmissions: list[FacetOption] = field(default_factory=list)
    price_range: NumericRange | None = None
    year_range: NumericRange | None = None


@dataclass(frozen=True, slots=True)
class PageMeta:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, paging: PageSpec, total: int) -> PageMeta:
        return cls(
            page=paging.page,
            limit=paging.limit,
            total=total,
            total_pages=max(1, math.ceil(total / paging.limit)),
            has_next_page=paging.offset + paging.limit < total,
            has_prev_page=paging.page > 1,
        )


@dataclass(frozen=True, slots=True)
class Suggestion:
    type: str  # "make" | "model" | "location"
    value: str
    label: str
    count: int = 0


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    vehicles: list[Vehicle]
    meta: PageMeta
    facets: FacetSummary


# ==============================================================================
# Filtering
# ==============================================================================


def filter_vehicles(vehicles: Iterable[Vehicle], query: VehicleQuery) -> list[Vehicle]:
    return [vehicle for vehicle in vehicles if query.matches(vehicle)]


def apply_filters(vehicles: Iterable[Vehicle], criteria: VehicleSearchCriteria) -> list[Vehicle]:
    """Narrow the collection to vehicles satisfying every present criterion."""
    return filter_vehicles(vehicles, build_query(criteria))


# ==============================================================================
# Sorting
# ==============================================================================


def _sort_value(vehicle: Vehicle, key: SortKey) -> tuple[bool, Any]:
    if key is SortKey.SCORE:
        value = vehicle.arbitrage_score
    elif key is SortKey.CREATED_AT:
        value = vehicle.created_at
    else:
        value = getattr(vehicle, key.value)
    # Missing values sort as the lowest
    return (value is not None, value)


def sort_vehicles(vehicles: Iterable[Vehicle], sort: SortSpec) -> list[Vehicle]:
    """
    Stable sort by the requested key.

    Unless the key is created_at itself, ties on the key are ordered by
    created_at descending (newest first).
    """
    ordered = list(vehicles)
    if sort.key is not SortKey.CREATED_AT:
        ordered.sort(key=lambda v: _sort_value(v, SortKey.CREATED_AT), reverse=True)
    ordered.sort(key=lambda v: _sort_value(v, sort.key), reverse=sort.order is SortOrder.DESC)
    return ordered


# ==============================================================================
# Pagination
# ==============================================================================


def paginate(vehicles: Sequence[Vehicle], paging: PageSpec) -> tuple[list[Vehicle], PageMeta]:
    """Slice one page; a page past the end is empty rather than an error."""
    start = paging.offset
    end = start + paging.limit
    return list(vehicles[start:end]), PageMeta.build(paging, len(vehicles))


# ==============================================================================
# Facets
# ==============================================================================


def _facet_options(vehicles: Sequence[Vehicle], facet_field: VehicleField) -> list[FacetOption]:
    counts = Counter(str(field_value(vehicle, facet_field)) for vehicle in vehicles)
    return [
        FacetOption(value=label.lower(), label=label, count=count)
        for label, count in sorted(counts.items())
    ]


def _numeric_range(values: list[Any]) -> NumericRange | None:
    if not values:
        return None
    return NumericRange(min=min(values), max=max(values))


def compute_facets(vehicles: Iterable[Vehicle]) -> FacetSummary:
    """Facet breakdown of the given collection (global or search-scoped, caller decides)."""
    snapshot = list(vehicles)
    options = {name: _facet_options(snapshot, f) for name, f in FACET_FIELDS.items()}
    return FacetSummary(
        **options,
        price_range=_numeric_range([vehicle.price for vehicle in snapshot]),
        year_range=_numeric_range([vehicle.year for vehicle in snapshot]),
    )


# ==============================================================================
# Suggestions
# ==============================================================================


def build_suggestion_source(
    vehicles: Iterable[Vehicle], text: str, per_type: int = SUGGESTIONS_PER_TYPE
) -> list[Suggestion]:
    """
    Make, model and location candidates for the typed text, most listings first.

    Each type matches on its own fields only (make on make, model on model,
    location on city or state) and keeps at most per_type entries.
    """
    needle = text.strip().lower()
    snapshot = list(vehicles)
    makes = Counter(v.make for v in snapshot if needle in v.make.lower())
    models = Counter((v.make, v.model) for v in snapshot if needle in v.model.lower())
    locations = Counter(
        (v.location.city, v.location.state)
        for v in snapshot
        if needle in v.location.city.lower() or needle in v.location.state.lower()
    )

    return [
        *(Suggestion("make", make, make, count) for make, count in makes.most_common(per_type)),
        *(
            Suggestion("model", model, f"{make} {model}", count)
            for (make, model), count in models.most_common(per_type)
        ),
        *(
            Suggestion("location", f"{city}, {state}", f"{city}, {state}", count)
            for (city, state), count in locations.most_common(per_type)
        ),
    ]


def _match_position(suggestion: Suggestion, needle: str) -> int | None:
    position = suggestion.label.lower().find(needle)
    if position >= 0:
        return position
    position = suggestion.value.lower().find(needle)
    return position if position >= 0 else None


def suggest(
    query: str | None,
    source: Iterable[Suggestion],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> list[Suggestion]:
    """
    Rank suggestions matching the query.

    Earlier matches rank higher; equal positions are broken by count
    descending. Queries shorter than two characters return nothing.
    """
    needle = (query or "").strip().lower()
    if len(needle) < MIN_SUGGESTION_QUERY_LENGTH:
        return []

    ranked: list[tuple[int, Suggestion]] = []
    for suggestion in source:
        position = _match_position(suggestion, needle)
        if position is not None:
            ranked.append((position, suggestion))

    ranked.sort(key=lambda pair: (pair[0], -pair[1].count))
    return [suggestion for _, suggestion in ranked[:limit]]


# ==============================================================================
# Composition
# ==============================================================================


def search(
    vehicles: Iterable[Vehicle],
    criteria: VehicleSearchCriteria,
    sort: SortSpec,
    paging: PageSpec,
) -> SearchOutcome:
    """
    Full search pipeline over one snapshot of active listings.

    Facets are computed over the filtered subset, before pagination.
    """
    active = [vehicle for vehicle in vehicles if vehicle.is_active]
    matches = apply_filters(active, criteria)
    page, meta = paginate(sort_vehicles(matches, sort), paging)
    return SearchOutcome(vehicles=page, meta=meta, facets=compute_facets(matches))


def top_scored(vehicles: Iterable[Vehicle], limit: int) -> list[Vehicle]:
    active = [vehicle for vehicle in vehicles if vehicle.is_active]
    return sort_vehicles(active, SortSpec())[:limit]


def similar_to(vehicle: Vehicle, vehicles: Iterable[Vehicle], limit: int) -> list[Vehicle]:
    active = [candidate for candidate in vehicles if candidate.is_active]
    return sort_vehicles(filter_vehicles(active, similar_query(vehicle)), SortSpec())[:limit]
