from __future__ import annotations

import logging
from typing import Iterable

from carbitrage.domain import search as engine
from carbitrage.domain.search import FacetSummary, Suggestion
from carbitrage.domain.vehicle import PageSpec, SortSpec, Vehicle, VehicleSearchCriteria
from carbitrage.ports.vehicle_catalog_repository import SearchResult, VehicleCatalogRepository

logger = logging.getLogger(__name__)


class InMemoryVehicleCatalogRepository(VehicleCatalogRepository):
    """
    Canonical contract implementation, used for tests and the memory backend.

    - Holds an immutable snapshot of vehicles in insertion order
    - Ignores inactive listings
    - Delegates filtering, sorting, paging and facets to domain.search
    - Returns total_count of matching vehicles before paging
    """

    def __init__(self, vehicles: Iterable[Vehicle]) -> None:
        self._vehicles: tuple[Vehicle, ...] = tuple(vehicles)

    def search(
        self, criteria: VehicleSearchCriteria, sort: SortSpec, paging: PageSpec
    ) -> SearchResult:
        # Trust that UseCase has validated inputs (contract programming)
        outcome = engine.search(self._vehicles, criteria, sort, paging)
        logger.debug(
            "In-memory search executed",
            extra={"total": outcome.meta.total, "page": paging.page, "limit": paging.limit},
        )
        return SearchResult(
            vehicles=outcome.vehicles,
            total_count=outcome.meta.total,
            facets=outcome.facets,
        )

    def filter_options(self) -> FacetSummary:
        return engine.compute_facets(self._active())

    def get_by_id(self, vehicle_id: str) -> Vehicle | None:
        return next((v for v in self._active() if v.id == vehicle_id), None)

    def find_similar(self, vehicle: Vehicle, limit: int) -> list[Vehicle]:
        return engine.similar_to(vehicle, self._vehicles, limit)

    def featured(self, limit: int) -> list[Vehicle]:
        return engine.top_scored(self._vehicles, limit)

    def suggestion_source(self, text: str) -> list[Suggestion]:
        return engine.build_suggestion_source(self._active(), text)

    def _active(self) -> list[Vehicle]:
        return [vehicle for vehicle in self._vehicles if vehicle.is_active]
