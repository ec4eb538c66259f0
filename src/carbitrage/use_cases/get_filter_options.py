from __future__ import annotations

from dataclasses import dataclass

from carbitrage.domain.search import FacetSummary
from carbitrage.ports.vehicle_catalog_repository import VehicleCatalogRepository


@dataclass(frozen=True, slots=True)
class GetFilterOptionsResponse:
    facets: FacetSummary  # Over the whole active catalog


class GetFilterOptions:
    """Global facets used to populate the filter UI before any search runs."""

    def __init__(self, vehicle_catalog_repository: VehicleCatalogRepository) -> None:
        self._repository = vehicle_catalog_repository

    def execute(self) -> GetFilterOptionsResponse:
        return GetFilterOptionsResponse(facets=self._repository.filter_options())
