from __future__ import annotations

from dataclasses import dataclass

from carbitrage.domain.search import FacetSummary, PageMeta
from carbitrage.domain.vehicle import PageSpec, SortSpec, Vehicle, VehicleSearchCriteria
from carbitrage.ports.vehicle_catalog_repository import VehicleCatalogRepository


@dataclass(frozen=True, slots=True)
class SearchVehiclesRequest:
    criteria: VehicleSearchCriteria
    sort: SortSpec
    paging: PageSpec


@dataclass(frozen=True, slots=True)
class SearchVehiclesResponse:
    vehicles: list[Vehicle]
    meta: PageMeta
    facets: FacetSummary  # Scoped to the filtered result set, not the whole catalog


class SearchVehicles:
    """
    Vehicle search with filters, sorting, pagination and facets.

    This use case validates the request and delegates filtering to the
    repository adapter. No filtering logic exists in the use case.
    """

    def __init__(self, vehicle_catalog_repository: VehicleCatalogRepository) -> None:
        self._repository = vehicle_catalog_repository

    def execute(self, request: SearchVehiclesRequest) -> SearchVehiclesResponse:
        """
        Execute vehicle search.

        Validates request parameters before delegating to repository.
        This is the single source of validation (contract programming).

        Args:
            request: Search parameters (criteria, sort and paging)

        Returns:
            Response with the requested page, pagination metadata and facets

        Raises:
            PagingValidationError: If paging parameters are invalid
            FilterValidationError: If filter parameters are invalid
        """
        request.criteria.validate()
        request.paging.validate()

        result = self._repository.search(
            criteria=request.criteria,
            sort=request.sort,
            paging=request.paging,
        )

        return SearchVehiclesResponse(
            vehicles=result.vehicles,
            meta=PageMeta.build(request.paging, result.total_count),
            facets=result.facets,
        )
