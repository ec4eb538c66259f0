from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from carbitrage.domain.search import FacetSummary, Suggestion
from carbitrage.domain.vehicle import PageSpec, SortSpec, Vehicle, VehicleSearchCriteria


@dataclass(frozen=True)
class SearchResult:
    """One page of matching vehicles plus totals and facets of the filtered set."""

    vehicles: list[Vehicle]
    total_count: int  # Total matching vehicles before paging
    facets: FacetSummary


class VehicleCatalogRepository(ABC):
    """
    Port for vehicle listing access.

    Only active listings are ever returned.

    Contract (Preconditions):
        - criteria, sort and paging are pre-validated by the caller (UseCase)
        - Implementations trust inputs are valid and do not re-validate
    """

    @abstractmethod
    def search(
        self, criteria: VehicleSearchCriteria, sort: SortSpec, paging: PageSpec
    ) -> SearchResult:
        """
        Filter, sort and page the catalog.

        Args:
            criteria: Filter criteria (AND semantics) - pre-validated
            sort: Sort key and direction
            paging: Page number and size - pre-validated

        Returns:
            SearchResult with the page, the total count before paging and
            facets computed over every matching vehicle
        """
        ...

    @abstractmethod
    def filter_options(self) -> FacetSummary:
        """Facets over the whole active catalog."""
        ...

    @abstractmethod
    def get_by_id(self, vehicle_id: str) -> Vehicle | None: ...

    @abstractmethod
    def find_similar(self, vehicle: Vehicle, limit: int) -> list[Vehicle]:
        """Vehicles similar to the given one, best arbitrage score first."""
        ...

    @abstractmethod
    def featured(self, limit: int) -> list[Vehicle]:
        """Top vehicles by arbitrage score."""
        ...

    @abstractmethod
    def suggestion_source(self, text: str) -> list[Suggestion]:
        """
        Candidate suggestions for the text.

        Makes match on make, models on model, locations on city or state
        (case-insensitive substring). Each type holds at most
        SUGGESTIONS_PER_TYPE entries, most listings first. Final ranking is
        done by the caller with domain.search.suggest().
        """
        ...
