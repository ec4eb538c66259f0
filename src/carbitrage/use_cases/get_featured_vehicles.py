from __future__ import annotations

from dataclasses import dataclass

from carbitrage.domain.errors import ValidationError
from carbitrage.domain.vehicle import Vehicle
from carbitrage.ports.vehicle_catalog_repository import VehicleCatalogRepository

DEFAULT_FEATURED_LIMIT = 6
MAX_FEATURED_LIMIT = 20


@dataclass(frozen=True, slots=True)
class GetFeaturedVehiclesRequest:
    limit: int = DEFAULT_FEATURED_LIMIT


@dataclass(frozen=True, slots=True)
class GetFeaturedVehiclesResponse:
    vehicles: list[Vehicle]


class GetFeaturedVehicles:
    """Top active listings by arbitrage score."""

    def __init__(self, vehicle_catalog_repository: VehicleCatalogRepository) -> None:
        self._repository = vehicle_catalog_repository

    def execute(self, request: GetFeaturedVehiclesRequest) -> GetFeaturedVehiclesResponse:
        if not 1 <= request.limit <= MAX_FEATURED_LIMIT:
            raise ValidationError.for_field(
                "limit", f"Must be between 1 and {MAX_FEATURED_LIMIT}", code="INVALID_RANGE"
            )

        return GetFeaturedVehiclesResponse(vehicles=self._repository.featured(request.limit))
