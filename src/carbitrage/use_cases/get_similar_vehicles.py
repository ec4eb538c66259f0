from __future__ import annotations

from dataclasses import dataclass

from carbitrage.domain.errors import NotFoundError, ValidationError
from carbitrage.domain.vehicle import Vehicle
from carbitrage.ports.vehicle_catalog_repository import VehicleCatalogRepository
from carbitrage.use_cases.get_vehicle_by_id import validate_vehicle_id

DEFAULT_SIMILAR_LIMIT = 6
MAX_SIMILAR_LIMIT = 20


@dataclass(frozen=True, slots=True)
class GetSimilarVehiclesRequest:
    vehicle_id: str
    limit: int = DEFAULT_SIMILAR_LIMIT


@dataclass(frozen=True, slots=True)
class GetSimilarVehiclesResponse:
    vehicles: list[Vehicle]


class GetSimilarVehicles:
    """
    Vehicles similar to a given listing.

    Similar means same make, same model or body type, and a price within
    20% either way. Best arbitrage score first.
    """

    def __init__(self, vehicle_catalog_repository: VehicleCatalogRepository) -> None:
        self._repository = vehicle_catalog_repository

    def execute(self, request: GetSimilarVehiclesRequest) -> GetSimilarVehiclesResponse:
        """
        Raises:
            ValidationError: If vehicle_id is malformed or limit is out of range
            NotFoundError: If the source vehicle doesn't exist
        """
        validate_vehicle_id(request.vehicle_id)
        if not 1 <= request.limit <= MAX_SIMILAR_LIMIT:
            raise ValidationError.for_field(
                "limit", f"Must be between 1 and {MAX_SIMILAR_LIMIT}", code="INVALID_RANGE"
            )

        vehicle = self._repository.get_by_id(request.vehicle_id)
        if vehicle is None:
            raise NotFoundError(resource="Vehicle", identifier=request.vehicle_id)

        return GetSimilarVehiclesResponse(
            vehicles=self._repository.find_similar(vehicle, request.limit)
        )
