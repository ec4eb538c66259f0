"""Get vehicle by ID use case."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from carbitrage.domain.errors import NotFoundError, ValidationError
from carbitrage.domain.vehicle import Vehicle
from carbitrage.ports.vehicle_catalog_repository import VehicleCatalogRepository


def validate_vehicle_id(vehicle_id: str) -> None:
    """
    Raises:
        ValidationError: If vehicle_id is not a valid UUID
    """
    try:
        UUID(vehicle_id)
    except ValueError:
        raise ValidationError.for_field(
            "vehicle_id", "Must be a valid UUID format", code="INVALID_UUID"
        ) from None


@dataclass(frozen=True, slots=True)
class GetVehicleByIdRequest:
    """Request to get a vehicle by ID."""

    vehicle_id: str


@dataclass(frozen=True, slots=True)
class GetVehicleByIdResponse:
    """Response containing the requested vehicle."""

    vehicle: Vehicle


class GetVehicleById:
    """
    Use case for retrieving a single active vehicle by ID.

    Responsibilities:
    - Validate vehicle_id format (must be valid UUID)
    - Delegate to repository for data access
    - Raise NotFoundError if the vehicle doesn't exist or is inactive
    """

    def __init__(self, vehicle_catalog_repository: VehicleCatalogRepository) -> None:
        """
        Initialize use case with dependencies.

        Args:
            vehicle_catalog_repository: Repository for vehicle data access
        """
        self._repository = vehicle_catalog_repository

    def execute(self, request: GetVehicleByIdRequest) -> GetVehicleByIdResponse:
        """
        Execute the get vehicle by ID use case.

        Raises:
            ValidationError: If vehicle_id is not a valid UUID format
            NotFoundError: If vehicle with given ID doesn't exist
        """
        validate_vehicle_id(request.vehicle_id)

        vehicle = self._repository.get_by_id(request.vehicle_id)

        if vehicle is None:
            raise NotFoundError(resource="Vehicle", identifier=request.vehicle_id)

        return GetVehicleByIdResponse(vehicle=vehicle)
