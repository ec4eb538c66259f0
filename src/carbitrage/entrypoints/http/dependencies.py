"""
Dependency injection for FastAPI routes.

Key principle: Database sessions should be per-request, not cached.
Only stateless singletons should use lru_cache.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Generator

from fastapi import Depends

from carbitrage.adapters.in_memory_vehicle_catalog_repository import (
    InMemoryVehicleCatalogRepository,
)
from carbitrage.adapters.postgres_vehicle_catalog_repository import (
    PostgresVehicleCatalogRepository,
)
from carbitrage.infra.config import CatalogBackend, catalog_backend
from carbitrage.infra.db.session import get_session
from carbitrage.infra.sample_data import generate_vehicles
from carbitrage.ports.vehicle_catalog_repository import VehicleCatalogRepository
from carbitrage.use_cases.get_featured_vehicles import GetFeaturedVehicles
from carbitrage.use_cases.get_filter_options import GetFilterOptions
from carbitrage.use_cases.get_search_suggestions import GetSearchSuggestions
from carbitrage.use_cases.get_similar_vehicles import GetSimilarVehicles
from carbitrage.use_cases.get_vehicle_by_id import GetVehicleById
from carbitrage.use_cases.search_vehicles import SearchVehicles


@lru_cache(maxsize=1)
def get_in_memory_repository() -> InMemoryVehicleCatalogRepository:
    """Immutable sample catalog, built once per process."""
    return InMemoryVehicleCatalogRepository(generate_vehicles())


def get_vehicle_catalog_repository() -> Generator[VehicleCatalogRepository, None, None]:
    """
    Provides the catalog repository for a single request.

    For the postgres backend the underlying get_session() context manager
    handles session creation, commit on success, rollback on exception and
    cleanup when the request ends. The memory backend needs no session, so
    DATABASE_URL is never read in that mode.

    Yields:
        VehicleCatalogRepository: Repository for the configured backend
    """
    if catalog_backend() is CatalogBackend.MEMORY:
        yield get_in_memory_repository()
        return

    with get_session() as session:
        yield PostgresVehicleCatalogRepository(session=session)


def get_search_vehicles_use_case(
    repository: VehicleCatalogRepository = Depends(get_vehicle_catalog_repository),
) -> SearchVehicles:
    """
    Factory function that returns a configured SearchVehicles use case.

    Called per-request, so each request gets a fresh use case bound to
    its own repository (and session).
    """
    return SearchVehicles(vehicle_catalog_repository=repository)


def get_vehicle_by_id_use_case(
    repository: VehicleCatalogRepository = Depends(get_vehicle_catalog_repository),
) -> GetVehicleById:
    return GetVehicleById(vehicle_catalog_repository=repository)


def get_similar_vehicles_use_case(
    repository: VehicleCatalogRepository = Depends(get_vehicle_catalog_repository),
) -> GetSimilarVehicles:
    return GetSimilarVehicles(vehicle_catalog_repository=repository)


def get_featured_vehicles_use_case(
    repository: VehicleCatalogRepository = Depends(get_vehicle_catalog_repository),
) -> GetFeaturedVehicles:
    return GetFeaturedVehicles(vehicle_catalog_repository=repository)


def get_filter_options_use_case(
    repository: VehicleCatalogRepository = Depends(get_vehicle_catalog_repository),
) -> GetFilterOptions:
    return GetFilterOptions(vehicle_catalog_repository=repository)


def get_search_suggestions_use_case(
    repository: VehicleCatalogRepository = Depends(get_vehicle_catalog_repository),
) -> GetSearchSuggestions:
    return GetSearchSuggestions(vehicle_catalog_repository=repository)
