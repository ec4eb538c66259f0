from __future__ import annotations

from dataclasses import dataclass

from carbitrage.domain.search import (
    DEFAULT_SUGGESTION_LIMIT,
    MIN_SUGGESTION_QUERY_LENGTH,
    Suggestion,
    suggest,
)
from carbitrage.ports.vehicle_catalog_repository import VehicleCatalogRepository


@dataclass(frozen=True, slots=True)
class GetSearchSuggestionsRequest:
    query: str
    limit: int = DEFAULT_SUGGESTION_LIMIT


@dataclass(frozen=True, slots=True)
class GetSearchSuggestionsResponse:
    suggestions: list[Suggestion]


class GetSearchSuggestions:
    """
    Type-ahead suggestions (makes, models, locations).

    The repository supplies candidates; ranking and capping is done by
    domain.search.suggest() so every backend ranks the same way.
    """

    def __init__(self, vehicle_catalog_repository: VehicleCatalogRepository) -> None:
        self._repository = vehicle_catalog_repository

    def execute(self, request: GetSearchSuggestionsRequest) -> GetSearchSuggestionsResponse:
        text = request.query.strip()
        if len(text) < MIN_SUGGESTION_QUERY_LENGTH:
            return GetSearchSuggestionsResponse(suggestions=[])

        source = self._repository.suggestion_source(text)
        return GetSearchSuggestionsResponse(suggestions=suggest(text, source, request.limit))
