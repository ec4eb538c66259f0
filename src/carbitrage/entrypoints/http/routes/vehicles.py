from datetime import date

from fastapi import APIRouter, Depends, Path, Query

from carbitrage.domain.search import DEFAULT_SUGGESTION_LIMIT
from carbitrage.domain.vehicle import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from carbitrage.entrypoints.http.dependencies import (
    get_featured_vehicles_use_case,
    get_filter_options_use_case,
    get_search_suggestions_use_case,
    get_search_vehicles_use_case,
    get_similar_vehicles_use_case,
    get_vehicle_by_id_use_case,
)
from carbitrage.entrypoints.http.dtos.vehicle_search import (
    FilterOptionsDTO,
    SortByParam,
    SortOrderParam,
    SuggestionDTO,
    VehicleListResponseDTO,
    VehicleResponseDTO,
    VehicleSearchQueryDTO,
    VehicleSearchResponseDTO,
)
from carbitrage.entrypoints.http.error_responses import ERROR_RESPONSES
from carbitrage.entrypoints.http.mappers.vehicle_search_mapper import VehicleSearchMapper
from carbitrage.use_cases.get_featured_vehicles import (
    DEFAULT_FEATURED_LIMIT,
    MAX_FEATURED_LIMIT,
    GetFeaturedVehicles,
    GetFeaturedVehiclesRequest,
)
from carbitrage.use_cases.get_filter_options import GetFilterOptions
from carbitrage.use_cases.get_search_suggestions import (
    GetSearchSuggestions,
    GetSearchSuggestionsRequest,
)
from carbitrage.use_cases.get_similar_vehicles import (
    DEFAULT_SIMILAR_LIMIT,
    MAX_SIMILAR_LIMIT,
    GetSimilarVehicles,
    GetSimilarVehiclesRequest,
)
from carbitrage.use_cases.get_vehicle_by_id import GetVehicleById, GetVehicleByIdRequest
from carbitrage.use_cases.search_vehicles import SearchVehicles

PRICE_PATTERN = r"^\d+(\.\d{1,2})?$"
MAX_MODEL_YEAR = date.today().year + 1

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


def vehicle_search_query(
    query: str | None = Query(None, min_length=1, max_length=100),
    make: str | None = Query(None, description="Comma-separated makes"),
    model: str | None = Query(None, description="Comma-separated models"),
    year_min: int | None = Query(None, alias="yearMin", ge=1900, le=MAX_MODEL_YEAR),
    year_max: int | None = Query(None, alias="yearMax", ge=1900, le=MAX_MODEL_YEAR),
    price_min: str | None = Query(None, alias="priceMin", pattern=PRICE_PATTERN),
    price_max: str | None = Query(None, alias="priceMax", pattern=PRICE_PATTERN),
    mileage_max: int | None = Query(None, alias="mileageMax", ge=0),
    condition: str | None = Query(None, description="Comma-separated: new, used, certified"),
    body_type: str | None = Query(None, alias="bodyType"),
    fuel_type: str | None = Query(None, alias="fuelType"),
    transmission: str | None = Query(None),
    city: str | None = Query(None),
    state: str | None = Query(None),
    sort_by: SortByParam = Query("score", alias="sortBy"),
    sort_order: SortOrderParam = Query("desc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> VehicleSearchQueryDTO:
    """Collects the camelCase query string into the search DTO."""
    return VehicleSearchQueryDTO(
        query=query,
        make=make,
        model=model,
        year_min=year_min,
        year_max=year_max,
        price_min=price_min,
        price_max=price_max,
        mileage_max=mileage_max,
        condition=condition,
        body_type=body_type,
        fuel_type=fuel_type,
        transmission=transmission,
        city=city,
        state=state,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )


@router.get(
    "/search",
    response_model=VehicleSearchResponseDTO,
    summary="Search vehicles",
    description="""
    Search active listings with filters, sorting, pagination and facets.

    ## Filters
    - All filters use AND semantics; comma-separated values within one filter use OR
    - make/model/bodyType/fuelType/transmission/city/state: case-insensitive substring
    - condition: exact, one of new, used, certified
    - yearMin/yearMax/priceMin/priceMax: inclusive ranges; mileageMax: inclusive upper bound
    - query: every keyword must appear in make, model, description, city or state

    ## Sorting
    - sortBy: price, year, mileage, score (alias: arbitrage), createdAt
    - Default: best arbitrage score first, ties newest first

    ## Pagination
    - page starts at 1; a page past the end returns no vehicles
    - Default limit: 12, max limit: 50

    ## Facets
    `filters` describes the matching set (before pagination).

    ## Example
    ```
    GET /v1/vehicles/search?make=toyota,honda&priceMax=30000&sortBy=price&sortOrder=asc
    ```
    """,
    responses={422: ERROR_RESPONSES[422]},
)
def search_vehicles(
    query: VehicleSearchQueryDTO = Depends(vehicle_search_query),
    use_case: SearchVehicles = Depends(get_search_vehicles_use_case),
) -> VehicleSearchResponseDTO:
    """Search endpoint following parse → map → execute → map pattern."""
    # 1. Map to domain request (strings → tuples, Decimal, enums)
    request = VehicleSearchMapper.to_domain_request(query)

    # 2. Execute use case (validates cross-field rules)
    result = use_case.execute(request)

    # 3. Map to response
    return VehicleSearchMapper.to_response(result)


@router.get(
    "/suggestions",
    response_model=list[SuggestionDTO],
    summary="Search suggestions",
    description="Type-ahead suggestions for makes, models and locations, best match first.",
    responses={422: ERROR_RESPONSES[422]},
)
def get_search_suggestions(
    q: str = Query(..., min_length=2, max_length=50),
    use_case: GetSearchSuggestions = Depends(get_search_suggestions_use_case),
) -> list[SuggestionDTO]:
    result = use_case.execute(GetSearchSuggestionsRequest(query=q, limit=DEFAULT_SUGGESTION_LIMIT))
    return VehicleSearchMapper.to_suggestion_response(result.suggestions)


@router.get(
    "/filters",
    response_model=FilterOptionsDTO,
    summary="Filter options",
    description="Distinct values with counts and price/year ranges across all active listings.",
)
def get_filter_options(
    use_case: GetFilterOptions = Depends(get_filter_options_use_case),
) -> FilterOptionsDTO:
    result = use_case.execute()
    return VehicleSearchMapper.to_filter_options(result.facets)


@router.get(
    "/featured",
    response_model=VehicleListResponseDTO,
    summary="Featured vehicles",
    description="Active listings with the best arbitrage score.",
    responses={422: ERROR_RESPONSES[422]},
)
def get_featured_vehicles(
    limit: int = Query(DEFAULT_FEATURED_LIMIT, ge=1, le=MAX_FEATURED_LIMIT),
    use_case: GetFeaturedVehicles = Depends(get_featured_vehicles_use_case),
) -> VehicleListResponseDTO:
    result = use_case.execute(GetFeaturedVehiclesRequest(limit=limit))
    return VehicleSearchMapper.to_vehicle_list_response(result.vehicles)


@router.get(
    "/{vehicle_id}",
    response_model=VehicleResponseDTO,
    summary="Get vehicle",
    responses={404: ERROR_RESPONSES[404], 422: ERROR_RESPONSES[422]},
)
def get_vehicle(
    vehicle_id: str = Path(..., description="Vehicle UUID"),
    use_case: GetVehicleById = Depends(get_vehicle_by_id_use_case),
) -> VehicleResponseDTO:
    result = use_case.execute(GetVehicleByIdRequest(vehicle_id=vehicle_id))
    return VehicleSearchMapper.to_vehicle_response(result.vehicle)


@router.get(
    "/{vehicle_id}/similar",
    response_model=VehicleListResponseDTO,
    summary="Similar vehicles",
    description="""
    Listings with the same make, the same model or body type, and a price
    within 20% of the given vehicle. Best arbitrage score first.
    """,
    responses={404: ERROR_RESPONSES[404], 422: ERROR_RESPONSES[422]},
)
def get_similar_vehicles(
    vehicle_id: str = Path(..., description="Vehicle UUID"),
    limit: int = Query(DEFAULT_SIMILAR_LIMIT, ge=1, le=MAX_SIMILAR_LIMIT),
    use_case: GetSimilarVehicles = Depends(get_similar_vehicles_use_case),
) -> VehicleListResponseDTO:
    result = use_case.execute(GetSimilarVehiclesRequest(vehicle_id=vehicle_id, limit=limit))
    return VehicleSearchMapper.to_vehicle_list_response(result.vehicles)
