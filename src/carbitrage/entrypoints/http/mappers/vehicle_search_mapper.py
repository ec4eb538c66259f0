from __future__ import annotations

from decimal import Decimal

from carbitrage.domain.errors import FieldError, ValidationError
from carbitrage.domain.search import FacetOption, FacetSummary, NumericRange, Suggestion
from carbitrage.domain.vehicle import (
    Condition,
    PageSpec,
    SortKey,
    SortOrder,
    SortSpec,
    Vehicle,
    VehicleSearchCriteria,
)
from carbitrage.entrypoints.http.dtos.vehicle_search import (
    FacetOptionDTO,
    FilterOptionsDTO,
    LocationDTO,
    PriceRangeDTO,
    SuggestionDTO,
    VehicleListResponseDTO,
    VehicleResponseDTO,
    VehicleSearchQueryDTO,
    VehicleSearchResponseDTO,
    YearRangeDTO,
)
from carbitrage.use_cases.search_vehicles import SearchVehiclesRequest, SearchVehiclesResponse

# Transport sort names that differ from the domain SortKey values
SORT_KEY_ALIASES: dict[str, SortKey] = {
    "arbitrage": SortKey.SCORE,
    "createdAt": SortKey.CREATED_AT,
}


def split_values(raw: str | None) -> tuple[str, ...]:
    """'toyota, honda,,' -> ('toyota', 'honda'). None and blanks mean no constraint."""
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class VehicleSearchMapper:
    """Maps between REST DTOs and domain models for vehicle search."""

    @staticmethod
    def to_domain_conditions(raw: str | None) -> tuple[Condition, ...]:
        """
        Raises:
            ValidationError: If any value is not a known condition
        """
        conditions: list[Condition] = []
        errors: list[FieldError] = []
        for value in split_values(raw):
            try:
                conditions.append(Condition(value.lower()))
            except ValueError:
                errors.append(
                    FieldError(
                        field="condition",
                        message=f"Must be one of new, used, certified: {value}",
                        code="INVALID_CONDITION",
                    )
                )

        if errors:
            raise ValidationError(errors=errors)

        return tuple(conditions)

    @staticmethod
    def to_domain_criteria(dto: VehicleSearchQueryDTO) -> VehicleSearchCriteria:
        """
        Converts query params to domain criteria.

        Comma-separated params become tuples, price strings become Decimal.
        """
        return VehicleSearchCriteria(
            query=(dto.query.strip() or None) if dto.query else None,
            makes=split_values(dto.make),
            models=split_values(dto.model),
            year_min=dto.year_min,
            year_max=dto.year_max,
            price_min=Decimal(dto.price_min) if dto.price_min is not None else None,
            price_max=Decimal(dto.price_max) if dto.price_max is not None else None,
            mileage_max=dto.mileage_max,
            conditions=VehicleSearchMapper.to_domain_conditions(dto.condition),
            body_types=split_values(dto.body_type),
            fuel_types=split_values(dto.fuel_type),
            transmissions=split_values(dto.transmission),
            city=dto.city or None,
            state=dto.state or None,
        )

    @staticmethod
    def to_domain_sort(dto: VehicleSearchQueryDTO) -> SortSpec:
        key = SORT_KEY_ALIASES.get(dto.sort_by) or SortKey(dto.sort_by)
        return SortSpec(key=key, order=SortOrder(dto.sort_order))

    @staticmethod
    def to_domain_paging(dto: VehicleSearchQueryDTO) -> PageSpec:
        return PageSpec(page=dto.page, limit=dto.limit)

    @staticmethod
    def to_domain_request(dto: VehicleSearchQueryDTO) -> SearchVehiclesRequest:
        """Convenience method: builds complete domain request from DTO."""
        return SearchVehiclesRequest(
            criteria=VehicleSearchMapper.to_domain_criteria(dto),
            sort=VehicleSearchMapper.to_domain_sort(dto),
            paging=VehicleSearchMapper.to_domain_paging(dto),
        )

    @staticmethod
    def to_vehicle_response(vehicle: Vehicle) -> VehicleResponseDTO:
        """
        Converts domain Vehicle entity to REST response DTO.

        Handles Decimal -> str conversion at the boundary.
        """
        return VehicleResponseDTO(
            id=vehicle.id,
            make=vehicle.make,
            model=vehicle.model,
            year=vehicle.year,
            price=str(vehicle.price),
            mileage=vehicle.mileage,
            condition=vehicle.condition.value,
            body_type=vehicle.body_type,
            fuel_type=vehicle.fuel_type,
            transmission=vehicle.transmission,
            drivetrain=vehicle.drivetrain,
            exterior_color=vehicle.exterior_color,
            interior_color=vehicle.interior_color,
            engine=vehicle.engine,
            vin=vehicle.vin,
            description=vehicle.description,
            images=list(vehicle.images),
            features=list(vehicle.features),
            location=LocationDTO(
                city=vehicle.location.city,
                state=vehicle.location.state,
                zip_code=vehicle.location.zip_code,
            ),
            arbitrage_score=vehicle.arbitrage_score,
            original_price=str(vehicle.original_price) if vehicle.original_price is not None else None,
            market_value=str(vehicle.market_value) if vehicle.market_value is not None else None,
            savings=str(vehicle.savings),
            savings_percentage=vehicle.savings_percentage,
            created_at=vehicle.created_at,
        )

    @staticmethod
    def to_vehicle_list_response(vehicles: list[Vehicle]) -> VehicleListResponseDTO:
        return VehicleListResponseDTO(
            vehicles=[VehicleSearchMapper.to_vehicle_response(v) for v in vehicles]
        )

    @staticmethod
    def _to_options(options: list[FacetOption]) -> list[FacetOptionDTO]:
        return [FacetOptionDTO(value=o.value, label=o.label, count=o.count) for o in options]

    @staticmethod
    def _to_price_range(price_range: NumericRange | None) -> PriceRangeDTO | None:
        if price_range is None:
            return None
        return PriceRangeDTO(min=str(price_range.min), max=str(price_range.max))

    @staticmethod
    def _to_year_range(year_range: NumericRange | None) -> YearRangeDTO | None:
        if year_range is None:
            return None
        return YearRangeDTO(min=int(year_range.min), max=int(year_range.max))

    @staticmethod
    def to_filter_options(facets: FacetSummary) -> FilterOptionsDTO:
        to_options = VehicleSearchMapper._to_options
        return FilterOptionsDTO(
            makes=to_options(facets.makes),
            models=to_options(facets.models),
            body_types=to_options(facets.body_types),
            conditions=to_options(facets.conditions),
            fuel_types=to_options(facets.fuel_types),
            transmissions=to_options(facets.transmissions),
            price_range=VehicleSearchMapper._to_price_range(facets.price_range),
            year_range=VehicleSearchMapper._to_year_range(facets.year_range),
        )

    @staticmethod
    def to_response(result: SearchVehiclesResponse) -> VehicleSearchResponseDTO:
        """Converts domain search result to REST response with pagination metadata and facets."""
        return VehicleSearchResponseDTO(
            vehicles=[VehicleSearchMapper.to_vehicle_response(v) for v in result.vehicles],
            total=result.meta.total,
            page=result.meta.page,
            limit=result.meta.limit,
            total_pages=result.meta.total_pages,
            has_next_page=result.meta.has_next_page,
            has_prev_page=result.meta.has_prev_page,
            filters=VehicleSearchMapper.to_filter_options(result.facets),
        )

    @staticmethod
    def to_suggestion_response(suggestions: list[Suggestion]) -> list[SuggestionDTO]:
        return [
            SuggestionDTO(type=s.type, value=s.value, label=s.label, count=s.count)
            for s in suggestions
        ]
