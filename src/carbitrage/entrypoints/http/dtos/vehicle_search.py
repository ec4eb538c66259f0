from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SortByParam = Literal["price", "year", "mileage", "score", "arbitrage", "createdAt"]
SortOrderParam = Literal["asc", "desc"]


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts snake_case field names on construction."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VehicleSearchQueryDTO(BaseModel):
    """Search query parameters as received from the transport (already type-checked)."""

    query: str | None = Field(default=None, description="Keywords matched against make, model, description and location")
    make: str | None = Field(default=None, description="Comma-separated makes (case-insensitive substring)")
    model: str | None = Field(default=None, description="Comma-separated models (case-insensitive substring)")
    year_min: int | None = Field(default=None, ge=1900)
    year_max: int | None = Field(default=None, ge=1900)
    price_min: str | None = Field(default=None, pattern=r"^\d+(\.\d{1,2})?$")
    price_max: str | None = Field(default=None, pattern=r"^\d+(\.\d{1,2})?$")
    mileage_max: int | None = Field(default=None, ge=0)
    condition: str | None = Field(default=None, description="Comma-separated: new, used, certified")
    body_type: str | None = None
    fuel_type: str | None = None
    transmission: str | None = None
    city: str | None = None
    state: str | None = None
    sort_by: SortByParam = "score"
    sort_order: SortOrderParam = "desc"
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=12, ge=1, le=50)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "make": "toyota,honda",
                "year_min": 2018,
                "price_max": "35000",
                "condition": "used,certified",
                "sort_by": "price",
                "sort_order": "asc",
                "page": 1,
                "limit": 12,
            }
        }
    )


class LocationDTO(CamelModel):
    city: str
    state: str
    zip_code: str


class VehicleResponseDTO(CamelModel):
    id: str
    make: str
    model: str
    year: int
    price: str
    mileage: int
    condition: str
    body_type: str
    fuel_type: str
    transmission: str
    drivetrain: str | None = None
    exterior_color: str | None = None
    interior_color: str | None = None
    engine: str | None = None
    vin: str | None = None
    description: str
    images: list[str]
    features: list[str]
    location: LocationDTO
    arbitrage_score: int | None = None
    original_price: str | None = None
    market_value: str | None = None
    savings: str
    savings_percentage: int
    created_at: datetime | None = None


class FacetOptionDTO(CamelModel):
    value: str = Field(description="Lowercase token to send back as a filter")
    label: str = Field(description="Display label in original case")
    count: int


class PriceRangeDTO(CamelModel):
    min: str
    max: str


class YearRangeDTO(CamelModel):
    min: int
    max: int


class FilterOptionsDTO(CamelModel):
    makes: list[FacetOptionDTO]
    models: list[FacetOptionDTO]
    body_types: list[FacetOptionDTO]
    conditions: list[FacetOptionDTO]
    fuel_types: list[FacetOptionDTO]
    transmissions: list[FacetOptionDTO]
    price_range: PriceRangeDTO | None = Field(description="null when nothing matched")
    year_range: YearRangeDTO | None = Field(description="null when nothing matched")


class VehicleSearchResponseDTO(CamelModel):
    vehicles: list[VehicleResponseDTO]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    filters: FilterOptionsDTO


class VehicleListResponseDTO(CamelModel):
    vehicles: list[VehicleResponseDTO]


class SuggestionDTO(CamelModel):
    type: str
    value: str
    label: str
    count: int
