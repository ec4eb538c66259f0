"""Typed vehicle query expressions.

A VehicleQuery is a conjunction of predicate nodes. Each node evaluates
against an in-memory Vehicle and the PostgreSQL adapter translates the same
nodes into SQL, so both stores answer a query identically.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Union

from carbitrage.domain.vehicle import Vehicle, VehicleSearchCriteria


class VehicleField(str, Enum):
    ID = "id"
    MAKE = "make"
    MODEL = "model"
    YEAR = "year"
    PRICE = "price"
    MILEAGE = "mileage"
    CONDITION = "condition"
    BODY_TYPE = "body_type"
    FUEL_TYPE = "fuel_type"
    TRANSMISSION = "transmission"
    CITY = "city"
    STATE = "state"
    DESCRIPTION = "description"


TEXT_SEARCH_FIELDS: tuple[VehicleField, ...] = (
    VehicleField.MAKE,
    VehicleField.MODEL,
    VehicleField.DESCRIPTION,
    VehicleField.CITY,
    VehicleField.STATE,
)

SIMILAR_PRICE_LOWER = Decimal("0.8")
SIMILAR_PRICE_UPPER = Decimal("1.2")


def field_value(vehicle: Vehicle, field: VehicleField) -> Any:
    if field is VehicleField.CITY:
        return vehicle.location.city
    if field is VehicleField.STATE:
        return vehicle.location.state
    if field is VehicleField.CONDITION:
        return vehicle.condition.value
    return getattr(vehicle, field.value)


def _text(vehicle: Vehicle, field: VehicleField) -> str:
    value = field_value(vehicle, field)
    return "" if value is None else str(value).lower()


@dataclass(frozen=True, slots=True)
class ContainsAny:
    """Case-insensitive substring match against any of the values."""

    field: VehicleField
    values: tuple[str, ...]

    def matches(self, vehicle: Vehicle) -> bool:
        text = _text(vehicle, self.field)
        return any(value.lower() in text for value in self.values)


@dataclass(frozen=True, slots=True)
class EqualsAny:
    """Case-insensitive equality against any of the values."""

    field: VehicleField
    values: tuple[str, ...]

    def matches(self, vehicle: Vehicle) -> bool:
        return _text(vehicle, self.field) in {value.lower() for value in self.values}


@dataclass(frozen=True, slots=True)
class Between:
    """Inclusive numeric range; a None bound is open."""

    field: VehicleField
    lower: int | Decimal | None = None
    upper: int | Decimal | None = None

    def matches(self, vehicle: Vehicle) -> bool:
        value = field_value(vehicle, self.field)
        if self.lower is not None and value < self.lower:
            return False
        if self.upper is not None and value > self.upper:
            return False
        return True


@dataclass(frozen=True, slots=True)
class Keywords:
    """Every term must appear in at least one of the fields."""

    fields: tuple[VehicleField, ...]
    terms: tuple[str, ...]

    def matches(self, vehicle: Vehicle) -> bool:
        texts = [_text(vehicle, field) for field in self.fields]
        return all(any(term.lower() in text for text in texts) for term in self.terms)


@dataclass(frozen=True, slots=True)
class AnyOf:
    predicates: tuple[Predicate, ...]

    def matches(self, vehicle: Vehicle) -> bool:
        return any(predicate.matches(vehicle) for predicate in self.predicates)


@dataclass(frozen=True, slots=True)
class Not:
    predicate: Predicate

    def matches(self, vehicle: Vehicle) -> bool:
        return not self.predicate.matches(vehicle)


Predicate = Union[ContainsAny, EqualsAny, Between, Keywords, AnyOf, Not]


@dataclass(frozen=True, slots=True)
class VehicleQuery:
    """Conjunction of predicates. An empty query matches every vehicle."""

    predicates: tuple[Predicate, ...] = ()

    def matches(self, vehicle: Vehicle) -> bool:
        return all(predicate.matches(vehicle) for predicate in self.predicates)


def build_query(criteria: VehicleSearchCriteria) -> VehicleQuery:
    """
    Translate search criteria into a query.

    Predicates are emitted in a fixed order and only for criteria that are
    present, so absent criteria never narrow the result.
    """
    predicates: list[Predicate] = []

    if criteria.query:
        terms = tuple(criteria.query.split())
        if terms:
            predicates.append(Keywords(fields=TEXT_SEARCH_FIELDS, terms=terms))

    if criteria.makes:
        predicates.append(ContainsAny(VehicleField.MAKE, criteria.makes))
    if criteria.models:
        predicates.append(ContainsAny(VehicleField.MODEL, criteria.models))

    if criteria.year_min is not None or criteria.year_max is not None:
        predicates.append(Between(VehicleField.YEAR, criteria.year_min, criteria.year_max))
    if criteria.price_min is not None or criteria.price_max is not None:
        predicates.append(Between(VehicleField.PRICE, criteria.price_min, criteria.price_max))
    if criteria.mileage_max is not None:
        predicates.append(Between(VehicleField.MILEAGE, upper=criteria.mileage_max))

    if criteria.conditions:
        predicates.append(
            EqualsAny(
                VehicleField.CONDITION,
                tuple(condition.value for condition in criteria.conditions),
            )
        )
    if criteria.body_types:
        predicates.append(ContainsAny(VehicleField.BODY_TYPE, criteria.body_types))
    if criteria.fuel_types:
        predicates.append(ContainsAny(VehicleField.FUEL_TYPE, criteria.fuel_types))
    if criteria.transmissions:
        predicates.append(ContainsAny(VehicleField.TRANSMISSION, criteria.transmissions))

    if criteria.city:
        predicates.append(ContainsAny(VehicleField.CITY, (criteria.city,)))
    if criteria.state:
        predicates.append(ContainsAny(VehicleField.STATE, (criteria.state,)))

    return VehicleQuery(predicates=tuple(predicates))


def similar_query(vehicle: Vehicle) -> VehicleQuery:
    """Same make, same model or body type, price within +/-20%, excluding itself."""
    return VehicleQuery(
        predicates=(
            Not(EqualsAny(VehicleField.ID, (vehicle.id,))),
            EqualsAny(VehicleField.MAKE, (vehicle.make,)),
            AnyOf(
                (
                    EqualsAny(VehicleField.MODEL, (vehicle.model,)),
                    EqualsAny(VehicleField.BODY_TYPE, (vehicle.body_type,)),
                )
            ),
            Between(
                VehicleField.PRICE,
                lower=vehicle.price * SIMILAR_PRICE_LOWER,
                upper=vehicle.price * SIMILAR_PRICE_UPPER,
            ),
        )
    )
