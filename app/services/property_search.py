"""Property search: typed filter predicates rendered into one parameterized query."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from geoalchemy2 import Geometry
from sqlalchemy import ColumnElement, Select, and_, cast, exists, func, select
from sqlalchemy.orm import Session, contains_eager

from app.core.exceptions import ValidationFailedError
from app.core.logging import get_logger
from app.models.enums import PropertyType
from app.models.lease import Lease
from app.models.location import Location
from app.models.property import Property
from app.schemas.property import PropertySearchParams

logger = get_logger(__name__)

# Proximity search uses a fixed radius and a flat degree approximation
SEARCH_RADIUS_KM = 1000.0
KM_PER_DEGREE = 111.32
SRID_WGS84 = 4326


class Operator(str, Enum):
    """Comparison applied by a search predicate."""

    IN = "in"
    EQ = "eq"
    GE = "ge"
    LE = "le"
    CONTAINS = "contains"
    LEASE_STARTS_BY = "lease_starts_by"
    WITHIN_DEGREES = "within_degrees"


@dataclass(frozen=True)
class Predicate:
    """One search constraint: a property field, an operator and a bound value."""

    field: str
    operator: Operator
    value: Any

    def to_clause(self) -> ColumnElement[bool]:
        """Render as a SQLAlchemy boolean expression with the value bound."""
        if self.operator is Operator.LEASE_STARTS_BY:
            return exists().where(
                Lease.property_id == Property.id,
                Lease.start_date <= self.value,
            )

        if self.operator is Operator.WITHIN_DEGREES:
            longitude, latitude, degrees = self.value
            origin = func.ST_SetSRID(func.ST_MakePoint(longitude, latitude), SRID_WGS84)
            return func.ST_DWithin(
                cast(Location.coordinates, Geometry(geometry_type=None)),
                origin,
                degrees,
            )

        column = getattr(Property, self.field)
        if self.operator is Operator.IN:
            return column.in_(self.value)
        if self.operator is Operator.EQ:
            return column == self.value
        if self.operator is Operator.GE:
            return column >= self.value
        if self.operator is Operator.LE:
            return column <= self.value
        if self.operator is Operator.CONTAINS:
            return column.contains(self.value)
        raise ValueError(f"Unsupported operator: {self.operator}")


class PropertyQueryBuilder:
    """Accumulates predicates and builds the property/location search query."""

    def __init__(self) -> None:
        self.predicates: list[Predicate] = []

    def add(self, field: str, operator: Operator, value: Any) -> "PropertyQueryBuilder":
        self.predicates.append(Predicate(field, operator, value))
        return self

    @classmethod
    def from_params(cls, params: PropertySearchParams) -> "PropertyQueryBuilder":
        """Add one predicate per filter that is set."""
        builder = cls()

        if params.favorite_ids:
            builder.add("id", Operator.IN, list(params.favorite_ids))
        if params.price_min is not None:
            builder.add("price_per_month", Operator.GE, params.price_min)
        if params.price_max is not None:
            builder.add("price_per_month", Operator.LE, params.price_max)
        if params.beds is not None:
            builder.add("beds", Operator.GE, params.beds)
        if params.baths is not None:
            builder.add("baths", Operator.GE, params.baths)
        if params.square_feet_min is not None:
            builder.add("square_feet", Operator.GE, params.square_feet_min)
        if params.square_feet_max is not None:
            builder.add("square_feet", Operator.LE, params.square_feet_max)
        if params.property_type is not None:
            builder.add("property_type", Operator.EQ, params.property_type.value)
        if params.amenities:
            builder.add("amenities", Operator.CONTAINS, list(params.amenities))
        if params.available_from is not None:
            builder.add("leases", Operator.LEASE_STARTS_BY, params.available_from)
        if params.latitude is not None and params.longitude is not None:
            degrees = SEARCH_RADIUS_KM / KM_PER_DEGREE
            builder.add(
                "coordinates",
                Operator.WITHIN_DEGREES,
                (params.longitude, params.latitude, degrees),
            )

        return builder

    def statement(self) -> Select[tuple[Property]]:
        """Build the SELECT joining each property to its location."""
        stmt = (
            select(Property)
            .join(Property.location)
            .options(contains_eager(Property.location))
            .order_by(Property.id)
        )
        clauses = [predicate.to_clause() for predicate in self.predicates]
        if clauses:
            stmt = stmt.where(and_(*clauses))
        return stmt


def search_properties(db: Session, params: PropertySearchParams) -> list[Property]:
    """Return every property matching the filters."""
    builder = PropertyQueryBuilder.from_params(params)
    logger.debug("Property search with %d predicates", len(builder.predicates))
    return list(db.scalars(builder.statement()).all())


# -- Query string parsing ------------------------------------------------------


def _is_absent(raw: str | None, allow_any: bool = False) -> bool:
    if raw is None or raw.strip() == "":
        return True
    return allow_any and raw.strip().lower() == "any"


def _parse_number(raw: str, field: str, kind: type) -> Any:
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise ValidationFailedError(f"Invalid number for {field}: {raw!r}", field=field) from exc


def _parse_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_date(raw: str) -> datetime | None:
    try:
        value = datetime.fromisoformat(raw.strip())
    except ValueError:
        logger.debug("Ignoring unparseable availableFrom %r", raw)
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def parse_search_params(
    favorite_ids: str | None = None,
    price_min: str | None = None,
    price_max: str | None = None,
    beds: str | None = None,
    baths: str | None = None,
    property_type: str | None = None,
    square_feet_min: str | None = None,
    square_feet_max: str | None = None,
    amenities: str | None = None,
    available_from: str | None = None,
    latitude: str | None = None,
    longitude: str | None = None,
) -> PropertySearchParams:
    """
    Convert raw query-string values into search filters.

    Empty values, and "any" where the listing UI sends it, mean no constraint.
    A malformed number is rejected; an unparseable date is ignored.

    Raises:
        ValidationFailedError: If a numeric or enum value is malformed

    """
    params = PropertySearchParams()

    if not _is_absent(favorite_ids):
        params.favorite_ids = [
            _parse_number(item, "favoriteIds", int) for item in _parse_list(favorite_ids)
        ]
    if not _is_absent(price_min):
        params.price_min = _parse_number(price_min, "priceMin", float)
    if not _is_absent(price_max):
        params.price_max = _parse_number(price_max, "priceMax", float)
    if not _is_absent(beds, allow_any=True):
        params.beds = _parse_number(beds, "beds", int)
    if not _is_absent(baths, allow_any=True):
        params.baths = _parse_number(baths, "baths", float)
    if not _is_absent(square_feet_min):
        params.square_feet_min = _parse_number(square_feet_min, "squareFeetMin", int)
    if not _is_absent(square_feet_max):
        params.square_feet_max = _parse_number(square_feet_max, "squareFeetMax", int)
    if not _is_absent(property_type, allow_any=True):
        try:
            params.property_type = PropertyType(property_type.strip())
        except ValueError as exc:
            raise ValidationFailedError(
                f"Unknown property type: {property_type!r}", field="propertyType"
            ) from exc
    if not _is_absent(amenities, allow_any=True):
        params.amenities = _parse_list(amenities)
    if not _is_absent(available_from):
        params.available_from = _parse_date(available_from)
    if not _is_absent(latitude):
        params.latitude = _parse_number(latitude, "latitude", float)
    if not _is_absent(longitude):
        params.longitude = _parse_number(longitude, "longitude", float)

    return params
