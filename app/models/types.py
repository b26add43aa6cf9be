"""Column types for geographic points.

On PostgreSQL a point is a PostGIS ``geography(POINT,4326)`` written with
``ST_GeogFromText`` and read back with ``ST_AsText``. Other dialects (SQLite
in tests) keep the same WKT text in a plain string column.
"""

import re
from typing import Any, NamedTuple

from sqlalchemy import String
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import GenericFunction
from sqlalchemy.types import TypeDecorator, UserDefinedType

_WKT_POINT = re.compile(r"^\s*POINT\s*\(\s*(\S+)\s+(\S+)\s*\)\s*$", re.IGNORECASE)


class Coordinates(NamedTuple):
    """A longitude/latitude pair in degrees (WGS 84)."""

    longitude: float
    latitude: float

    def to_wkt(self) -> str:
        """Render as a WKT point, longitude first."""
        return f"POINT({self.longitude!r} {self.latitude!r})"

    @classmethod
    def from_wkt(cls, text: str) -> "Coordinates":
        """Parse a WKT point such as ``POINT(-122.4 37.7)``."""
        match = _WKT_POINT.match(text)
        if not match:
            raise ValueError(f"Not a WKT point: {text!r}")
        return cls(float(match.group(1)), float(match.group(2)))


# Sentinel for an address the geocoder could not resolve
UNKNOWN_LOCATION = Coordinates(0.0, 0.0)


class _Geography(UserDefinedType):
    cache_ok = True

    def get_col_spec(self, **kw: Any) -> str:
        return "geography(POINT,4326)"


class point_from_text(GenericFunction):
    inherit_cache = True


class point_as_text(GenericFunction):
    inherit_cache = True


@compiles(point_from_text)
@compiles(point_as_text)
def _passthrough(element, compiler, **kw):
    return compiler.process(element.clauses, **kw)


@compiles(point_from_text, "postgresql")
def _pg_point_from_text(element, compiler, **kw):
    return "ST_GeogFromText(%s)" % compiler.process(element.clauses, **kw)


@compiles(point_as_text, "postgresql")
def _pg_point_as_text(element, compiler, **kw):
    return "ST_AsText(%s)" % compiler.process(element.clauses, **kw)


class GeoPoint(TypeDecorator):
    """Stores a Coordinates value as a geographic point."""

    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(_Geography())
        return dialect.type_descriptor(String(64))

    def bind_expression(self, bindvalue):
        return point_from_text(bindvalue, type_=self)

    def column_expression(self, col):
        return point_as_text(col, type_=self)

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return Coordinates(*value).to_wkt()

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Coordinates.from_wkt(value)
