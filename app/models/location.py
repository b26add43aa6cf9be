"""Location database model."""

from typing import TYPE_CHECKING

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.types import Coordinates, GeoPoint

if TYPE_CHECKING:
    from app.models.property import Property


class Location(Base):
    """Postal address of a property and the point it geocoded to."""

    __tablename__ = "locations"
    __table_args__ = (
        Index("ix_locations_coordinates", "coordinates", postgresql_using="gist"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    address: Mapped[str] = mapped_column(String(255))
    city: Mapped[str] = mapped_column(String(100))
    state: Mapped[str] = mapped_column(String(100))
    country: Mapped[str] = mapped_column(String(100))
    postal_code: Mapped[str] = mapped_column(String(20))
    coordinates: Mapped[Coordinates] = mapped_column(GeoPoint())

    # Relationships
    properties: Mapped[list["Property"]] = relationship(back_populates="location")
