"""Property database model."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.enums import PropertyType

if TYPE_CHECKING:
    from app.models.application import Application
    from app.models.lease import Lease
    from app.models.location import Location
    from app.models.manager import Manager
    from app.models.tenant import Tenant

# Text array on PostgreSQL (supports @> containment), JSON list elsewhere
StringList = ARRAY(String).with_variant(JSON(), "sqlite")


class Property(Base):
    """Rental listing published by a manager."""

    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    price_per_month: Mapped[float] = mapped_column(index=True)
    security_deposit: Mapped[float]
    application_fee: Mapped[float]
    photo_urls: Mapped[list[str]] = mapped_column(StringList, default=list)
    amenities: Mapped[list[str]] = mapped_column(StringList, default=list)
    highlights: Mapped[list[str]] = mapped_column(StringList, default=list)
    is_pets_allowed: Mapped[bool] = mapped_column(default=False)
    is_parking_included: Mapped[bool] = mapped_column(default=False)
    beds: Mapped[int]
    baths: Mapped[float]
    square_feet: Mapped[int]
    property_type: Mapped[PropertyType] = mapped_column(String(20), index=True)
    posted_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    average_rating: Mapped[float | None] = mapped_column(default=0.0, nullable=True)
    number_of_reviews: Mapped[int | None] = mapped_column(default=0, nullable=True)

    # Foreign keys
    location_id: Mapped[int] = mapped_column(ForeignKey("locations.id"), index=True)
    manager_cognito_id: Mapped[str] = mapped_column(
        ForeignKey("managers.cognito_id"), index=True
    )

    # Relationships
    location: Mapped["Location"] = relationship(back_populates="properties")
    manager: Mapped["Manager"] = relationship(back_populates="managed_properties")
    leases: Mapped[list["Lease"]] = relationship(back_populates="property")
    applications: Mapped[list["Application"]] = relationship(back_populates="property")
    tenants: Mapped[list["Tenant"]] = relationship(
        secondary="tenant_property_association",
        back_populates="properties",
    )
    favorited_by: Mapped[list["Tenant"]] = relationship(
        secondary="tenant_favorite_association",
        back_populates="favorites",
    )
