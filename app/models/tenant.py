"""Tenant database model."""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.application import Application
    from app.models.lease import Lease
    from app.models.property import Property


class Tenant(Base):
    """Tenant, identified by the identity provider's subject id."""

    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    cognito_id: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(100))
    phone_number: Mapped[str] = mapped_column(String(20))

    # Relationships
    properties: Mapped[list["Property"]] = relationship(
        secondary="tenant_property_association",
        back_populates="tenants",
    )
    favorites: Mapped[list["Property"]] = relationship(
        secondary="tenant_favorite_association",
        back_populates="favorited_by",
    )
    applications: Mapped[list["Application"]] = relationship(back_populates="tenant")
    leases: Mapped[list["Lease"]] = relationship(back_populates="tenant")
