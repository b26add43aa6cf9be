"""Association tables for many-to-many relationships."""

from sqlalchemy import Column, ForeignKey, Table

from app.core.database import Base

# Occupancy: tenants currently living in a property
tenant_property_association = Table(
    "tenant_property_association",
    Base.metadata,
    Column("tenant_id", ForeignKey("tenants.id"), primary_key=True),
    Column("property_id", ForeignKey("properties.id"), primary_key=True),
)

# Favorites: properties a tenant has saved
tenant_favorite_association = Table(
    "tenant_favorite_association",
    Base.metadata,
    Column("tenant_id", ForeignKey("tenants.id"), primary_key=True),
    Column("property_id", ForeignKey("properties.id"), primary_key=True),
)
