"""Lease database model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.application import Application
    from app.models.property import Property
    from app.models.tenant import Tenant


class Lease(Base):
    """Rental agreement binding a tenant to a property at a fixed rent."""

    __tablename__ = "leases"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    rent: Mapped[float]
    deposit: Mapped[float]

    # Foreign keys
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)
    tenant_cognito_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.cognito_id"), index=True
    )

    # Relationships
    property: Mapped["Property"] = relationship(back_populates="leases")
    tenant: Mapped["Tenant"] = relationship(back_populates="leases")
    application: Mapped["Application | None"] = relationship(back_populates="lease")
