"""Rental application database model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.enums import ApplicationStatus

if TYPE_CHECKING:
    from app.models.lease import Lease
    from app.models.property import Property
    from app.models.tenant import Tenant


class Application(Base):
    """A tenant's application to rent a property."""

    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    application_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    # Free-form tag; ApplicationStatus lists the values the API acts on
    status: Mapped[str] = mapped_column(
        String(20), default=ApplicationStatus.PENDING.value, index=True
    )
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(100))
    phone_number: Mapped[str] = mapped_column(String(20))
    message: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Foreign keys
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)
    tenant_cognito_id: Mapped[str] = mapped_column(
        ForeignKey("tenants.cognito_id"), index=True
    )
    lease_id: Mapped[int | None] = mapped_column(
        ForeignKey("leases.id"), unique=True, nullable=True
    )

    # Relationships
    property: Mapped["Property"] = relationship(back_populates="applications")
    tenant: Mapped["Tenant"] = relationship(back_populates="applications")
    lease: Mapped["Lease | None"] = relationship(back_populates="application")
