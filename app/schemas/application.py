"""Application Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.models.enums import ApplicationStatus
from app.schemas.lease import LeaseResponse, LeaseWithPaymentResponse
from app.schemas.profile import ProfileResponse
from app.schemas.property import PropertyDetailResponse, PropertyResponse


class ApplicationCreate(BaseModel):
    """Schema for submitting a rental application."""

    property_id: int
    tenant_cognito_id: str
    name: str
    email: EmailStr
    phone_number: str
    message: str | None = None
    application_date: datetime | None = None
    status: str = ApplicationStatus.PENDING.value


class ApplicationStatusUpdate(BaseModel):
    """Schema for a manager's decision on an application."""

    status: str = Field(min_length=1)


class ApplicationResponse(BaseModel):
    """Schema for application response."""

    id: int
    application_date: datetime
    status: str
    name: str
    email: str
    phone_number: str
    message: str | None
    property_id: int
    tenant_cognito_id: str
    lease_id: int | None

    model_config = {"from_attributes": True}


class ApplicationDetailResponse(ApplicationResponse):
    """Application with its property, tenant and bound lease."""

    property: PropertyResponse
    tenant: ProfileResponse
    lease: LeaseResponse | None


class ApplicationPropertyResponse(PropertyDetailResponse):
    """Property as shown in application listings, with the street address flattened."""

    address: str


class ApplicationListItem(ApplicationResponse):
    """Application row for tenant and manager dashboards."""

    property: ApplicationPropertyResponse
    manager: ProfileResponse
    tenant: ProfileResponse
    lease: LeaseWithPaymentResponse | None
