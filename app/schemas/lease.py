"""Lease Pydantic schemas for responses."""

from datetime import datetime

from pydantic import BaseModel


class LeaseResponse(BaseModel):
    """Schema for lease response."""

    id: int
    start_date: datetime
    end_date: datetime
    rent: float
    deposit: float
    property_id: int
    tenant_cognito_id: str

    model_config = {"from_attributes": True}


class LeaseWithPaymentResponse(LeaseResponse):
    """Lease plus the next rent due date."""

    next_payment_date: datetime
