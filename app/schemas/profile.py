"""Manager and tenant profile schemas."""

from pydantic import BaseModel, EmailStr


class ProfileBase(BaseModel):
    """Fields shared by manager and tenant profiles."""

    name: str
    email: EmailStr
    phone_number: str


class ProfileCreate(ProfileBase):
    """Schema for registering a profile for an identity-provider subject."""

    cognito_id: str


class ProfileUpdate(BaseModel):
    """Schema for updating profile settings."""

    name: str | None = None
    email: EmailStr | None = None
    phone_number: str | None = None


class ProfileResponse(ProfileBase):
    """Schema for manager or tenant response."""

    id: int
    cognito_id: str

    model_config = {"from_attributes": True}
