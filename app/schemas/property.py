"""Property Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel

from app.models.enums import PropertyType
from app.schemas.location import LocationResponse
from app.schemas.profile import ProfileResponse


class AddressCreate(BaseModel):
    """Postal address submitted with a new property."""

    address: str
    city: str
    state: str
    country: str
    postal_code: str


class PropertyCreate(BaseModel):
    """Normalized attributes of a new property."""

    name: str
    description: str = ""
    price_per_month: float
    security_deposit: float
    application_fee: float
    beds: int
    baths: float
    square_feet: int
    property_type: PropertyType
    is_pets_allowed: bool = False
    is_parking_included: bool = False
    amenities: list[str] = []
    highlights: list[str] = []


class PropertyResponse(BaseModel):
    """Schema for property response."""

    id: int
    name: str
    description: str
    price_per_month: float
    security_deposit: float
    application_fee: float
    photo_urls: list[str]
    amenities: list[str]
    highlights: list[str]
    is_pets_allowed: bool
    is_parking_included: bool
    beds: int
    baths: float
    square_feet: int
    property_type: PropertyType
    posted_date: datetime
    average_rating: float | None
    number_of_reviews: int | None
    location_id: int
    manager_cognito_id: str
    location: LocationResponse

    model_config = {"from_attributes": True}


class PropertyDetailResponse(PropertyResponse):
    """Property with its managing account."""

    manager: ProfileResponse


class PropertySearchParams(BaseModel):
    """Optional search filters. A field left as None adds no constraint."""

    favorite_ids: list[int] | None = None
    price_min: float | None = None
    price_max: float | None = None
    beds: int | None = None
    baths: float | None = None
    property_type: PropertyType | None = None
    square_feet_min: int | None = None
    square_feet_max: int | None = None
    amenities: list[str] | None = None
    available_from: datetime | None = None
    latitude: float | None = None
    longitude: float | None = None
