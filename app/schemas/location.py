"""Location Pydantic schemas for request/response validation."""

from pydantic import BaseModel


class CoordinatesResponse(BaseModel):
    """Longitude/latitude pair in degrees."""

    longitude: float
    latitude: float

    model_config = {"from_attributes": True}


class LocationResponse(BaseModel):
    """Schema for location response."""

    id: int
    address: str
    city: str
    state: str
    country: str
    postal_code: str
    coordinates: CoordinatesResponse

    model_config = {"from_attributes": True}
