"""Tenant schemas that embed property data."""

from app.schemas.profile import ProfileResponse
from app.schemas.property import PropertyResponse


class TenantDetailResponse(ProfileResponse):
    """Tenant profile with saved favorites."""

    favorites: list[PropertyResponse]
