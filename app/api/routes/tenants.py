"""Tenant profile API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import AuthenticatedUser, ensure_same_user, require_roles
from app.models.tenant import Tenant
from app.schemas.profile import ProfileCreate, ProfileResponse, ProfileUpdate
from app.schemas.property import PropertyResponse
from app.schemas.tenant import TenantDetailResponse
from app.services import profile as profile_service

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def create_tenant(
    profile_data: ProfileCreate,
    user: AuthenticatedUser = Depends(require_roles("tenant")),
    db: Session = Depends(get_db),
):
    """Register a tenant profile."""
    ensure_same_user(user, profile_data.cognito_id)
    return profile_service.create_profile(db, Tenant, profile_data)


@router.get("/{cognito_id}", response_model=TenantDetailResponse)
def get_tenant(
    cognito_id: str,
    user: AuthenticatedUser = Depends(require_roles("tenant")),
    db: Session = Depends(get_db),
):
    """Get a tenant profile with saved favorites."""
    ensure_same_user(user, cognito_id)
    return profile_service.get_profile(db, Tenant, cognito_id)


@router.put("/{cognito_id}", response_model=ProfileResponse)
def update_tenant(
    cognito_id: str,
    profile_data: ProfileUpdate,
    user: AuthenticatedUser = Depends(require_roles("tenant")),
    db: Session = Depends(get_db),
):
    """Update tenant settings."""
    ensure_same_user(user, cognito_id)
    return profile_service.update_profile(db, Tenant, cognito_id, profile_data)


@router.get("/{cognito_id}/current-residences", response_model=list[PropertyResponse])
def list_current_residences(
    cognito_id: str,
    user: AuthenticatedUser = Depends(require_roles("tenant")),
    db: Session = Depends(get_db),
):
    """List the properties the tenant currently occupies."""
    ensure_same_user(user, cognito_id)
    return profile_service.get_current_residences(db, cognito_id)


@router.post("/{cognito_id}/favorites/{property_id}", response_model=TenantDetailResponse)
def add_favorite(
    cognito_id: str,
    property_id: int,
    user: AuthenticatedUser = Depends(require_roles("tenant")),
    db: Session = Depends(get_db),
):
    """Save a property to the tenant's favorites."""
    ensure_same_user(user, cognito_id)
    return profile_service.add_favorite(db, cognito_id, property_id)


@router.delete("/{cognito_id}/favorites/{property_id}", response_model=TenantDetailResponse)
def remove_favorite(
    cognito_id: str,
    property_id: int,
    user: AuthenticatedUser = Depends(require_roles("tenant")),
    db: Session = Depends(get_db),
):
    """Remove a property from the tenant's favorites."""
    ensure_same_user(user, cognito_id)
    return profile_service.remove_favorite(db, cognito_id, property_id)
