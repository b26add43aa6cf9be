"""Manager profile API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import AuthenticatedUser, ensure_same_user, require_roles
from app.models.manager import Manager
from app.schemas.profile import ProfileCreate, ProfileResponse, ProfileUpdate
from app.schemas.property import PropertyResponse
from app.services import profile as profile_service
from app.services import property as property_service

router = APIRouter(prefix="/managers", tags=["managers"])


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def create_manager(
    profile_data: ProfileCreate,
    user: AuthenticatedUser = Depends(require_roles("manager")),
    db: Session = Depends(get_db),
):
    """Register a manager profile."""
    ensure_same_user(user, profile_data.cognito_id)
    return profile_service.create_profile(db, Manager, profile_data)


@router.get("/{cognito_id}", response_model=ProfileResponse)
def get_manager(
    cognito_id: str,
    user: AuthenticatedUser = Depends(require_roles("manager")),
    db: Session = Depends(get_db),
):
    """Get a manager profile."""
    ensure_same_user(user, cognito_id)
    return profile_service.get_profile(db, Manager, cognito_id)


@router.put("/{cognito_id}", response_model=ProfileResponse)
def update_manager(
    cognito_id: str,
    profile_data: ProfileUpdate,
    user: AuthenticatedUser = Depends(require_roles("manager")),
    db: Session = Depends(get_db),
):
    """Update manager settings."""
    ensure_same_user(user, cognito_id)
    return profile_service.update_profile(db, Manager, cognito_id, profile_data)


@router.get("/{cognito_id}/properties", response_model=list[PropertyResponse])
def list_manager_properties(
    cognito_id: str,
    user: AuthenticatedUser = Depends(require_roles("manager")),
    db: Session = Depends(get_db),
):
    """List the properties a manager has listed."""
    ensure_same_user(user, cognito_id)
    return property_service.get_properties_for_manager(db, cognito_id)
