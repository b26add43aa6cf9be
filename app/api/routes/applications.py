"""Application API routes."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import ForbiddenError
from app.core.security import AuthenticatedUser, require_roles
from app.schemas.application import (
    ApplicationCreate,
    ApplicationDetailResponse,
    ApplicationListItem,
    ApplicationStatusUpdate,
)
from app.services import application as application_service

router = APIRouter(prefix="/applications", tags=["applications"])


@router.get("", response_model=list[ApplicationListItem])
def list_applications(
    user_id: str | None = Query(None, alias="userId"),
    user_type: str | None = Query(None, alias="userType"),
    user: AuthenticatedUser = Depends(require_roles("manager", "tenant")),
    db: Session = Depends(get_db),
):
    """
    List applications for the calling tenant or manager.

    userId and userType default to the caller's own identity and role.
    """
    user_id = user_id or user.id
    user_type = user_type or user.role
    if user_id != user.id or user_type.lower() != user.role.lower():
        raise ForbiddenError("Cannot list applications for another user")
    return application_service.list_applications(db, user_id, user_type)


@router.post("", response_model=ApplicationDetailResponse, status_code=status.HTTP_201_CREATED)
def create_application(
    application_data: ApplicationCreate,
    user: AuthenticatedUser = Depends(require_roles("tenant")),
    db: Session = Depends(get_db),
):
    """Submit an application; a provisional one-year lease is created with it."""
    if application_data.tenant_cognito_id != user.id:
        raise ForbiddenError("Cannot apply on behalf of another tenant")
    return application_service.create_application(db, application_data)


@router.patch("/{application_id}/status", response_model=ApplicationDetailResponse)
def update_application_status(
    application_id: int,
    status_data: ApplicationStatusUpdate,
    _user: AuthenticatedUser = Depends(require_roles("manager")),
    db: Session = Depends(get_db),
):
    """Approve, deny or otherwise re-tag an application."""
    return application_service.update_application_status(
        db, application_id, status_data.status
    )
