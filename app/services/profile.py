"""Manager and tenant profile service."""

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.models.manager import Manager
from app.models.property import Property
from app.models.tenant import Tenant
from app.schemas.profile import ProfileCreate, ProfileUpdate

ProfileModel = type[Manager] | type[Tenant]


def _label(model: ProfileModel) -> str:
    return model.__name__


def get_profile(db: Session, model: ProfileModel, cognito_id: str) -> Manager | Tenant:
    """Get a manager or tenant by identity-provider subject id."""
    profile = db.query(model).filter(model.cognito_id == cognito_id).first()
    if not profile:
        raise NotFoundError(f"{_label(model)} not found")
    return profile


def create_profile(db: Session, model: ProfileModel, profile_data: ProfileCreate) -> Manager | Tenant:
    """Register a manager or tenant profile."""
    existing = db.query(model).filter(model.cognito_id == profile_data.cognito_id).first()
    if existing:
        raise ConflictError(f"{_label(model)} already registered")

    profile = model(**profile_data.model_dump())
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def update_profile(
    db: Session,
    model: ProfileModel,
    cognito_id: str,
    profile_data: ProfileUpdate,
) -> Manager | Tenant:
    """Update name, email or phone number."""
    profile = get_profile(db, model, cognito_id)

    update_data = profile_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(profile, field, value)

    db.commit()
    db.refresh(profile)
    return profile


def get_current_residences(db: Session, cognito_id: str) -> list[Property]:
    """Get the properties a tenant currently occupies."""
    tenant = get_profile(db, Tenant, cognito_id)
    return list(tenant.properties)


def add_favorite(db: Session, cognito_id: str, property_id: int) -> Tenant:
    """Save a property to a tenant's favorites."""
    tenant = get_profile(db, Tenant, cognito_id)
    db_property = db.query(Property).filter(Property.id == property_id).first()
    if not db_property:
        raise NotFoundError("Property not found")

    if db_property not in tenant.favorites:
        tenant.favorites.append(db_property)
        db.commit()
        db.refresh(tenant)
    return tenant


def remove_favorite(db: Session, cognito_id: str, property_id: int) -> Tenant:
    """Remove a property from a tenant's favorites."""
    tenant = get_profile(db, Tenant, cognito_id)
    db_property = db.query(Property).filter(Property.id == property_id).first()
    if not db_property:
        raise NotFoundError("Property not found")

    if db_property in tenant.favorites:
        tenant.favorites.remove(db_property)
        db.commit()
        db.refresh(tenant)
    return tenant
