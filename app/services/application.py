"""Application service: submissions, dashboards and approval."""

from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import NotFoundError, ValidationFailedError
from app.core.logging import get_logger
from app.models.application import Application
from app.models.enums import ApplicationStatus, UserType
from app.models.lease import Lease
from app.models.property import Property
from app.models.tenant import Tenant
from app.schemas.application import (
    ApplicationCreate,
    ApplicationListItem,
    ApplicationPropertyResponse,
    ApplicationResponse,
)
from app.schemas.lease import LeaseResponse, LeaseWithPaymentResponse
from app.schemas.profile import ProfileResponse
from app.schemas.property import PropertyDetailResponse

logger = get_logger(__name__)


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def add_one_month(moment: datetime) -> datetime:
    """
    Move a datetime to the same day of the next month.

    A day past the end of the target month overflows into the following
    month, so Jan 31 becomes Mar 3 (or Mar 2 in a leap year).
    """
    year = moment.year + moment.month // 12
    month = moment.month % 12 + 1
    return moment.replace(year=year, month=month, day=1) + timedelta(days=moment.day - 1)


def add_one_year(moment: datetime) -> datetime:
    """Move a datetime one calendar year ahead; Feb 29 overflows to Mar 1."""
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        return moment.replace(year=moment.year + 1, month=3, day=1)


def calculate_next_payment_date(start_date: datetime, now: datetime | None = None) -> datetime:
    """
    Get the first monthly payment date strictly after now.

    Steps forward from the lease start one month at a time, carrying any
    day overflow from one step into the next.
    """
    now = _as_utc(now or datetime.now(UTC))
    next_payment = _as_utc(start_date)
    while next_payment <= now:
        next_payment = add_one_month(next_payment)
    return next_payment


def _new_lease(db_property: Property, tenant_cognito_id: str, now: datetime) -> Lease:
    return Lease(
        start_date=now,
        end_date=add_one_year(now),
        rent=db_property.price_per_month,
        deposit=db_property.security_deposit,
        property_id=db_property.id,
        tenant_cognito_id=tenant_cognito_id,
    )


def get_application(db: Session, application_id: int) -> Application:
    """Get an application with its property, tenant and lease loaded."""
    application = (
        db.query(Application)
        .options(
            joinedload(Application.property).joinedload(Property.location),
            joinedload(Application.tenant),
            joinedload(Application.lease),
        )
        .filter(Application.id == application_id)
        .first()
    )
    if not application:
        raise NotFoundError("Application not found")
    return application


def _latest_lease(db: Session, tenant_cognito_id: str, property_id: int) -> Lease | None:
    return (
        db.query(Lease)
        .filter(
            Lease.tenant_cognito_id == tenant_cognito_id,
            Lease.property_id == property_id,
        )
        .order_by(Lease.start_date.desc(), Lease.id.desc())
        .first()
    )


def list_applications(
    db: Session,
    user_id: str,
    user_type: str,
    now: datetime | None = None,
) -> list[ApplicationListItem]:
    """
    List applications visible to a tenant or a manager.

    Tenants see their own applications; managers see applications for the
    properties they manage. Each row carries the tenant's most recent lease
    on the property, if any, with its next payment date.

    Raises:
        ValidationFailedError: If user_type is neither tenant nor manager

    """
    query = db.query(Application).options(
        joinedload(Application.property).joinedload(Property.location),
        joinedload(Application.property).joinedload(Property.manager),
        joinedload(Application.tenant),
    )

    role = user_type.lower()
    if role == UserType.TENANT:
        query = query.filter(Application.tenant_cognito_id == user_id)
    elif role == UserType.MANAGER:
        query = query.join(Application.property).filter(
            Property.manager_cognito_id == user_id
        )
    else:
        raise ValidationFailedError(f"Unknown user type: {user_type!r}", field="userType")

    items: list[ApplicationListItem] = []
    for application in query.order_by(Application.id).all():
        db_property = application.property
        lease = _latest_lease(db, application.tenant_cognito_id, application.property_id)

        lease_data = None
        if lease:
            lease_data = LeaseWithPaymentResponse(
                **LeaseResponse.model_validate(lease).model_dump(),
                next_payment_date=calculate_next_payment_date(lease.start_date, now),
            )

        items.append(
            ApplicationListItem(
                **ApplicationResponse.model_validate(application).model_dump(),
                property=ApplicationPropertyResponse(
                    **PropertyDetailResponse.model_validate(db_property).model_dump(),
                    address=db_property.location.address,
                ),
                manager=ProfileResponse.model_validate(db_property.manager),
                tenant=ProfileResponse.model_validate(application.tenant),
                lease=lease_data,
            )
        )
    return items


def create_application(
    db: Session,
    application_data: ApplicationCreate,
    now: datetime | None = None,
) -> Application:
    """
    Submit an application together with its provisional lease.

    The lease runs one year from today at the property's current rent and
    deposit. Lease and application are committed together or not at all.

    Raises:
        NotFoundError: If the property or tenant does not exist

    """
    now = now or datetime.now(UTC)

    db_property = db.query(Property).filter(Property.id == application_data.property_id).first()
    if not db_property:
        raise NotFoundError("Property not found")

    tenant = (
        db.query(Tenant)
        .filter(Tenant.cognito_id == application_data.tenant_cognito_id)
        .first()
    )
    if not tenant:
        raise NotFoundError("Tenant not found")

    try:
        lease = _new_lease(db_property, tenant.cognito_id, now)
        db.add(lease)
        db.flush()  # Get lease.id

        application = Application(
            application_date=application_data.application_date or now,
            status=application_data.status,
            name=application_data.name,
            email=application_data.email,
            phone_number=application_data.phone_number,
            message=application_data.message,
            property_id=db_property.id,
            tenant_cognito_id=tenant.cognito_id,
            lease_id=lease.id,
        )
        db.add(application)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(
        "Application %d submitted by %s for property %d with lease %d",
        application.id,
        tenant.cognito_id,
        db_property.id,
        lease.id,
    )
    return get_application(db, application.id)


def update_application_status(
    db: Session,
    application_id: int,
    status: str,
    now: datetime | None = None,
) -> Application:
    """
    Record a manager's decision on an application.

    Approval creates a new lease (the one made at submission is left as is),
    adds the tenant to the property's occupants and binds the new lease to
    the application, all in one transaction. Any other status only changes
    the status tag.

    Raises:
        NotFoundError: If the application does not exist

    """
    application = get_application(db, application_id)

    try:
        if status == ApplicationStatus.APPROVED:
            db_property = application.property
            lease = _new_lease(db_property, application.tenant_cognito_id, now or datetime.now(UTC))
            db.add(lease)

            if application.tenant not in db_property.tenants:
                db_property.tenants.append(application.tenant)

            application.status = status
            application.lease = lease
        else:
            application.status = status
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    if status == ApplicationStatus.APPROVED:
        logger.info(
            "Application %d approved with lease %d", application_id, application.lease_id
        )
    else:
        logger.info("Application %d set to %s", application_id, status)
    db.expire_all()
    return get_application(db, application_id)
