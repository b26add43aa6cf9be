"""Seed script to populate the database with sample data."""

from app.core.database import SessionLocal, init_db
from app.models import application, associations, lease  # noqa: F401
from app.models.enums import PropertyType
from app.models.location import Location
from app.models.manager import Manager
from app.models.property import Property
from app.models.tenant import Tenant
from app.models.types import Coordinates


def seed_database() -> None:
    """Seed the database with sample data."""
    init_db()
    with SessionLocal() as db:
        # Check if data already exists
        if db.query(Property).first():
            print("Database already has data. Skipping seed.")
            return

        print("Seeding database...")

        manager = Manager(
            cognito_id="seed-manager",
            name="Morgan Manager",
            email="manager@example.com",
            phone_number="+1 555 0100",
        )
        tenant = Tenant(
            cognito_id="seed-tenant",
            name="Taylor Tenant",
            email="tenant@example.com",
            phone_number="+1 555 0101",
        )
        db.add_all([manager, tenant])

        location = Location(
            address="1 Market St",
            city="San Francisco",
            state="CA",
            country="United States",
            postal_code="94105",
            coordinates=Coordinates(-122.3949, 37.7946),
        )
        db.add(location)
        db.flush()

        property_obj = Property(
            name="Bayview Loft",
            description="Bright loft close to the waterfront",
            price_per_month=3200.0,
            security_deposit=3200.0,
            application_fee=50.0,
            amenities=["WiFi", "Gym"],
            highlights=["GreatView"],
            is_pets_allowed=True,
            is_parking_included=False,
            beds=2,
            baths=1.5,
            square_feet=950,
            property_type=PropertyType.APARTMENT.value,
            location_id=location.id,
            manager_cognito_id=manager.cognito_id,
        )
        db.add(property_obj)
        db.commit()

        print(f"Created property: {property_obj.name} (ID: {property_obj.id})")
        print(f"Manager: {manager.cognito_id}, tenant: {tenant.cognito_id}")
        print("Seeding complete!")


if __name__ == "__main__":
    seed_database()
