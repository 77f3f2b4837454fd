"""Module: seed_data."""

import csv
import random
import string
from datetime import timedelta
from pathlib import Path

from faker import Faker
from sqlalchemy import delete, select

from petcare.core.config import get_settings
from petcare.core.security import hash_password
from petcare.core.timeutils import utcnow
from petcare.db.init_db import init_db
from petcare.db.models.appointment import Appointment, AppointmentStatus
from petcare.db.models.notification import Notification
from petcare.db.models.pet import Pet
from petcare.db.models.user import AccountStatus, User, UserRole
from petcare.db.session import build_engine, build_session_factory

fake = Faker()

SPECIES_BREEDS = {
    "Dog": ["Labrador", "Kelpie", "Border Collie", "Staffy", "Cavoodle"],
    "Cat": ["Domestic Shorthair", "Ragdoll", "Siamese", "Burmese"],
    "Rabbit": ["Mini Lop", "Netherland Dwarf"],
}
VISIT_REASONS = ["Annual checkup", "Vaccination", "Skin irritation", "Limping", "Dental check", "Desexing consult"]


# Shared helpers used by multiple seed builders.
def generate_password(length: int = 12) -> str:
    # Always at least one letter and one digit.
    chars = string.ascii_letters + string.digits
    body = "".join(random.choice(chars) for _ in range(length - 2))
    return random.choice(string.ascii_letters) + random.choice(string.digits) + body


def export_credentials(rows: list[tuple[User, str]]) -> Path:
    out_path = Path(__file__).resolve().parent / "seeded_user_credentials.csv"
    with out_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["user_id", "email", "password", "role"])
        for user, password in rows:
            writer.writerow([str(user.user_id), user.email, password, user.role.value])
    return out_path


def reset_db(session) -> None:
    # Children first so FK constraints hold.
    for model in (Notification, Appointment, Pet, User):
        session.execute(delete(model))
    session.commit()


def seed_admin(session, settings) -> tuple[User, str]:
    existing = session.execute(
        select(User).where(User.email == settings.seed_admin_email.lower())
    ).scalar_one_or_none()
    if existing:
        return existing, settings.seed_admin_password
    admin = User(
        email=settings.seed_admin_email.lower(),
        password_hash=hash_password(settings.seed_admin_password),
        role=UserRole.ADMIN,
        account_status=AccountStatus.ACTIVE,
        full_name=settings.seed_admin_full_name,
    )
    session.add(admin)
    session.commit()
    return admin, settings.seed_admin_password


def seed_users(session, role: UserRole, n: int) -> list[tuple[User, str]]:
    rows: list[tuple[User, str]] = []
    for _ in range(n):
        password = generate_password()
        user = User(
            email=fake.unique.email().lower(),
            password_hash=hash_password(password),
            role=role,
            account_status=AccountStatus.ACTIVE,
            full_name=("Dr. " if role == UserRole.VET else "") + fake.name(),
            phone=fake.phone_number(),
        )
        rows.append((user, password))
    session.add_all([user for user, _ in rows])
    session.commit()
    return rows


def seed_pets(session, owners: list[User], max_per_owner: int = 3) -> list[Pet]:
    pets: list[Pet] = []
    for owner in owners:
        for _ in range(random.randint(1, max_per_owner)):
            species = random.choice(list(SPECIES_BREEDS))
            pets.append(Pet(
                owner_user_id=owner.user_id,
                name=fake.first_name(),
                species=species,
                breed=random.choice(SPECIES_BREEDS[species]),
                date_of_birth=fake.date_between(start_date="-15y", end_date="-3m"),
            ))
    session.add_all(pets)
    session.commit()
    return pets


def seed_appointments(session, pets: list[Pet], vets: list[User], admin: User) -> int:
    # Mix of open requests and closed history; booked on the hour or half hour.
    now = utcnow().replace(minute=0, second=0, microsecond=0)
    appointments: list[Appointment] = []
    for pet in pets:
        for _ in range(random.randint(0, 3)):
            requested = now + timedelta(days=random.randint(-60, 30), hours=random.randint(-8, 8))
            requested = requested.replace(minute=random.choice([0, 30]))
            if requested > now:
                status = random.choice([AppointmentStatus.PENDING, AppointmentStatus.APPROVED])
            else:
                status = random.choices(
                    population=[AppointmentStatus.COMPLETED, AppointmentStatus.NO_SHOW, AppointmentStatus.CANCELLED],
                    weights=[0.75, 0.1, 0.15],
                    k=1,
                )[0]

            vet = random.choice(vets) if status != AppointmentStatus.PENDING else None
            appointments.append(Appointment(
                pet_id=pet.pet_id,
                owner_user_id=pet.owner_user_id,
                vet_user_id=vet.user_id if vet else None,
                requested_datetime=requested,
                actual_datetime=requested if vet else None,
                reason_for_visit=random.choice(VISIT_REASONS),
                status=status,
                created_at=requested - timedelta(days=random.randint(1, 14)),
                updated_at=now if status != AppointmentStatus.PENDING else None,
                updated_by_user_id=admin.user_id if status != AppointmentStatus.PENDING else None,
            ))
    session.add_all(appointments)
    session.commit()
    return len(appointments)


if __name__ == "__main__":
    # Full reseed pipeline: python -m petcare.scripts.seed_data
    settings = get_settings()
    engine = build_engine(settings)
    init_db(engine)
    session = build_session_factory(engine)()
    try:
        print("Resetting tables...")
        reset_db(session)

        print("Seeding admin account...")
        admin, admin_password = seed_admin(session, settings)

        print("Seeding vets (6)...")
        vet_rows = seed_users(session, UserRole.VET, 6)

        print("Seeding owners (40)...")
        owner_rows = seed_users(session, UserRole.OWNER, 40)

        print("Seeding pets...")
        pets = seed_pets(session, [user for user, _ in owner_rows])

        print("Seeding appointments...")
        appointment_n = seed_appointments(session, pets, [user for user, _ in vet_rows], admin)

        creds_path = export_credentials([(admin, admin_password), *vet_rows, *owner_rows])
        print(f"Done. pets={len(pets)}, appointments={appointment_n}")
        print(f"Credentials export: {creds_path}")
    finally:
        session.close()
