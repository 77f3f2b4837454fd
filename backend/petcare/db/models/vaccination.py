"""Module: vaccination."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from petcare.core.timeutils import utcnow
from petcare.db.base import Base


class VaccinationStatus(str, enum.Enum):
    CURRENT = "Current"
    UPCOMING = "Upcoming"
    OVERDUE = "Overdue"


class Vaccination(Base):
    __tablename__ = "vaccinations"

    vaccination_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    pet_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("pets.pet_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vet_user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True,
    )

    vaccine_name: Mapped[str] = mapped_column(String, nullable=False)
    vaccination_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    next_due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    batch_number: Mapped[str | None] = mapped_column(String, nullable=True)
    manufacturer: Mapped[str | None] = mapped_column(String, nullable=True)
    # Classified when written; not re-evaluated as time passes.
    status: Mapped[VaccinationStatus] = mapped_column(
        Enum(VaccinationStatus, native_enum=False, length=16),
        nullable=False,
        default=VaccinationStatus.CURRENT,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
