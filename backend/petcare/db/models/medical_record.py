"""Module: medical_record."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from petcare.core.timeutils import utcnow
from petcare.db.base import Base


class MedicalRecordType(str, enum.Enum):
    VACCINATION = "Vaccination"
    TREATMENT = "Treatment"
    CHECKUP = "Checkup"
    SURGERY = "Surgery"
    EMERGENCY = "Emergency"
    PRESCRIPTION = "Prescription"
    OTHER = "Other"


# Free-form clinical entry written by a vet against a pet.
class MedicalRecord(Base):
    __tablename__ = "medical_records"

    medical_record_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
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

    record_type: Mapped[MedicalRecordType] = mapped_column(
        Enum(MedicalRecordType, native_enum=False, length=16), nullable=False
    )
    record_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
