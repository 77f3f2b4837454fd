"""Module: treatment."""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from petcare.core.timeutils import utcnow
from petcare.db.base import Base


class TreatmentStatus(str, enum.Enum):
    PLANNED = "Planned"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# Diagnosis plus the treatment given, with an optional follow-up date.
class Treatment(Base):
    __tablename__ = "treatments"

    treatment_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
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

    treatment_type: Mapped[str] = mapped_column(String, nullable=False)
    diagnosis: Mapped[str] = mapped_column(String, nullable=False)
    treatment_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    treatment_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    follow_up_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    status: Mapped[TreatmentStatus] = mapped_column(
        Enum(TreatmentStatus, native_enum=False, length=16),
        nullable=False,
        default=TreatmentStatus.COMPLETED,
    )
    medications: Mapped[str | None] = mapped_column(Text, nullable=True)
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
