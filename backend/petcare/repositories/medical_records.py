"""Module: medical sub-record repositories.

One repository per pet-keyed collection. They share the same CRUD shape and
only differ in ordering and a few report queries.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from petcare.db.models.medical_record import MedicalRecord, MedicalRecordType
from petcare.db.models.prescription import Prescription, PrescriptionStatus
from petcare.db.models.treatment import Treatment
from petcare.db.models.vaccination import Vaccination


class _PetRecordRepository:
    model: Any
    # Attribute names on the model; columns are resolved through the mapped class.
    id_name: str
    date_name: str

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, record_id: uuid.UUID):
        id_column = getattr(self.model, self.id_name)
        return self.db.execute(select(self.model).where(id_column == record_id)).scalar_one_or_none()

    def list_by_pet(self, pet_id: uuid.UUID) -> list:
        date_column = getattr(self.model, self.date_name)
        stmt = select(self.model).where(self.model.pet_id == pet_id).order_by(date_column.desc())
        return list(self.db.execute(stmt).scalars().all())

    def add(self, record):
        self.db.add(record)
        self.db.flush()
        return record

    def delete(self, record) -> None:
        self.db.delete(record)
        self.db.flush()


class MedicalRecordRepository(_PetRecordRepository):
    model = MedicalRecord
    id_name = "medical_record_id"
    date_name = "record_date"

    def list_by_pet_and_type(self, pet_id: uuid.UUID, record_type: MedicalRecordType) -> list[MedicalRecord]:
        stmt = (
            select(MedicalRecord)
            .where(MedicalRecord.pet_id == pet_id, MedicalRecord.record_type == record_type)
            .order_by(MedicalRecord.record_date.desc())
        )
        return list(self.db.execute(stmt).scalars().all())


class VaccinationRepository(_PetRecordRepository):
    model = Vaccination
    id_name = "vaccination_id"
    date_name = "vaccination_date"

    # Evaluated against live dates, not the stored status column.
    def list_overdue(self, pet_id: uuid.UUID, now: datetime) -> list[Vaccination]:
        stmt = (
            select(Vaccination)
            .where(
                Vaccination.pet_id == pet_id,
                Vaccination.next_due_date.is_not(None),
                Vaccination.next_due_date < now,
            )
            .order_by(Vaccination.next_due_date.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_upcoming(self, pet_id: uuid.UUID, now: datetime, until: datetime) -> list[Vaccination]:
        stmt = (
            select(Vaccination)
            .where(
                Vaccination.pet_id == pet_id,
                Vaccination.next_due_date >= now,
                Vaccination.next_due_date <= until,
            )
            .order_by(Vaccination.next_due_date.asc())
        )
        return list(self.db.execute(stmt).scalars().all())


class TreatmentRepository(_PetRecordRepository):
    model = Treatment
    id_name = "treatment_id"
    date_name = "treatment_date"


class PrescriptionRepository(_PetRecordRepository):
    model = Prescription
    id_name = "prescription_id"
    date_name = "prescribed_date"

    def list_active(self, pet_id: uuid.UUID) -> list[Prescription]:
        stmt = (
            select(Prescription)
            .where(Prescription.pet_id == pet_id, Prescription.status == PrescriptionStatus.ACTIVE)
            .order_by(Prescription.prescribed_date.desc())
        )
        return list(self.db.execute(stmt).scalars().all())
