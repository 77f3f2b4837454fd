"""Module: medical_records.

Services for the four pet-keyed clinical collections. Vaccination and
prescription status is derived from dates when the record is written and is
not re-evaluated later; an explicit vaccination update re-classifies it.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session

from petcare.core.config import Settings
from petcare.core.errors import ForbiddenError, NotFoundError
from petcare.core.timeutils import to_naive_utc, utcnow
from petcare.db.models.medical_record import MedicalRecord, MedicalRecordType
from petcare.db.models.pet import Pet
from petcare.db.models.prescription import Prescription, PrescriptionStatus
from petcare.db.models.treatment import Treatment
from petcare.db.models.user import UserRole
from petcare.db.models.vaccination import Vaccination, VaccinationStatus
from petcare.repositories.medical_records import (
    MedicalRecordRepository,
    PrescriptionRepository,
    TreatmentRepository,
    VaccinationRepository,
)
from petcare.schemas.medical_records import (
    MedicalRecordCreate,
    MedicalRecordRead,
    MedicalRecordUpdate,
    PrescriptionCreate,
    PrescriptionRead,
    PrescriptionUpdate,
    TreatmentCreate,
    TreatmentHistoryReport,
    TreatmentRead,
    TreatmentUpdate,
    VaccinationCreate,
    VaccinationRead,
    VaccinationReport,
    VaccinationUpdate,
)
from petcare.services.identity import IdentityService, Principal
from petcare.services.pets import PetService

logger = logging.getLogger(__name__)


def classify_vaccination(next_due_date: datetime | None, now: datetime, upcoming_days: int = 30) -> VaccinationStatus:
    if next_due_date is None:
        return VaccinationStatus.CURRENT
    if next_due_date < now:
        return VaccinationStatus.OVERDUE
    if next_due_date <= now + timedelta(days=upcoming_days):
        return VaccinationStatus.UPCOMING
    return VaccinationStatus.CURRENT


def classify_prescription(end_date: datetime | None, now: datetime) -> PrescriptionStatus:
    if end_date is not None and end_date < now:
        return PrescriptionStatus.COMPLETED
    return PrescriptionStatus.ACTIVE


class _PetRecordService(ABC):
    """Shared access rules: clinicians write, the pet's owner may read."""

    label = "Record"

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.pets = PetService(db)
        self.identity = IdentityService(db, settings)

    @property
    @abstractmethod
    def repo(self) -> Any:
        ...

    def _require_clinician(self, caller: Principal) -> None:
        if not caller.has_role(UserRole.VET, UserRole.ADMIN):
            raise ForbiddenError("Only veterinarians and admins can modify medical records")

    def _pet_for_write(self, pet_id: uuid.UUID, caller: Principal) -> Pet:
        self._require_clinician(caller)
        return self.pets.get_pet(pet_id)

    def _pet_for_read(self, pet_id: uuid.UUID, caller: Principal) -> Pet:
        return self.pets.get_for_caller(pet_id, caller)

    def _get(self, record_id: uuid.UUID):
        record = self.repo.get_by_id(record_id)
        if record is None:
            raise NotFoundError(f"{self.label} not found", details={"id": str(record_id)})
        return record

    def get(self, record_id: uuid.UUID, caller: Principal):
        record = self._get(record_id)
        self._pet_for_read(record.pet_id, caller)
        return record

    def list_for_pet(self, pet_id: uuid.UUID, caller: Principal) -> list:
        self._pet_for_read(pet_id, caller)
        return self.repo.list_by_pet(pet_id)

    def delete(self, record_id: uuid.UUID, caller: Principal) -> None:
        self._require_clinician(caller)
        record = self._get(record_id)
        self.repo.delete(record)
        self.db.commit()
        logger.info("%s %s deleted by %s", self.label, record_id, caller.user_id)

    def _save_new(self, record, caller: Principal):
        self.repo.add(record)
        self.db.commit()
        logger.info("%s created for pet %s by %s", self.label, record.pet_id, caller.user_id)
        return record

    def _vet_names(self, records: list) -> dict[uuid.UUID, str]:
        return self.identity.display_names({r.vet_user_id for r in records if r.vet_user_id})


class MedicalRecordService(_PetRecordService):
    label = "Medical record"

    def __init__(self, db: Session, settings: Settings):
        super().__init__(db, settings)
        self.records = MedicalRecordRepository(db)

    @property
    def repo(self) -> MedicalRecordRepository:
        return self.records

    def create(self, payload: MedicalRecordCreate, caller: Principal) -> MedicalRecord:
        pet = self._pet_for_write(payload.pet_id, caller)
        now = utcnow()
        record = MedicalRecord(
            pet_id=pet.pet_id,
            vet_user_id=caller.user_id,
            record_type=payload.record_type,
            record_date=to_naive_utc(payload.record_date),
            title=payload.title,
            description=payload.description,
            notes=payload.notes,
            created_at=now,
        )
        return self._save_new(record, caller)

    def list_for_pet(
        self, pet_id: uuid.UUID, caller: Principal, record_type: MedicalRecordType | None = None
    ) -> list[MedicalRecord]:
        if record_type is None:
            return super().list_for_pet(pet_id, caller)
        self._pet_for_read(pet_id, caller)
        return self.records.list_by_pet_and_type(pet_id, record_type)

    def update(self, record_id: uuid.UUID, payload: MedicalRecordUpdate, caller: Principal) -> MedicalRecord:
        self._require_clinician(caller)
        record = self._get(record_id)
        record.record_type = payload.record_type
        record.record_date = to_naive_utc(payload.record_date)
        record.title = payload.title
        record.description = payload.description
        record.notes = payload.notes
        record.updated_at = utcnow()
        self.db.commit()
        return record

    def to_dtos(self, records: list[MedicalRecord]) -> list[MedicalRecordRead]:
        names = self._vet_names(records)
        return [
            MedicalRecordRead.model_validate(r).model_copy(update={"vet_full_name": names.get(r.vet_user_id)})
            for r in records
        ]

    def to_dto(self, record: MedicalRecord) -> MedicalRecordRead:
        return self.to_dtos([record])[0]


class VaccinationService(_PetRecordService):
    label = "Vaccination"

    def __init__(self, db: Session, settings: Settings):
        super().__init__(db, settings)
        self.vaccinations = VaccinationRepository(db)

    @property
    def repo(self) -> VaccinationRepository:
        return self.vaccinations

    def _classify(self, next_due_date: datetime | None, now: datetime) -> VaccinationStatus:
        return classify_vaccination(next_due_date, now, self.settings.vaccination_upcoming_window_days)

    def create(self, payload: VaccinationCreate, caller: Principal) -> Vaccination:
        pet = self._pet_for_write(payload.pet_id, caller)
        now = utcnow()
        next_due = to_naive_utc(payload.next_due_date)
        record = Vaccination(
            pet_id=pet.pet_id,
            vet_user_id=caller.user_id,
            vaccine_name=payload.vaccine_name,
            vaccination_date=to_naive_utc(payload.vaccination_date),
            next_due_date=next_due,
            batch_number=payload.batch_number,
            manufacturer=payload.manufacturer,
            status=self._classify(next_due, now),
            notes=payload.notes,
            created_at=now,
        )
        return self._save_new(record, caller)

    def update(self, record_id: uuid.UUID, payload: VaccinationUpdate, caller: Principal) -> Vaccination:
        self._require_clinician(caller)
        record = self._get(record_id)
        now = utcnow()
        record.vaccine_name = payload.vaccine_name
        record.vaccination_date = to_naive_utc(payload.vaccination_date)
        record.next_due_date = to_naive_utc(payload.next_due_date)
        record.batch_number = payload.batch_number
        record.manufacturer = payload.manufacturer
        record.notes = payload.notes
        record.status = self._classify(record.next_due_date, now)
        record.updated_at = now
        self.db.commit()
        return record

    def report(self, pet_id: uuid.UUID, caller: Principal) -> VaccinationReport:
        pet = self._pet_for_read(pet_id, caller)
        now = utcnow()
        until = now + timedelta(days=self.settings.vaccination_upcoming_window_days)
        overdue = self.vaccinations.list_overdue(pet_id, now)
        return VaccinationReport(
            pet_id=pet.pet_id,
            pet_name=pet.name,
            vaccinations=self.to_dtos(self.vaccinations.list_by_pet(pet_id)),
            overdue_vaccinations=self.to_dtos(overdue),
            upcoming_vaccinations=self.to_dtos(self.vaccinations.list_upcoming(pet_id, now, until)),
            is_up_to_date=not overdue,
        )

    def to_dtos(self, records: list[Vaccination]) -> list[VaccinationRead]:
        names = self._vet_names(records)
        return [
            VaccinationRead.model_validate(r).model_copy(update={"vet_full_name": names.get(r.vet_user_id)})
            for r in records
        ]

    def to_dto(self, record: Vaccination) -> VaccinationRead:
        return self.to_dtos([record])[0]


class TreatmentService(_PetRecordService):
    label = "Treatment"

    def __init__(self, db: Session, settings: Settings):
        super().__init__(db, settings)
        self.treatments = TreatmentRepository(db)

    @property
    def repo(self) -> TreatmentRepository:
        return self.treatments

    def create(self, payload: TreatmentCreate, caller: Principal) -> Treatment:
        pet = self._pet_for_write(payload.pet_id, caller)
        record = Treatment(
            pet_id=pet.pet_id,
            vet_user_id=caller.user_id,
            treatment_type=payload.treatment_type,
            diagnosis=payload.diagnosis,
            treatment_description=payload.treatment_description,
            treatment_date=to_naive_utc(payload.treatment_date),
            follow_up_date=to_naive_utc(payload.follow_up_date),
            status=payload.status,
            medications=payload.medications,
            instructions=payload.instructions,
            notes=payload.notes,
            created_at=utcnow(),
        )
        return self._save_new(record, caller)

    def update(self, record_id: uuid.UUID, payload: TreatmentUpdate, caller: Principal) -> Treatment:
        self._require_clinician(caller)
        record = self._get(record_id)
        record.treatment_type = payload.treatment_type
        record.diagnosis = payload.diagnosis
        record.treatment_description = payload.treatment_description
        record.treatment_date = to_naive_utc(payload.treatment_date)
        record.follow_up_date = to_naive_utc(payload.follow_up_date)
        record.status = payload.status
        record.medications = payload.medications
        record.instructions = payload.instructions
        record.notes = payload.notes
        record.updated_at = utcnow()
        self.db.commit()
        return record

    def history(self, pet_id: uuid.UUID, caller: Principal) -> TreatmentHistoryReport:
        pet = self._pet_for_read(pet_id, caller)
        treatments = self.treatments.list_by_pet(pet_id)
        return TreatmentHistoryReport(
            pet_id=pet.pet_id,
            pet_name=pet.name,
            treatments=self.to_dtos(treatments),
            last_treatment_date=treatments[0].treatment_date if treatments else None,
            total_treatments=len(treatments),
        )

    def to_dtos(self, records: list[Treatment]) -> list[TreatmentRead]:
        names = self._vet_names(records)
        return [
            TreatmentRead.model_validate(r).model_copy(update={"vet_full_name": names.get(r.vet_user_id)})
            for r in records
        ]

    def to_dto(self, record: Treatment) -> TreatmentRead:
        return self.to_dtos([record])[0]


class PrescriptionService(_PetRecordService):
    label = "Prescription"

    def __init__(self, db: Session, settings: Settings):
        super().__init__(db, settings)
        self.prescriptions = PrescriptionRepository(db)

    @property
    def repo(self) -> PrescriptionRepository:
        return self.prescriptions

    def create(self, payload: PrescriptionCreate, caller: Principal) -> Prescription:
        pet = self._pet_for_write(payload.pet_id, caller)
        now = utcnow()
        end_date = to_naive_utc(payload.end_date)
        record = Prescription(
            pet_id=pet.pet_id,
            vet_user_id=caller.user_id,
            medication_name=payload.medication_name,
            dosage=payload.dosage,
            frequency=payload.frequency,
            prescribed_date=to_naive_utc(payload.prescribed_date),
            start_date=to_naive_utc(payload.start_date),
            end_date=end_date,
            duration_days=payload.duration_days,
            instructions=payload.instructions,
            status=classify_prescription(end_date, now),
            notes=payload.notes,
            created_at=now,
        )
        return self._save_new(record, caller)

    def update(self, record_id: uuid.UUID, payload: PrescriptionUpdate, caller: Principal) -> Prescription:
        self._require_clinician(caller)
        record = self._get(record_id)
        record.medication_name = payload.medication_name
        record.dosage = payload.dosage
        record.frequency = payload.frequency
        record.prescribed_date = to_naive_utc(payload.prescribed_date)
        record.start_date = to_naive_utc(payload.start_date)
        record.end_date = to_naive_utc(payload.end_date)
        record.duration_days = payload.duration_days
        record.instructions = payload.instructions
        record.status = payload.status
        record.notes = payload.notes
        record.updated_at = utcnow()
        self.db.commit()
        return record

    def list_active(self, pet_id: uuid.UUID, caller: Principal) -> list[Prescription]:
        self._pet_for_read(pet_id, caller)
        return self.prescriptions.list_active(pet_id)

    def to_dtos(self, records: list[Prescription]) -> list[PrescriptionRead]:
        names = self._vet_names(records)
        return [
            PrescriptionRead.model_validate(r).model_copy(update={"vet_full_name": names.get(r.vet_user_id)})
            for r in records
        ]

    def to_dto(self, record: Prescription) -> PrescriptionRead:
        return self.to_dtos([record])[0]
