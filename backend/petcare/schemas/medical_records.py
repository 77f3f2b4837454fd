"""Module: medical sub-record schemas."""

import uuid
from datetime import datetime

from pydantic import Field

from petcare.db.models.medical_record import MedicalRecordType
from petcare.db.models.prescription import PrescriptionStatus
from petcare.db.models.treatment import TreatmentStatus
from petcare.db.models.vaccination import VaccinationStatus
from petcare.schemas.base import CamelModel, NonBlankStr


# Generic medical records
class MedicalRecordCreate(CamelModel):
    pet_id: uuid.UUID
    record_type: MedicalRecordType
    record_date: datetime
    title: NonBlankStr = Field(max_length=200)
    description: str | None = None
    notes: str | None = None


class MedicalRecordUpdate(CamelModel):
    record_type: MedicalRecordType
    record_date: datetime
    title: NonBlankStr = Field(max_length=200)
    description: str | None = None
    notes: str | None = None


class MedicalRecordRead(CamelModel):
    medical_record_id: uuid.UUID = Field(alias="id")
    pet_id: uuid.UUID
    vet_user_id: uuid.UUID | None = None
    vet_full_name: str | None = None
    record_type: MedicalRecordType
    record_date: datetime
    title: str
    description: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


# Vaccinations
class VaccinationCreate(CamelModel):
    pet_id: uuid.UUID
    vaccine_name: NonBlankStr = Field(max_length=200)
    vaccination_date: datetime
    next_due_date: datetime | None = None
    batch_number: str | None = None
    manufacturer: str | None = None
    notes: str | None = None


class VaccinationUpdate(CamelModel):
    vaccine_name: NonBlankStr = Field(max_length=200)
    vaccination_date: datetime
    next_due_date: datetime | None = None
    batch_number: str | None = None
    manufacturer: str | None = None
    notes: str | None = None


class VaccinationRead(CamelModel):
    vaccination_id: uuid.UUID = Field(alias="id")
    pet_id: uuid.UUID
    vet_user_id: uuid.UUID | None = None
    vet_full_name: str | None = None
    vaccine_name: str
    vaccination_date: datetime
    next_due_date: datetime | None = None
    batch_number: str | None = None
    manufacturer: str | None = None
    status: VaccinationStatus
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class VaccinationReport(CamelModel):
    pet_id: uuid.UUID
    pet_name: str
    vaccinations: list[VaccinationRead]
    overdue_vaccinations: list[VaccinationRead]
    upcoming_vaccinations: list[VaccinationRead]
    is_up_to_date: bool


# Treatments
class TreatmentCreate(CamelModel):
    pet_id: uuid.UUID
    treatment_type: NonBlankStr = Field(max_length=200)
    diagnosis: NonBlankStr
    treatment_description: str | None = None
    treatment_date: datetime
    follow_up_date: datetime | None = None
    status: TreatmentStatus = TreatmentStatus.COMPLETED
    medications: str | None = None
    instructions: str | None = None
    notes: str | None = None


class TreatmentUpdate(CamelModel):
    treatment_type: NonBlankStr = Field(max_length=200)
    diagnosis: NonBlankStr
    treatment_description: str | None = None
    treatment_date: datetime
    follow_up_date: datetime | None = None
    status: TreatmentStatus
    medications: str | None = None
    instructions: str | None = None
    notes: str | None = None


class TreatmentRead(CamelModel):
    treatment_id: uuid.UUID = Field(alias="id")
    pet_id: uuid.UUID
    vet_user_id: uuid.UUID | None = None
    vet_full_name: str | None = None
    treatment_type: str
    diagnosis: str
    treatment_description: str | None = None
    treatment_date: datetime
    follow_up_date: datetime | None = None
    status: TreatmentStatus
    medications: str | None = None
    instructions: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class TreatmentHistoryReport(CamelModel):
    pet_id: uuid.UUID
    pet_name: str
    treatments: list[TreatmentRead]
    last_treatment_date: datetime | None = None
    total_treatments: int


# Prescriptions
class PrescriptionCreate(CamelModel):
    pet_id: uuid.UUID
    medication_name: NonBlankStr = Field(max_length=200)
    dosage: NonBlankStr = Field(max_length=100)
    frequency: NonBlankStr = Field(max_length=100)
    prescribed_date: datetime
    start_date: datetime | None = None
    end_date: datetime | None = None
    duration_days: int | None = Field(default=None, ge=0)
    instructions: str | None = None
    notes: str | None = None


class PrescriptionUpdate(CamelModel):
    medication_name: NonBlankStr = Field(max_length=200)
    dosage: NonBlankStr = Field(max_length=100)
    frequency: NonBlankStr = Field(max_length=100)
    prescribed_date: datetime
    start_date: datetime | None = None
    end_date: datetime | None = None
    duration_days: int | None = Field(default=None, ge=0)
    instructions: str | None = None
    status: PrescriptionStatus
    notes: str | None = None


class PrescriptionRead(CamelModel):
    prescription_id: uuid.UUID = Field(alias="id")
    pet_id: uuid.UUID
    vet_user_id: uuid.UUID | None = None
    vet_full_name: str | None = None
    medication_name: str
    dosage: str
    frequency: str
    prescribed_date: datetime
    start_date: datetime | None = None
    end_date: datetime | None = None
    duration_days: int | None = None
    instructions: str | None = None
    status: PrescriptionStatus
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
