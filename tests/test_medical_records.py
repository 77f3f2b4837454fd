"""
Tests for medical sub-records: derived status, access rules and reports.
"""

import uuid
from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from petcare.core.errors import ForbiddenError, NotFoundError
from petcare.core.timeutils import utcnow
from petcare.db.models import MedicalRecordType, PrescriptionStatus, TreatmentStatus, VaccinationStatus
from petcare.repositories.medical_records import (
    MedicalRecordRepository,
    PrescriptionRepository,
    TreatmentRepository,
    VaccinationRepository,
)
from petcare.schemas.medical_records import (
    MedicalRecordCreate,
    PrescriptionCreate,
    TreatmentCreate,
    VaccinationCreate,
    VaccinationUpdate,
)
from petcare.services.identity import principal_for
from petcare.services.medical_records import (
    MedicalRecordService,
    PrescriptionService,
    TreatmentService,
    VaccinationService,
    _PetRecordService,
    classify_prescription,
    classify_vaccination,
)


@pytest.fixture
def vaccinations(db, settings) -> VaccinationService:
    return VaccinationService(db, settings)


def _vaccination(pet, next_due: datetime | None, name: str = "C5") -> VaccinationCreate:
    return VaccinationCreate(
        pet_id=pet.pet_id,
        vaccine_name=name,
        vaccination_date=utcnow() - timedelta(days=300),
        next_due_date=next_due,
    )


class TestClassification:
    """Test the date-based status rules."""

    @pytest.mark.parametrize(
        "offset, expected",
        [
            (timedelta(days=-1), VaccinationStatus.OVERDUE),
            (timedelta(days=10), VaccinationStatus.UPCOMING),
            (timedelta(days=30), VaccinationStatus.UPCOMING),
            (timedelta(days=60), VaccinationStatus.CURRENT),
        ],
    )
    def test_vaccination_status(self, offset, expected):
        now = datetime(2026, 10, 18, 12, 0)
        assert classify_vaccination(now + offset, now) == expected

    def test_vaccination_without_next_due_is_current(self):
        assert classify_vaccination(None, datetime(2026, 10, 18)) == VaccinationStatus.CURRENT

    def test_prescription_status(self):
        now = datetime(2026, 10, 18, 12, 0)
        assert classify_prescription(now - timedelta(days=1), now) == PrescriptionStatus.COMPLETED
        assert classify_prescription(now + timedelta(days=1), now) == PrescriptionStatus.ACTIVE
        assert classify_prescription(None, now) == PrescriptionStatus.ACTIVE


class TestVaccinations:
    """Test vaccination writes and the report."""

    @pytest.mark.parametrize(
        "days, expected",
        [(-1, VaccinationStatus.OVERDUE), (10, VaccinationStatus.UPCOMING), (60, VaccinationStatus.CURRENT)],
    )
    def test_status_classified_at_creation(self, vaccinations, vet, pet, days, expected):
        record = vaccinations.create(_vaccination(pet, utcnow() + timedelta(days=days)), principal_for(vet))

        assert record.status == expected
        assert record.vet_user_id == vet.user_id

    def test_explicit_update_reclassifies(self, vaccinations, vet, pet):
        record = vaccinations.create(_vaccination(pet, utcnow() + timedelta(days=60)), principal_for(vet))
        update = VaccinationUpdate(
            vaccine_name="C5",
            vaccination_date=record.vaccination_date,
            next_due_date=utcnow() - timedelta(days=2),
        )

        updated = vaccinations.update(record.vaccination_id, update, principal_for(vet))

        assert updated.status == VaccinationStatus.OVERDUE
        assert updated.updated_at is not None

    def test_owner_cannot_create(self, vaccinations, owner, pet):
        with pytest.raises(ForbiddenError):
            vaccinations.create(_vaccination(pet, None), principal_for(owner))

    def test_unknown_pet(self, vaccinations, vet, pet):
        payload = _vaccination(pet, None).model_copy(update={"pet_id": uuid.uuid4()})
        with pytest.raises(NotFoundError):
            vaccinations.create(payload, principal_for(vet))

    def test_report(self, vaccinations, vet, owner, pet):
        caller = principal_for(vet)
        vaccinations.create(_vaccination(pet, utcnow() - timedelta(days=3), "Rabies"), caller)
        vaccinations.create(_vaccination(pet, utcnow() + timedelta(days=12), "C5"), caller)
        vaccinations.create(_vaccination(pet, utcnow() + timedelta(days=200), "Leptospirosis"), caller)

        report = vaccinations.report(pet.pet_id, principal_for(owner))

        assert report.pet_name == "Biscuit"
        assert len(report.vaccinations) == 3
        assert [v.vaccine_name for v in report.overdue_vaccinations] == ["Rabies"]
        assert [v.vaccine_name for v in report.upcoming_vaccinations] == ["C5"]
        assert report.is_up_to_date is False
        assert report.vaccinations[0].vet_full_name == "Dr. Vera Vet"


class TestAccess:
    """Test read access for owners, vets and strangers."""

    def test_owner_reads_own_pet_records(self, db, settings, vet, owner, pet):
        service = MedicalRecordService(db, settings)
        service.create(
            MedicalRecordCreate(
                pet_id=pet.pet_id,
                record_type=MedicalRecordType.CHECKUP,
                record_date=utcnow(),
                title="Annual checkup",
            ),
            principal_for(vet),
        )

        assert len(service.list_for_pet(pet.pet_id, principal_for(owner))) == 1
        assert service.list_for_pet(pet.pet_id, principal_for(owner), MedicalRecordType.SURGERY) == []

    def test_other_owner_is_forbidden(self, db, settings, other_owner, pet):
        with pytest.raises(ForbiddenError):
            TreatmentService(db, settings).list_for_pet(pet.pet_id, principal_for(other_owner))


class TestTreatmentsAndPrescriptions:
    """Test treatment history and prescription status."""

    def test_treatment_defaults_to_completed_and_history_is_newest_first(self, db, settings, vet, owner, pet):
        service = TreatmentService(db, settings)
        for days_ago in (30, 5):
            service.create(
                TreatmentCreate(
                    pet_id=pet.pet_id,
                    treatment_type="Wound care",
                    diagnosis="Laceration",
                    treatment_date=utcnow() - timedelta(days=days_ago),
                ),
                principal_for(vet),
            )

        history = service.history(pet.pet_id, principal_for(owner))

        assert history.total_treatments == 2
        assert all(t.status == TreatmentStatus.COMPLETED for t in history.treatments)
        assert history.last_treatment_date == history.treatments[0].treatment_date
        assert history.treatments[0].treatment_date > history.treatments[1].treatment_date

    def test_prescription_status_and_active_list(self, db, settings, vet, pet):
        service = PrescriptionService(db, settings)
        caller = principal_for(vet)
        finished = service.create(
            PrescriptionCreate(
                pet_id=pet.pet_id,
                medication_name="Amoxicillin",
                dosage="250mg",
                frequency="Twice daily",
                prescribed_date=utcnow() - timedelta(days=20),
                end_date=utcnow() - timedelta(days=6),
            ),
            caller,
        )
        ongoing = service.create(
            PrescriptionCreate(
                pet_id=pet.pet_id,
                medication_name="Meloxicam",
                dosage="1.5mg",
                frequency="Once daily",
                prescribed_date=utcnow(),
                end_date=utcnow() + timedelta(days=7),
            ),
            caller,
        )

        assert finished.status == PrescriptionStatus.COMPLETED
        assert ongoing.status == PrescriptionStatus.ACTIVE
        assert [p.prescription_id for p in service.list_active(pet.pet_id, caller)] == [ongoing.prescription_id]


class TestMedicalApi:
    """Test the HTTP surface of the medical collections."""

    def test_vaccination_crud(self, client, auth_headers, vet, owner, pet):
        due = (utcnow() + timedelta(days=10)).isoformat()
        created = client.post(
            "/api/v1/vaccinations",
            json={
                "petId": str(pet.pet_id),
                "vaccineName": "C5",
                "vaccinationDate": utcnow().isoformat(),
                "nextDueDate": due,
            },
            headers=auth_headers(vet),
        )
        assert created.status_code == 201
        body = created.json()
        assert body["status"] == "Upcoming"
        assert body["vetFullName"] == "Dr. Vera Vet"

        listed = client.get(f"/api/v1/vaccinations/pet/{pet.pet_id}", headers=auth_headers(owner))
        assert [v["id"] for v in listed.json()] == [body["id"]]

        report = client.get(f"/api/v1/vaccinations/pet/{pet.pet_id}/report", headers=auth_headers(owner))
        assert report.json()["isUpToDate"] is True

        denied = client.delete(f"/api/v1/vaccinations/{body['id']}", headers=auth_headers(owner))
        assert denied.status_code == 403

        deleted = client.delete(f"/api/v1/vaccinations/{body['id']}", headers=auth_headers(vet))
        assert deleted.status_code == 204
        missing = client.get(f"/api/v1/vaccinations/{body['id']}", headers=auth_headers(vet))
        assert missing.status_code == 404

    def test_medical_record_type_filter(self, client, auth_headers, vet, pet):
        for record_type in ("Checkup", "Surgery"):
            client.post(
                "/api/v1/medicalrecords",
                json={
                    "petId": str(pet.pet_id),
                    "recordType": record_type,
                    "recordDate": utcnow().isoformat(),
                    "title": f"{record_type} note",
                },
                headers=auth_headers(vet),
            )

        response = client.get(
            f"/api/v1/medicalrecords/pet/{pet.pet_id}?recordType=Surgery", headers=auth_headers(vet)
        )

        assert response.status_code == 200
        assert [r["title"] for r in response.json()] == ["Surgery note"]

    def test_stranger_cannot_read_history(self, client, auth_headers, other_owner, pet):
        response = client.get(f"/api/v1/treatments/pet/{pet.pet_id}/history", headers=auth_headers(other_owner))
        assert response.status_code == 403

    def test_active_prescriptions_endpoint(self, client, auth_headers, vet, owner, pet):
        client.post(
            "/api/v1/prescriptions",
            json={
                "petId": str(pet.pet_id),
                "medicationName": "Meloxicam",
                "dosage": "1.5mg",
                "frequency": "Once daily",
                "prescribedDate": utcnow().isoformat(),
            },
            headers=auth_headers(vet),
        )

        response = client.get(f"/api/v1/prescriptions/pet/{pet.pet_id}/active", headers=auth_headers(owner))

        assert response.status_code == 200
        assert [p["medicationName"] for p in response.json()] == ["Meloxicam"]

    def test_treatment_read_update_delete(self, client, auth_headers, vet, owner, pet):
        headers = auth_headers(vet)
        created = client.post(
            "/api/v1/treatments",
            json={
                "petId": str(pet.pet_id),
                "treatmentType": "Dental",
                "diagnosis": "Tartar",
                "treatmentDate": utcnow().isoformat(),
            },
            headers=headers,
        )
        assert created.status_code == 201
        treatment_id = created.json()["id"]

        fetched = client.get(f"/api/v1/treatments/{treatment_id}", headers=auth_headers(owner))
        assert fetched.status_code == 200
        assert fetched.json()["diagnosis"] == "Tartar"

        listed = client.get(f"/api/v1/treatments/pet/{pet.pet_id}", headers=auth_headers(owner))
        assert [t["id"] for t in listed.json()] == [treatment_id]

        updated = client.put(
            f"/api/v1/treatments/{treatment_id}",
            json={
                "treatmentType": "Dental",
                "diagnosis": "Tartar and gingivitis",
                "treatmentDate": utcnow().isoformat(),
                "status": "InProgress",
            },
            headers=headers,
        )
        assert updated.status_code == 200
        assert updated.json()["status"] == "InProgress"

        assert client.delete(f"/api/v1/treatments/{treatment_id}", headers=headers).status_code == 204
        assert client.get(f"/api/v1/treatments/{treatment_id}", headers=headers).status_code == 404

    def test_blank_vaccine_name_is_rejected(self, client, auth_headers, vet, pet):
        response = client.post(
            "/api/v1/vaccinations",
            json={"petId": str(pet.pet_id), "vaccineName": "   ", "vaccinationDate": utcnow().isoformat()},
            headers=auth_headers(vet),
        )

        assert response.status_code == 422
        assert response.json()["details"]["fields"][0]["field"] == "body.vaccineName"


class TestRecordRepositories:
    """Test the shared lookups of the pet-keyed repositories."""

    @pytest.mark.parametrize(
        "repository_cls",
        [MedicalRecordRepository, VaccinationRepository, TreatmentRepository, PrescriptionRepository],
    )
    def test_lookups_on_empty_tables(self, db, pet, repository_cls):
        repository = repository_cls(db)

        assert repository.get_by_id(uuid.uuid4()) is None
        assert repository.list_by_pet(pet.pet_id) == []

    def test_lookup_after_add(self, db, settings, vet, pet):
        created = TreatmentService(db, settings).create(
            TreatmentCreate(pet_id=pet.pet_id, treatment_type="Wound care", diagnosis="Graze", treatment_date=utcnow()),
            principal_for(vet),
        )
        repository = TreatmentRepository(db)

        assert repository.get_by_id(created.treatment_id) is created
        assert repository.list_by_pet(pet.pet_id) == [created]

    def test_record_service_needs_a_repository(self, db, settings):
        class IncompleteService(_PetRecordService):
            pass

        with pytest.raises(TypeError):
            IncompleteService(db, settings)

    def test_required_text_is_stripped(self, pet):
        payload = TreatmentCreate(
            pet_id=pet.pet_id, treatment_type="  Dental ", diagnosis=" Tartar", treatment_date=utcnow()
        )
        assert (payload.treatment_type, payload.diagnosis) == ("Dental", "Tartar")

        with pytest.raises(ValidationError):
            TreatmentCreate(pet_id=pet.pet_id, treatment_type="Dental", diagnosis="  ", treatment_date=utcnow())
