# backend/petcare/db/models/__init__.py

from petcare.db.models.user import AccountStatus, User, UserRole
from petcare.db.models.pet import Pet
from petcare.db.models.appointment import ALLOWED_TRANSITIONS, Appointment, AppointmentStatus
from petcare.db.models.notification import Notification, NotificationType

from petcare.db.models.medical_record import MedicalRecord, MedicalRecordType
from petcare.db.models.vaccination import Vaccination, VaccinationStatus
from petcare.db.models.treatment import Treatment, TreatmentStatus
from petcare.db.models.prescription import Prescription, PrescriptionStatus
from petcare.db.models.inventory_item import InventoryItem
