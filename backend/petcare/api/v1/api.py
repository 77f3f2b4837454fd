"""Module: api."""

from fastapi import APIRouter

# Operational and identity routes.
from petcare.api.v1.routes.health import router as health_router
from petcare.api.v1.routes.auth import router as auth_router
from petcare.api.v1.routes.users import router as users_router
from petcare.api.v1.routes.admin_users import router as admin_users_router

# Clinic workflow routes used by the SPA.
from petcare.api.v1.routes.pets import router as pets_router
from petcare.api.v1.routes.appointments import router as appointments_router
from petcare.api.v1.routes.notifications import router as notifications_router
from petcare.api.v1.routes.inventory import router as inventory_router

# Medical sub-records.
from petcare.api.v1.routes.medical_records import router as medical_records_router
from petcare.api.v1.routes.vaccinations import router as vaccinations_router
from petcare.api.v1.routes.treatments import router as treatments_router
from petcare.api.v1.routes.prescriptions import router as prescriptions_router


api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(admin_users_router, prefix="/admin/users", tags=["admin"])

api_router.include_router(pets_router, prefix="/pets", tags=["pets"])
api_router.include_router(appointments_router, prefix="/appointments", tags=["appointments"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["notifications"])
api_router.include_router(inventory_router, prefix="/inventory", tags=["inventory"])

api_router.include_router(medical_records_router, prefix="/medicalrecords", tags=["medical records"])
api_router.include_router(vaccinations_router, prefix="/vaccinations", tags=["vaccinations"])
api_router.include_router(treatments_router, prefix="/treatments", tags=["treatments"])
api_router.include_router(prescriptions_router, prefix="/prescriptions", tags=["prescriptions"])
