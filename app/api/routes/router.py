from fastapi import APIRouter

from app.api.routes import ai_routes, auth
from app.api.routes.doctor.patients import router as doctor_patients_router
from app.api.routes.patient.health_history import router as patient_history_router

api_router = APIRouter(prefix="/api")

api_router.include_router(auth.router)

# Patient routes
api_router.include_router(patient_history_router)

# Doctor routes
api_router.include_router(doctor_patients_router)

# AI routes
api_router.include_router(ai_routes.router)
