"""Patient self-service routes: own history and latest AI insight."""
from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import require_role
from app.core.firebase import get_db
from app.services.health_service import HealthService
from app.services.patient_service import PatientService

router = APIRouter(prefix="/patient", tags=["patient"])


@router.get("/health-history")
def get_health_history(user=Depends(require_role(["patient"])), db=Depends(get_db)):
    patients = PatientService(db)
    health = HealthService(db)

    patient = patients.get_patient_by_user(user["uid"])
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")

    records = health.list_records_for_patient(patient["id"])

    return {
        **patient,
        "health_records": patients.attach_doctors(records),
        "ai_analyses": health.list_analyses(patient["id"], limit=5),
    }


@router.get("/ai-insights")
def get_ai_insights(user=Depends(require_role(["patient"])), db=Depends(get_db)):
    """Most recent risk analysis, or null when there is none yet."""
    patient = PatientService(db).get_patient_by_user(user["uid"])
    if not patient:
        return None
    return HealthService(db).latest_analysis(patient["id"])
