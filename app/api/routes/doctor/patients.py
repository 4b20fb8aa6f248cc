from datetime import datetime, timezone
from typing import Any, Dict, List, Literal

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request

from app.api.deps import require_role
from app.core.firebase import get_db
from app.core.rate_limit import SEARCH_LIMIT, limiter
from app.models.health_record import HealthRecordIn
from app.services.health_service import HealthService
from app.services.pagination import paginate
from app.services.patient_service import PatientService

router = APIRouter(prefix="/doctor", tags=["doctor"])

SortField = Literal["name", "email", "date_of_birth", "blood_group", "created_at"]


def _patient_row(patient: Dict[str, Any], **extra) -> Dict[str, Any]:
    return {
        "id": patient["id"],
        "name": patient.get("name"),
        "email": patient.get("email"),
        "date_of_birth": patient.get("date_of_birth"),
        "blood_group": patient.get("blood_group"),
        "phone": patient.get("phone"),
        "allergies": patient.get("allergies"),
        **extra,
    }


def _sort_key(v):
    # Firestore fields are untyped: compare within a type, naive datetimes as UTC
    if isinstance(v, str):
        return ("str", v.lower())
    if isinstance(v, datetime):
        return ("datetime", v if v.tzinfo else v.replace(tzinfo=timezone.utc))
    return (type(v).__name__, v)


def _sorted(patients: List[Dict[str, Any]], field: str, descending: bool) -> List[Dict[str, Any]]:
    """Sort on one field; patients missing it always go last."""
    present = [p for p in patients if p.get(field) is not None]
    missing = [p for p in patients if p.get(field) is None]
    return sorted(present, key=lambda p: _sort_key(p[field]), reverse=descending) + missing


@router.get("/patients")
def list_my_patients(
    page: int = Query(1),
    limit: int = Query(20),
    user=Depends(require_role(["doctor"])),
    db=Depends(get_db),
):
    """
    Patients this doctor has seen, most recently seen first.
    Built from the doctor's own health records.
    """
    patients = PatientService(db)
    doctor = patients.get_doctor_by_user(user["uid"])
    if not doctor:
        raise HTTPException(status_code=404, detail="Doctor not found")

    records = HealthService(db).list_records_by_doctor(doctor["id"])

    seen: Dict[str, Dict[str, Any]] = {}
    for record in records:
        patient_id = record.get("patient_id")
        if not patient_id:
            continue
        if patient_id in seen:
            seen[patient_id]["total_visits"] += 1
            continue
        patient = patients.get_patient(patient_id)
        if patient is None:
            continue
        seen[patient_id] = _patient_row(patient, last_visit=record.get("visit_date"), total_visits=1)

    items, pagination = paginate(list(seen.values()), page, limit)
    return {"patients": items, "pagination": pagination}


@router.get("/search-patients")
@limiter.limit(SEARCH_LIMIT)
def search_patients(
    request: Request,
    query: str = Query(""),
    page: int = Query(1),
    limit: int = Query(10),
    sort_by: SortField = Query("name"),
    order: Literal["asc", "desc"] = Query("asc"),
    user=Depends(require_role(["doctor"])),
    db=Depends(get_db),
):
    matches = PatientService(db).search_patients(query)
    matches = _sorted(matches, sort_by, descending=(order == "desc"))

    items, pagination = paginate(matches, page, limit)

    health = HealthService(db)
    rows = [_patient_row(p, last_visit=health.last_visit(p["id"])) for p in items]
    return {"patients": rows, "pagination": pagination}


@router.get("/patient/{patient_id}")
def get_patient_details(
    patient_id: str,
    user=Depends(require_role(["doctor"])),
    db=Depends(get_db),
):
    patients = PatientService(db)
    patient = patients.get_patient(patient_id)
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")

    records = HealthService(db).list_records_for_patient(patient_id)
    return {**_patient_row(patient), "health_records": patients.attach_doctors(records)}


@router.post("/health-record", status_code=201)
def create_health_record(
    payload: HealthRecordIn = Body(...),
    user=Depends(require_role(["doctor"])),
    db=Depends(get_db),
):
    patients = PatientService(db)

    patient = patients.get_patient(payload.patient_id)
    if not patient:
        raise HTTPException(
            status_code=404,
            detail={
                "error": "Patient not found",
                "hint": "Use /api/doctor/search-patients to find the patient first",
            },
        )

    doctor = patients.get_doctor_by_user(user["uid"])
    if not doctor:
        raise HTTPException(status_code=404, detail="Doctor not found")

    record = HealthService(db).create_record(payload, doctor["id"])
    return {**record, "patient": {"name": patient.get("name"), "email": patient.get("email")}}
