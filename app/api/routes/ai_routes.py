"""Gemini-backed routes: health chat and risk prediction.

Both calls carry the patient's own records as context. Prediction output
goes through app.services.risk_analysis, which validates the model's JSON
and falls back to keyword rules when it is unusable.

Handlers are plain `def`: the Gemini and Firestore calls block, so FastAPI
has to run them in its threadpool rather than on the event loop.
"""
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from app.api.deps import require_role
from app.core.config import settings
from app.core.firebase import get_db
from app.core.rate_limit import AI_LIMIT, limiter
from app.models.schemas import ChatRequest, ChatResponse
from app.services.gemini_client import GeminiClient, get_gemini_client
from app.services.health_service import HealthService
from app.services.logger import log_debug
from app.services.patient_service import PatientService
from app.services.prompts import build_chat_prompt, build_prediction_prompt
from app.services.risk_analysis import derive_risk_analysis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/chat", response_model=ChatResponse)
@limiter.limit(AI_LIMIT)
def chat_with_ai(
    request: Request,
    payload: ChatRequest = Body(...),
    user=Depends(require_role(["patient"])),
    db=Depends(get_db),
    gemini: GeminiClient = Depends(get_gemini_client),
):
    message = (payload.message or "").strip()
    if not message:
        raise HTTPException(status_code=400, detail="Message is required")

    patient = PatientService(db).get_patient_by_user(user["uid"])
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")

    records = HealthService(db).list_records_for_patient(
        patient["id"], limit=settings.CHAT_CONTEXT_RECORDS
    )

    reply = gemini.generate(build_chat_prompt(message, records))
    if not reply:
        raise HTTPException(status_code=502, detail="Failed to generate AI response")

    return ChatResponse(response=reply)


@router.post("/predict")
@limiter.limit(AI_LIMIT)
def generate_health_prediction(
    request: Request,
    user=Depends(require_role(["patient"])),
    db=Depends(get_db),
    gemini: GeminiClient = Depends(get_gemini_client),
):
    health = HealthService(db)

    patient = PatientService(db).get_patient_by_user(user["uid"])
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")

    records = health.list_records_for_patient(patient["id"])
    if not records:
        raise HTTPException(status_code=400, detail="No health records available for analysis")

    raw = gemini.generate(build_prediction_prompt(patient, records))
    if raw is None and not settings.AI_FALLBACK_ON_NO_RESPONSE:
        raise HTTPException(status_code=502, detail="Failed to generate AI prediction")

    outcome = derive_risk_analysis(raw, records)
    if outcome.source == "fallback":
        logger.warning(
            "Using keyword fallback for patient %s: %s", patient["id"], outcome.rejection
        )
        log_debug("prediction_fallback", {"patient_id": patient["id"], "reason": outcome.rejection, "raw": raw})

    return health.save_analysis(patient["id"], outcome.analysis, outcome.source)
