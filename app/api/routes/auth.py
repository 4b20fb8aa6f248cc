"""Authentication-related routes.

Accounts live in Firebase Authentication. Registration creates the
account, stamps the role claim and writes the Firestore profile; login
exchanges email/password for a Firebase ID token, which clients then send
as a Bearer token.
"""
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from app.api.deps import get_current_user
from app.core import auth_utils
from app.core.firebase import get_db
from app.core.rate_limit import check_auth_attempts, record_auth_failure
from app.models.doctor import DoctorProfileIn
from app.models.patient import PatientProfileIn
from app.models.schemas import AuthResponse, LoginRequest, RegisterRequest
from app.services.patient_service import PatientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_payload(svc: PatientService, uid: str) -> dict:
    user = svc.get_user(uid) or {"id": uid}
    role = user.get("role")
    return {**user, role: svc.get_profile(uid, role)} if role else user


@router.post("/register", response_model=AuthResponse, dependencies=[Depends(check_auth_attempts)])
def register(request: Request, payload: RegisterRequest = Body(...), db=Depends(get_db)):
    svc = PatientService(db)

    try:
        uid = auth_utils.create_account(payload.email, payload.password, payload.name)
    except auth_utils.EmailAlreadyRegistered:
        record_auth_failure(request)
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        auth_utils.set_role(uid, payload.role)
        svc.create_user(uid, payload.email, payload.name, payload.role)

        if payload.role == "patient":
            profile = PatientProfileIn(**payload.model_dump(include=set(PatientProfileIn.model_fields)))
            svc.create_patient(uid, payload.name, payload.email, profile)
        else:
            profile = DoctorProfileIn(**payload.model_dump(include=set(DoctorProfileIn.model_fields)))
            svc.create_doctor(uid, payload.name, payload.email, profile)

        # token minted after the claim is set, so it carries the role
        session = auth_utils.sign_in_with_password(payload.email, payload.password)
    except Exception:
        # roll back everything so the client can retry with the same email
        logger.exception("Registration failed after account creation; removing %s", uid)
        record_auth_failure(request)
        svc.delete_user_data(uid)
        auth_utils.delete_account(uid)
        raise

    logger.info("Registered %s as %s", uid, payload.role)
    return {"token": session["idToken"], "user": _user_payload(svc, uid)}


@router.post("/login", response_model=AuthResponse, dependencies=[Depends(check_auth_attempts)])
def login(request: Request, payload: LoginRequest = Body(...), db=Depends(get_db)):
    try:
        session = auth_utils.sign_in_with_password(payload.email, payload.password)
    except auth_utils.InvalidCredentials:
        record_auth_failure(request)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    svc = PatientService(db)
    return {"token": session["idToken"], "user": _user_payload(svc, session["localId"])}


@router.get("/me")
def get_me(user=Depends(get_current_user)):
    return {"uid": user.get("uid"), "email": user.get("email"), "role": user.get("role")}
