"""Business logic / service layer for patient and doctor profiles.

Profiles live in the `patients` and `doctors` collections, each linked to
its Firebase Auth account through `user_id`; the account itself is
mirrored in `users/{uid}`.
"""
from typing import Any, Dict, List, Optional

from app.models.doctor import Doctor, DoctorProfileIn
from app.models.patient import Patient, PatientProfileIn
from app.services.firestore_utils import doc_to_dict, first, utcnow

USERS = "users"
PATIENTS = "patients"
DOCTORS = "doctors"


class PatientService:
    def __init__(self, db):
        self.db = db

    # ---------------- users ----------------
    def create_user(self, uid: str, email: str, name: str, role: str) -> Dict[str, Any]:
        data = {"email": email, "name": name, "role": role, "created_at": utcnow()}
        self.db.collection(USERS).document(uid).set(data)
        return {"id": uid, **data}

    def get_user(self, uid: str) -> Optional[Dict[str, Any]]:
        doc = self.db.collection(USERS).document(uid).get()
        return doc_to_dict(doc) if doc.exists else None

    def delete_user_data(self, uid: str) -> None:
        """Remove users/{uid} and any profile linked to it."""
        self.db.collection(USERS).document(uid).delete()
        for name in (PATIENTS, DOCTORS):
            for d in self.db.collection(name).where("user_id", "==", uid).stream():
                self.db.collection(name).document(d.id).delete()

    # ---------------- patients ----------------
    def create_patient(self, uid: str, name: str, email: str, profile: PatientProfileIn) -> Dict[str, Any]:
        patient = Patient(
            **profile.model_dump(),
            user_id=uid,
            name=name,
            email=email,
            created_at=utcnow(),
        )
        ref = self.db.collection(PATIENTS).document()
        data = patient.model_dump(exclude={"id"})
        ref.set(data)
        return {"id": ref.id, **data}

    def get_patient(self, patient_id: str) -> Optional[Dict[str, Any]]:
        doc = self.db.collection(PATIENTS).document(patient_id).get()
        return doc_to_dict(doc) if doc.exists else None

    def get_patient_by_user(self, uid: str) -> Optional[Dict[str, Any]]:
        return first(self.db.collection(PATIENTS).where("user_id", "==", uid))

    def list_patients(self) -> List[Dict[str, Any]]:
        return [doc_to_dict(d) for d in self.db.collection(PATIENTS).stream()]

    def search_patients(self, query: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on name or email (Firestore has no contains)."""
        patients = self.list_patients()
        q = (query or "").strip().lower()
        if not q:
            return patients
        return [
            p for p in patients
            if q in (p.get("name") or "").lower() or q in (p.get("email") or "").lower()
        ]

    # ---------------- doctors ----------------
    def create_doctor(self, uid: str, name: str, email: str, profile: DoctorProfileIn) -> Dict[str, Any]:
        doctor = Doctor(
            **profile.model_dump(),
            user_id=uid,
            name=name,
            email=email,
            created_at=utcnow(),
        )
        ref = self.db.collection(DOCTORS).document()
        data = doctor.model_dump(exclude={"id"})
        ref.set(data)
        return {"id": ref.id, **data}

    def get_doctor(self, doctor_id: str) -> Optional[Dict[str, Any]]:
        doc = self.db.collection(DOCTORS).document(doctor_id).get()
        return doc_to_dict(doc) if doc.exists else None

    def get_doctor_by_user(self, uid: str) -> Optional[Dict[str, Any]]:
        return first(self.db.collection(DOCTORS).where("user_id", "==", uid))

    def get_profile(self, uid: str, role: str) -> Optional[Dict[str, Any]]:
        if role == "patient":
            return self.get_patient_by_user(uid)
        if role == "doctor":
            return self.get_doctor_by_user(uid)
        return None

    def attach_doctors(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Add a short `doctor` block to each record (one lookup per distinct doctor)."""
        cache: Dict[str, Any] = {}
        out = []
        for r in records:
            doctor_id = r.get("doctor_id")
            if doctor_id and doctor_id not in cache:
                d = self.get_doctor(doctor_id)
                cache[doctor_id] = (
                    {"id": d["id"], "name": d.get("name"), "specialization": d.get("specialization")}
                    if d else None
                )
            out.append({**r, "doctor": cache.get(doctor_id)})
        return out
