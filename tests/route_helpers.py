import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock

from fastapi import HTTPException
from fastapi.testclient import TestClient

from app.api.deps import get_current_user
from app.core.config import settings
from app.core.firebase import get_db
from app.core.rate_limit import limiter
from app.main import app
from app.services.gemini_client import get_gemini_client
from tests.fake_firestore import FakeFirestore


def ts(day: int) -> datetime:
    return datetime(2024, 1, day, 9, 0, tzinfo=timezone.utc)


class RouteTestCase(unittest.TestCase):
    """Runs the real app against an in-memory Firestore and a mocked Gemini client."""

    def setUp(self):
        self.db = FakeFirestore()
        self.gemini = MagicMock()
        self.user = None

        app.dependency_overrides[get_db] = lambda: self.db
        app.dependency_overrides[get_current_user] = self._current_user
        app.dependency_overrides[get_gemini_client] = lambda: self.gemini

        limiter.enabled = False
        self.client = TestClient(app, raise_server_exceptions=False)

    def tearDown(self):
        app.dependency_overrides.clear()
        limiter.enabled = settings.RATE_LIMIT_ENABLED
        limiter.reset()

    def _current_user(self):
        if self.user is None:
            raise HTTPException(status_code=401, detail="Authentication required")
        return self.user

    def login_as(self, uid: str, role: str):
        self.user = {"uid": uid, "role": role, "email": f"{uid}@example.com"}

    # ---------------- seeding ----------------
    def add_patient(self, doc_id: str, uid: str, name: str, email: str, **extra):
        self.db.collection("patients").document(doc_id).set({
            "user_id": uid, "name": name, "email": email, "created_at": ts(1), **extra,
        })

    def add_doctor(self, doc_id: str, uid: str, name: str, **extra):
        self.db.collection("doctors").document(doc_id).set({
            "user_id": uid, "name": name, "email": f"{uid}@clinic.example.com",
            "specialization": "Cardiology", **extra,
        })

    def add_record(self, doc_id: str, patient_id: str, doctor_id: str, diagnosis: str, visit_date: datetime):
        self.db.collection("health_records").document(doc_id).set({
            "patient_id": patient_id, "doctor_id": doctor_id, "diagnosis": diagnosis,
            "symptoms": None, "notes": None, "visit_date": visit_date,
            "prescriptions": [], "test_results": [], "created_at": visit_date,
        })
