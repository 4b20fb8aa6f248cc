"""Health-related business logic.

Stores and queries clinical visit records (`health_records`) and the AI
risk analyses derived from them (`ai_analyses`) in Firestore.
"""
from typing import Any, Dict, List, Optional

from firebase_admin import firestore

from app.models.health_record import HealthRecord, HealthRecordIn
from app.models.risk_analysis import AnalysisSource, RiskAnalysis, StoredRiskAnalysis
from app.services.firestore_utils import doc_to_dict, utcnow

HEALTH_RECORDS = "health_records"
AI_ANALYSES = "ai_analyses"


class HealthService:
    def __init__(self, db):
        self.db = db

    # ---------------- health records ----------------
    def create_record(self, payload: HealthRecordIn, doctor_id: str) -> Dict[str, Any]:
        now = utcnow()
        record = HealthRecord(
            **payload.model_dump(exclude={"visit_date"}),
            doctor_id=doctor_id,
            visit_date=payload.visit_date or now,
            created_at=now,
        )
        ref = self.db.collection(HEALTH_RECORDS).document()
        data = record.model_dump(exclude={"id"})
        ref.set(data)
        return {"id": ref.id, **data}

    def list_records_for_patient(self, patient_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Newest visit first."""
        q = (
            self.db.collection(HEALTH_RECORDS)
            .where("patient_id", "==", patient_id)
            .order_by("visit_date", direction=firestore.Query.DESCENDING)
        )
        if limit:
            q = q.limit(limit)
        return [doc_to_dict(d) for d in q.stream()]

    def list_records_by_doctor(self, doctor_id: str) -> List[Dict[str, Any]]:
        q = (
            self.db.collection(HEALTH_RECORDS)
            .where("doctor_id", "==", doctor_id)
            .order_by("visit_date", direction=firestore.Query.DESCENDING)
        )
        return [doc_to_dict(d) for d in q.stream()]

    def last_visit(self, patient_id: str):
        records = self.list_records_for_patient(patient_id, limit=1)
        return records[0].get("visit_date") if records else None

    # ---------------- AI analyses ----------------
    def save_analysis(self, patient_id: str, analysis: RiskAnalysis, source: AnalysisSource) -> Dict[str, Any]:
        stored = StoredRiskAnalysis(
            **analysis.model_dump(),
            patient_id=patient_id,
            source=source,
            analyzed_at=utcnow(),
        )
        ref = self.db.collection(AI_ANALYSES).document()
        data = stored.model_dump(exclude={"id"})
        ref.set(data)
        return {"id": ref.id, **data}

    def list_analyses(self, patient_id: str, limit: int = 5) -> List[Dict[str, Any]]:
        """Most recent first."""
        q = (
            self.db.collection(AI_ANALYSES)
            .where("patient_id", "==", patient_id)
            .order_by("analyzed_at", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return [doc_to_dict(d) for d in q.stream()]

    def latest_analysis(self, patient_id: str) -> Optional[Dict[str, Any]]:
        items = self.list_analyses(patient_id, limit=1)
        return items[0] if items else None
