"""Pydantic models for clinical visit records."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Prescription(BaseModel):
    medication: str = Field(..., min_length=1)
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None
    instructions: Optional[str] = None


class TestResult(BaseModel):
    test_name: str = Field(..., min_length=1)
    result: str
    normal_range: Optional[str] = None
    notes: Optional[str] = None


class HealthRecordIn(BaseModel):
    """Body of POST /api/doctor/health-record."""
    patient_id: str = Field(..., min_length=1)
    diagnosis: str = Field(..., min_length=1)
    symptoms: Optional[str] = None
    notes: Optional[str] = None
    visit_date: Optional[datetime] = None
    prescriptions: List[Prescription] = Field(default_factory=list)
    test_results: List[TestResult] = Field(default_factory=list)

    @field_validator("patient_id", "diagnosis")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class HealthRecord(HealthRecordIn):
    id: Optional[str] = None
    doctor_id: str
    visit_date: datetime
    created_at: Optional[datetime] = None
