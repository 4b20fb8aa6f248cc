"""Pydantic models for patient profiles stored in Firestore.

These are NOT ML models. Use them for request/response validation.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr


class PatientProfileIn(BaseModel):
    """Patient-specific fields accepted at registration."""
    date_of_birth: Optional[datetime] = None
    blood_group: Optional[str] = None
    phone: Optional[str] = None
    allergies: Optional[str] = None


class Patient(PatientProfileIn):
    id: Optional[str] = None
    user_id: str
    name: str
    email: EmailStr
    created_at: Optional[datetime] = None
