"""Pydantic model for doctor metadata."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr


class DoctorProfileIn(BaseModel):
    specialization: Optional[str] = None
    license_number: Optional[str] = None
    phone: Optional[str] = None


class Doctor(DoctorProfileIn):
    id: Optional[str] = None
    user_id: str
    name: str
    email: EmailStr
    created_at: Optional[datetime] = None
