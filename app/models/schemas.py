from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from .doctor import DoctorProfileIn
from .patient import PatientProfileIn

Role = Literal["patient", "doctor"]


class RegisterRequest(PatientProfileIn, DoctorProfileIn):
    email: EmailStr
    password: str = Field(..., min_length=6)  # Firebase minimum
    name: str = Field(..., min_length=1)
    role: Role

    @field_validator("role", mode="before")
    @classmethod
    def lower_role(cls, v):
        # accept "PATIENT" / "DOCTOR" as well
        return v.lower() if isinstance(v, str) else v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    token: str
    user: dict


class ChatRequest(BaseModel):
    message: Optional[str] = None


class ChatResponse(BaseModel):
    response: str
