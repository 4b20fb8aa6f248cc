"""Firebase Authentication helpers used by the auth routes and set_role.py.

Account creation and custom claims go through the Admin SDK. Password
sign-in is not part of the Admin SDK, so it uses the Identity Toolkit
REST endpoint with the project's web API key.
"""
import logging

import requests
from firebase_admin import auth

from app.core.config import settings

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

ROLES = ("patient", "doctor")


class InvalidCredentials(Exception):
    """Email/password pair rejected by Firebase."""


class EmailAlreadyRegistered(Exception):
    pass


def create_account(email: str, password: str, name: str) -> str:
    """Create a Firebase user and return its uid."""
    try:
        record = auth.create_user(email=email, password=password, display_name=name)
    except auth.EmailAlreadyExistsError as exc:
        raise EmailAlreadyRegistered(email) from exc
    return record.uid


def delete_account(uid: str) -> None:
    auth.delete_user(uid)


def set_role(uid: str, role: str) -> None:
    """Store the role as a custom claim; it shows up in ID tokens minted afterwards."""
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")
    auth.set_custom_user_claims(uid, {"role": role})


def sign_in_with_password(email: str, password: str) -> dict:
    """
    Exchange email/password for a Firebase ID token.

    Returns the Identity Toolkit payload (idToken, refreshToken, localId, ...).
    """
    if not settings.FIREBASE_WEB_API_KEY:
        raise RuntimeError("FIREBASE_WEB_API_KEY is not set")

    r = requests.post(
        SIGN_IN_URL,
        params={"key": settings.FIREBASE_WEB_API_KEY},
        json={"email": email, "password": password, "returnSecureToken": True},
        timeout=10,
    )
    if r.status_code == 400:
        # EMAIL_NOT_FOUND / INVALID_PASSWORD / INVALID_LOGIN_CREDENTIALS / USER_DISABLED
        reason = r.json().get("error", {}).get("message", "")
        logger.info("Sign-in rejected for %s: %s", email, reason)
        raise InvalidCredentials(reason)
    r.raise_for_status()
    return r.json()
