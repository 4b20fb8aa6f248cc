"""
Firebase admin initialization and helpers.

The backend uses the Firebase Admin SDK for two things: verifying the
ID tokens clients send as Bearer tokens, and reading/writing Firestore,
which holds users, patient and doctor profiles, health records and
AI risk analyses.
"""

import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore

from app.core.config import settings

logger = logging.getLogger(__name__)

# Global references to avoid re-initialization
_firebase_app = None
db = None


def init_firebase():
    """
    Initialize Firebase Admin SDK if not already initialized.

    Credentials are read from FIREBASE_CREDENTIALS (env or .env),
    defaulting to the local dev file app/core/firebase_key.json.
    """

    global _firebase_app, db

    # Prevent re-initialization (important for Uvicorn reload)
    if firebase_admin._apps:
        if db is None:
            db = firestore.client()
        return

    cred_path = settings.FIREBASE_CREDENTIALS

    if not os.path.exists(cred_path):
        raise RuntimeError(
            f"Firebase credentials not found at: {cred_path}\n"
            "Set FIREBASE_CREDENTIALS env var or place firebase_key.json correctly."
        )

    cred = credentials.Certificate(cred_path)
    _firebase_app = firebase_admin.initialize_app(cred)

    db = firestore.client()

    logger.info("Firebase Admin initialized successfully.")


def get_db():
    """Return the Firestore client, initializing Firebase on first use."""
    if db is None:
        init_firebase()
    return db
