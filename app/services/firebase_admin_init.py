"""Firebase Admin SDK initialization (singleton)."""

import logging
import os
import threading

import firebase_admin
from firebase_admin import credentials, firestore

from app.config import settings

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_db = None


def _build_credentials():
    """
    Pick Firebase credentials, in order of preference:

    1. FIREBASE_CREDENTIALS_PATH or GOOGLE_APPLICATION_CREDENTIALS (key file)
    2. FIREBASE_PROJECT_ID / FIREBASE_CLIENT_EMAIL / FIREBASE_PRIVATE_KEY
    3. None, so the SDK falls back to application default credentials
    """
    cred_path = settings.firebase_credentials_path or os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    if cred_path:
        return credentials.Certificate(cred_path)

    if settings.firebase_private_key and settings.firebase_client_email:
        return credentials.Certificate({
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "client_email": settings.firebase_client_email,
            # Keys stored in env vars usually carry escaped newlines
            "private_key": settings.firebase_private_key.replace("\\n", "\n"),
            "token_uri": "https://oauth2.googleapis.com/token",
        })

    return None


def init_firebase() -> None:
    """Initialize Firebase Admin SDK if not already initialized."""
    if firebase_admin._apps:
        return

    try:
        cred = _build_credentials()
        options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
        firebase_admin.initialize_app(cred, options)
        logger.info("Firebase Admin SDK initialized")
    except Exception as e:
        logger.error(f"Firebase Admin SDK init failed: {e}")
        raise


def get_firestore_client():
    """Return a Firestore client, initializing Firebase if needed."""
    global _db
    if _db is None:
        with _lock:
            if _db is None:
                init_firebase()
                _db = firestore.client()
    return _db
