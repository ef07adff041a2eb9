"""
Firebase initialization and helpers
"""

from __future__ import annotations

import base64
import json
import logging
import os
from functools import lru_cache
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore

from app.core.config import settings

logger = logging.getLogger(__name__)


def load_credentials_info() -> dict[str, Any] | None:
    """Service-account info from FIREBASE_CREDENTIALS_JSON, _B64 or _FILE, in that order."""
    if settings.FIREBASE_CREDENTIALS_JSON:
        return json.loads(settings.FIREBASE_CREDENTIALS_JSON)
    if settings.FIREBASE_CREDENTIALS_B64:
        decoded = base64.b64decode(settings.FIREBASE_CREDENTIALS_B64).decode("utf-8")
        return json.loads(decoded)
    if settings.FIREBASE_CREDENTIALS_FILE and os.path.exists(settings.FIREBASE_CREDENTIALS_FILE):
        with open(settings.FIREBASE_CREDENTIALS_FILE, "r", encoding="utf-8") as f:
            return json.load(f)
    return None


@lru_cache(maxsize=1)
def get_firestore_client():
    """Initialize and return a cached Firestore client, or None without credentials.

    A missing credential leaves the waitlist readable as an empty table
    instead of failing start-up.
    """
    if not firebase_admin._apps:
        info = load_credentials_info()
        if not info:
            logger.warning("Firebase credentials not provided; Firestore waitlist store is disabled")
            return None

        cred = credentials.Certificate(info)
        firebase_admin.initialize_app(cred)

    return firestore.client()
