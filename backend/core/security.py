import base64
import json
import logging
import os
import secrets
from datetime import datetime, timezone

import firebase_admin
from firebase_admin import auth, credentials, exceptions as firebase_exceptions
from fastapi.concurrency import run_in_threadpool

from config import settings
from core.exceptions import credentials_exception

logger = logging.getLogger(__name__)


# ── Firebase Admin ────────────────────────────────────────────────────────────
def init_firebase() -> None:
    """
    Initialise l'app Firebase Admin une seule fois.
    Ordre : FB_SERVICE_KEY (JSON base64) → FIREBASE_ADMIN_JSON (chemin) →
    credentials par défaut de l'environnement.
    """
    try:
        firebase_admin.get_app()
        return
    except ValueError:
        pass  # pas encore initialisée
    try:
        if settings.FB_SERVICE_KEY:
            decoded = base64.b64decode(settings.FB_SERVICE_KEY).decode("utf-8")
            cred = credentials.Certificate(json.loads(decoded))
            firebase_admin.initialize_app(cred)
        elif settings.FIREBASE_ADMIN_JSON and os.path.exists(settings.FIREBASE_ADMIN_JSON):
            cred = credentials.Certificate(settings.FIREBASE_ADMIN_JSON)
            firebase_admin.initialize_app(cred)
        else:
            firebase_admin.initialize_app()
        logger.info("Firebase Admin initialised")
    except Exception as e:
        logger.error(f"Erreur initialisation Firebase Admin: {e}")


class FirebaseTokenVerifier:
    """Vérifie un ID token Firebase et retourne ses claims décodés."""

    async def verify(self, id_token: str) -> dict:
        try:
            # verify_id_token est bloquant (récupération des certificats Google)
            return await run_in_threadpool(auth.verify_id_token, id_token)
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logger.warning(f"Firebase token verification error: {e}")
            raise credentials_exception()


# ── Tracking ID ───────────────────────────────────────────────────────────────
TRACKING_PREFIX = "PRCL"


def generate_tracking_id() -> str:
    """Génère un identifiant lisible : PRCL-20250101-A1B2C3"""
    date = datetime.now(timezone.utc).strftime("%Y%m%d")
    random_part = secrets.token_hex(3).upper()
    return f"{TRACKING_PREFIX}-{date}-{random_part}"
