"""
Initialisation et libération de l'application `firebase_admin`.

Ce module résout les identifiants du compte de service, initialise une app Firebase nommée
(une par conteneur applicatif, avec un teardown explicite) et expose les clients construits dessus:
client Firestore et vérification des ID tokens.
"""

from __future__ import annotations

import itertools
import os
from pathlib import Path

import firebase_admin
import structlog
from firebase_admin import auth, credentials, firestore
from firebase_admin.exceptions import FirebaseError

from backend.core.settings import Settings
from backend.infra.store.firestore_store import FirestoreDocumentStore

SERVICE_ACCOUNT_FILENAME = "serviceAccountKey.json"

_app_seq = itertools.count(1)
log = structlog.get_logger(__name__)


def resolve_credentials_path(settings: Settings, script_dir: str | Path | None = None) -> str | None:
    """Retourne le chemin du fichier de clé à utiliser, ou None (identifiants par défaut).

    Ordre: variable GOOGLE_APPLICATION_CREDENTIALS → settings → SERVICE_ACCOUNT_KEY_PATH →
    `serviceAccountKey.json` à côté du script appelant.
    """
    explicit = os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or settings.GOOGLE_APPLICATION_CREDENTIALS
    if explicit:
        return explicit
    candidates: list[Path] = []
    if settings.SERVICE_ACCOUNT_KEY_PATH:
        candidates.append(Path(settings.SERVICE_ACCOUNT_KEY_PATH))
    if script_dir is not None:
        candidates.append(Path(script_dir) / SERVICE_ACCOUNT_FILENAME)
    for candidate in candidates:
        if candidate.exists():
            return str(candidate)
    return None


def init_firebase_app(settings: Settings, credentials_path: str | None = None) -> firebase_admin.App:
    """Initialise une app firebase_admin dédiée.

    Sans chemin de clé, firebase_admin utilise les Application Default Credentials.
    """
    cred = credentials.Certificate(credentials_path) if credentials_path else None
    options = {}
    if settings.FIRESTORE_PROJECT_ID:
        options["projectId"] = settings.FIRESTORE_PROJECT_ID
    name = f"{settings.APP_NAME}-{next(_app_seq)}"
    app = firebase_admin.initialize_app(cred, options or None, name=name)
    log.info(
        "firebase_app_initialized",
        app=name,
        project=settings.FIRESTORE_PROJECT_ID,
        key_file=bool(credentials_path),
    )
    return app


def close_firebase_app(app: firebase_admin.App) -> None:
    """Supprime l'app firebase_admin (libère ses services)."""
    firebase_admin.delete_app(app)
    log.info("firebase_app_deleted", app=app.name)


def build_firestore_store(app: firebase_admin.App) -> FirestoreDocumentStore:
    """Construit l'adaptateur Firestore pour l'app donnée."""
    return FirestoreDocumentStore(firestore.client(app))


def verify_id_token(token: str, app: firebase_admin.App) -> str | None:
    """Vérifie un ID token Firebase et retourne l'uid, ou None si invalide."""
    try:
        decoded = auth.verify_id_token(token, app=app)
    except (ValueError, FirebaseError):
        return None
    return decoded.get("uid")
