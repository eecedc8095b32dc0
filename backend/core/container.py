"""
Conteneur d'injection de dépendances et configuration application.

Construit explicitement les composants centraux (settings, magasin de documents, app Firebase,
orchestrateur) et les libère via `close()`. Le conteneur est créé par le point d'entrée (app
FastAPI ou outil opérateur) puis transmis aux couches inférieures.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from backend.core.settings import Settings, get_settings
from backend.domain.orchestrator import DeletionOrchestrator
from backend.infra.store.base import DocumentStore
from backend.infra.store.memory import InMemoryDocumentStore

log = structlog.get_logger(__name__)


class Container:
    """Possède le magasin de documents du processus et ses dépendances."""

    def __init__(
        self,
        settings: Settings | None = None,
        store: DocumentStore | None = None,
        script_dir: str | Path | None = None,
    ):
        """Initialise le conteneur.

        Args:
            settings: Configuration (défaut: `get_settings()`).
            store: Magasin déjà construit (tests); sinon construit à la demande.
            script_dir: Répertoire où chercher `serviceAccountKey.json`.
        """
        self.settings = settings or get_settings()
        self.script_dir = script_dir
        self._store = store
        self._firebase_app = None

    @property
    def firebase_app(self):
        """App firebase_admin, initialisée au premier accès."""
        if self._firebase_app is None:
            from backend.infra.firebase_app import (  # noqa: PLC0415
                init_firebase_app,
                resolve_credentials_path,
            )

            key_path = resolve_credentials_path(self.settings, self.script_dir)
            self._firebase_app = init_firebase_app(self.settings, key_path)
        return self._firebase_app

    @property
    def store(self) -> DocumentStore:
        """Magasin de documents, construit une seule fois."""
        if self._store is None:
            backend = self.settings.STORE_BACKEND.lower()
            if backend == "memory":
                self._store = InMemoryDocumentStore()
            elif backend == "firestore":
                from backend.infra.firebase_app import build_firestore_store  # noqa: PLC0415

                self._store = build_firestore_store(self.firebase_app)
            else:
                raise ValueError(f"invalid STORE_BACKEND: {backend}")
            log.info("store_initialized", backend=self._store.backend_name)
        return self._store

    @property
    def storage_backend(self) -> str:
        """Nom du backend configuré, sans forcer l'initialisation."""
        if self._store is not None:
            return self._store.backend_name
        return self.settings.STORE_BACKEND.lower()

    def orchestrator(self) -> DeletionOrchestrator:
        """Construit un orchestrateur lié au magasin partagé."""
        return DeletionOrchestrator.from_settings(self.store, self.settings)

    def close(self) -> None:
        """Libère le magasin puis l'app Firebase."""
        if self._store is not None:
            self._store.close()
            self._store = None
        if self._firebase_app is not None:
            from backend.infra.firebase_app import close_firebase_app  # noqa: PLC0415

            close_firebase_app(self._firebase_app)
            self._firebase_app = None
