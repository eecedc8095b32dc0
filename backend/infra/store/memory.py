"""
Magasin de documents en mémoire (utilisé pour dev/tests).

Reproduit la sémantique utile de Firestore: les sous-collections existent indépendamment de leur
document parent, supprimer un document absent ne lève pas d'erreur, et un commit groupé est
atomique. Des compteurs d'opérations permettent de vérifier le nombre de requêtes et de commits.
"""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass
from typing import Any

from backend.infra.store.base import DocumentStore


@dataclass
class StoreStats:
    """Compteurs d'opérations du magasin mémoire."""

    queries: int = 0
    commits: int = 0
    delete_calls: int = 0
    deleted: int = 0

    def reset(self) -> None:
        """Remet tous les compteurs à zéro."""
        self.queries = 0
        self.commits = 0
        self.delete_calls = 0
        self.deleted = 0


class InMemoryDocumentStore(DocumentStore):
    """
    Dépôt de documents en mémoire.

    Stocke les documents dans un dict `{chemin_collection: {doc_id: data}}`, non persistant.
    """

    backend_name = "memory"

    def __init__(self) -> None:
        """Initialise une base mémoire vide."""
        self._db: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self.stats = StoreStats()

    def set(self, collection: str, doc_id: str, data: dict[str, Any] | None = None) -> None:
        """Crée ou écrase un document."""
        with self._lock:
            self._db.setdefault(collection, {})[doc_id] = dict(data or {})

    def exists(self, collection: str, doc_id: str) -> bool:
        """Indique si le document existe."""
        return doc_id in self._db.get(collection, {})

    def count(self, collection: str) -> int:
        """Nombre de documents présents dans une collection."""
        return len(self._db.get(collection, {}))

    def dump(self) -> dict[str, dict[str, dict[str, Any]]]:
        """Copie profonde de toutes les collections non vides."""
        with self._lock:
            return {k: copy.deepcopy(v) for k, v in self._db.items() if v}

    def list_ids(self, collection: str, limit: int | None = None) -> list[str]:
        with self._lock:
            self.stats.queries += 1
            ids = sorted(self._db.get(collection, {}))
        return ids[:limit] if limit else ids

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        with self._lock:
            doc = self._db.get(collection, {}).get(doc_id)
            return dict(doc) if doc is not None else None

    def find_ids(
        self, collection: str, field: str, value: Any, limit: int | None = None
    ) -> list[str]:
        with self._lock:
            self.stats.queries += 1
            docs = self._db.get(collection, {})
            ids = sorted(k for k, d in docs.items() if field in d and d[field] == value)
        return ids[:limit] if limit else ids

    def delete(self, collection: str, doc_id: str) -> None:
        with self._lock:
            self.stats.delete_calls += 1
            if self._db.get(collection, {}).pop(doc_id, None) is not None:
                self.stats.deleted += 1

    def delete_many(self, collection: str, doc_ids: list[str]) -> None:
        with self._lock:
            self.stats.commits += 1
            docs = self._db.get(collection, {})
            for doc_id in doc_ids:
                self.stats.delete_calls += 1
                if docs.pop(doc_id, None) is not None:
                    self.stats.deleted += 1
