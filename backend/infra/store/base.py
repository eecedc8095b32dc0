"""Interface de base pour les magasins de documents.

Ce module définit l'interface abstraite que doivent implémenter les magasins de documents
(Firestore, mémoire) utilisés par l'algorithme de suppression en cascade.

Les chemins de collection sont des chaînes à segments séparés par `/`, par exemple
`profiles` ou `profiles/alice/followers`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StoreError(Exception):
    """Erreur remontée par le magasin (réseau, quota, commit refusé...)."""


def child_path(collection: str, doc_id: str, subcollection: str) -> str:
    """Retourne le chemin d'une sous-collection d'un document."""
    return f"{collection}/{doc_id}/{subcollection}"


class DocumentStore(ABC):
    """Interface abstraite pour les magasins de documents."""

    backend_name = "unknown"

    @abstractmethod
    def list_ids(self, collection: str, limit: int | None = None) -> list[str]:
        """Liste les identifiants de documents d'une collection (sans payload)."""
        raise NotImplementedError

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Charge un document, ou None s'il n'existe pas."""
        raise NotImplementedError

    @abstractmethod
    def find_ids(
        self, collection: str, field: str, value: Any, limit: int | None = None
    ) -> list[str]:
        """Retourne les identifiants des documents dont `field == value`."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Supprime un document. Supprimer un document absent est un no-op."""
        raise NotImplementedError

    @abstractmethod
    def delete_many(self, collection: str, doc_ids: list[str]) -> None:
        """Supprime plusieurs documents dans un seul commit atomique."""
        raise NotImplementedError

    def close(self) -> None:
        """Libère les ressources du magasin."""
