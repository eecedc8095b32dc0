"""Suppression des arêtes entrantes (followers/likes) détenues par les autres profils."""

from __future__ import annotations

import structlog

from backend.domain.errors import TransientCleanupError
from backend.infra.store.base import DocumentStore, StoreError, child_path

INBOUND_EDGE_SUBCOLLECTIONS = ("followers", "likes")


class ReferenceScanner:
    """Parcourt tous les profils et retire `followers/{cible}` et `likes/{cible}` chez chacun.

    Coût O(nombre de profils): acceptable tant que la collection reste petite. Chaque suppression
    est indépendante et idempotente; un échec individuel est journalisé puis ignoré.
    """

    def __init__(self, store: DocumentStore, profiles_collection: str = "profiles") -> None:
        """Initialise le scanner sur la collection de profils donnée."""
        self.store = store
        self.profiles = profiles_collection
        self._log = structlog.get_logger(__name__).bind(component="reference_scanner")

    def remove_inbound_edges(self, target_id: str) -> int:
        """Supprime les arêtes pointant vers `target_id`.

        Returns:
            int: Nombre d'appels de suppression aboutis. Firestore ne distingue pas une arête
            absente d'une arête supprimée: ce n'est pas un nombre de documents retirés.
        """
        removed = 0
        try:
            others = [pid for pid in self.store.list_ids(self.profiles) if pid != target_id]
        except StoreError as exc:
            raise TransientCleanupError(f"cannot list {self.profiles}: {exc}") from exc
        self._log.info("inbound_edge_scan", target=target_id, profiles=len(others))
        for other_id in others:
            for sub in INBOUND_EDGE_SUBCOLLECTIONS:
                collection = child_path(self.profiles, other_id, sub)
                try:
                    self.store.delete(collection, target_id)
                except StoreError as exc:
                    err = TransientCleanupError(str(exc))
                    self._log.warning(
                        "edge_delete_failed",
                        path=f"{collection}/{target_id}",
                        code=err.code,
                        error=err.message,
                    )
                    continue
                removed += 1
        return removed
