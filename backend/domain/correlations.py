"""Nettoyage des enregistrements corrélés à un profil par une valeur de champ.

- `PresenceCleaner`: présences StreetPass par `deviceId` (id du profil) et `beaconId`.
- `NotificationCleaner`: notifications dont `actorId` est l'id du profil.
"""

from __future__ import annotations

import structlog

from backend.domain.errors import TransientCleanupError
from backend.infra.store.base import DocumentStore, StoreError


class CorrelationCleaner:
    """Supprime tous les documents d'une collection dont `field == valeur`."""

    def __init__(self, store: DocumentStore, collection: str, field: str) -> None:
        self.store = store
        self.collection = collection
        self.field = field
        self._log = structlog.get_logger(__name__).bind(
            component="correlation_cleaner", collection=collection, field=field
        )

    def clean(self, value: str) -> int:
        """Supprime les correspondances et retourne le nombre de suppressions réussies.

        Aucune correspondance (ou collection absente) est un succès. Un échec de requête lève
        `TransientCleanupError`; un échec de suppression individuelle est journalisé et ignoré.
        """
        try:
            ids = self.store.find_ids(self.collection, self.field, value)
        except StoreError as exc:
            raise TransientCleanupError(
                f"query {self.collection}.{self.field} failed: {exc}"
            ) from exc
        removed = 0
        for doc_id in ids:
            try:
                self.store.delete(self.collection, doc_id)
            except StoreError as exc:
                self._log.warning("record_delete_failed", doc_id=doc_id, error=str(exc))
                continue
            removed += 1
        if ids:
            self._log.info("correlated_records_deleted", value=value, deleted=removed)
        return removed


class PresenceCleaner:
    """Présences corrélées par identité d'appareil et, si connue, par identité de balise."""

    def __init__(self, store: DocumentStore, collection: str = "streetpass_presences") -> None:
        self.by_device = CorrelationCleaner(store, collection, "deviceId")
        self.by_beacon = CorrelationCleaner(store, collection, "beaconId")

    def clean_by_device(self, device_id: str) -> int:
        return self.by_device.clean(device_id)

    def clean_by_beacon(self, beacon_id: str) -> int:
        return self.by_beacon.clean(beacon_id)

    def clean(self, device_id: str, beacon_id: str | None = None) -> int:
        """Nettoie par appareil puis par balise lorsque `beacon_id` est fourni."""
        removed = self.clean_by_device(device_id)
        if beacon_id:
            removed += self.clean_by_beacon(beacon_id)
        return removed


class NotificationCleaner(CorrelationCleaner):
    """Notifications dont l'acteur est le profil supprimé."""

    def __init__(self, store: DocumentStore, collection: str = "notifications") -> None:
        super().__init__(store, collection, "actorId")
