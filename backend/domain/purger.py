"""Purge d'une collection par lots bornés."""

from __future__ import annotations

import structlog

from backend.domain.errors import TransientCleanupError
from backend.infra.store.base import DocumentStore, StoreError

DEFAULT_BATCH_SIZE = 500


class BatchPurger:
    """Supprime tous les documents d'une collection par commits groupés successifs.

    Chaque cycle lit au plus `batch_size` identifiants puis les supprime dans un seul commit
    atomique. La purge s'arrête dès qu'une lecture renvoie moins de `batch_size` documents.
    """

    def __init__(self, store: DocumentStore, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        """Initialise le purgeur.

        Args:
            store: Magasin de documents.
            batch_size: Taille maximale d'un lot (doit être > 0).
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.store = store
        self.batch_size = batch_size
        self._log = structlog.get_logger(__name__).bind(component="batch_purger")

    def purge(self, collection: str, batch_size: int | None = None) -> int:
        """Purge `collection` et retourne le nombre de documents supprimés.

        Raises:
            TransientCleanupError: si une lecture ou un commit échoue; la purge s'arrête.
        """
        size = batch_size or self.batch_size
        total = 0
        while True:
            try:
                ids = self.store.list_ids(collection, limit=size)
                if not ids:
                    break
                self.store.delete_many(collection, ids)
            except StoreError as exc:
                raise TransientCleanupError(f"purge of {collection} aborted: {exc}") from exc
            total += len(ids)
            self._log.info("purge_batch_deleted", collection=collection, batch=len(ids))
            if len(ids) < size:
                break
        return total
