"""Adaptateur Firestore pour le magasin de documents.

Encapsule un client `google.cloud.firestore.Client` (obtenu via `firebase_admin`) derrière
l'interface `DocumentStore`. Les erreurs d'API Google (y compris `RetryError` à l'échéance des
relances) sont converties en `StoreError`.
"""

from __future__ import annotations

from typing import Any

import structlog
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore_v1.base_query import FieldFilter
from google.cloud.firestore_v1.field_path import FieldPath

from backend.infra.store.base import DocumentStore, StoreError


class FirestoreDocumentStore(DocumentStore):
    """Magasin de documents adossé à Firestore."""

    backend_name = "firestore"

    def __init__(self, client, on_close=None) -> None:
        """Initialise l'adaptateur.

        Args:
            client: Client Firestore déjà initialisé.
            on_close: Callable optionnel appelé après fermeture du client
                (ex: suppression de l'app firebase_admin).
        """
        self.client = client
        self._on_close = on_close
        self._log = structlog.get_logger(__name__).bind(component="firestore_store")

    def list_ids(self, collection: str, limit: int | None = None) -> list[str]:
        # projection sur l'id seul: aucun champ n'est rapatrié
        query = self.client.collection(collection).select([FieldPath.document_id()])
        if limit:
            query = query.limit(limit)
        try:
            return [snap.id for snap in query.stream()]
        except GoogleAPIError as exc:
            raise StoreError(f"list {collection}: {exc}") from exc

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        try:
            snap = self.client.collection(collection).document(doc_id).get()
        except GoogleAPIError as exc:
            raise StoreError(f"get {collection}/{doc_id}: {exc}") from exc
        if not snap.exists:
            return None
        return snap.to_dict() or {}

    def find_ids(
        self, collection: str, field: str, value: Any, limit: int | None = None
    ) -> list[str]:
        query = self.client.collection(collection).where(
            filter=FieldFilter(field, "==", value)
        )
        if limit:
            query = query.limit(limit)
        try:
            return [snap.id for snap in query.stream()]
        except GoogleAPIError as exc:
            raise StoreError(f"query {collection} where {field}: {exc}") from exc

    def delete(self, collection: str, doc_id: str) -> None:
        try:
            self.client.collection(collection).document(doc_id).delete()
        except GoogleAPIError as exc:
            raise StoreError(f"delete {collection}/{doc_id}: {exc}") from exc

    def delete_many(self, collection: str, doc_ids: list[str]) -> None:
        col = self.client.collection(collection)
        batch = self.client.batch()
        for doc_id in doc_ids:
            batch.delete(col.document(doc_id))
        try:
            batch.commit()
        except GoogleAPIError as exc:
            raise StoreError(f"batch delete {collection}: {exc}") from exc

    def close(self) -> None:
        try:
            self.client.close()
        finally:
            if self._on_close:
                self._on_close()
        self._log.info("firestore_store_closed")
