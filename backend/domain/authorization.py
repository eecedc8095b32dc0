"""
Résolution du profil cible et contrôle de propriété.

Ce module associe une identité d'appelant (uid authentifié) au profil qu'elle peut supprimer, puis
vérifie que ce profil lui appartient.
"""

from __future__ import annotations

import structlog

from backend.domain.errors import Internal, NotFound, PermissionDenied
from backend.infra.store.base import DocumentStore, StoreError

OWNER_FIELD = "authUid"
BEACON_FIELD = "beaconId"


class AuthorizationResolver:
    """Résout et autorise la cible d'une suppression pour un appelant donné."""

    def __init__(self, store: DocumentStore, profiles_collection: str = "profiles") -> None:
        """Initialise le résolveur sur la collection de profils donnée."""
        self.store = store
        self.profiles = profiles_collection
        self._log = structlog.get_logger(__name__).bind(component="authorization")

    def resolve(self, caller_id: str, requested_id: str | None = None) -> str:
        """Retourne l'id du profil cible.

        Ordre de résolution:
        1) `requested_id` s'il est fourni;
        2) premier profil dont `authUid == caller_id`;
        3) `caller_id` lui-même s'il existe comme id de document.

        Raises:
            NotFound: aucune candidate ne se résout.
            Internal: le magasin échoue pendant la recherche.
        """
        if requested_id:
            return requested_id
        try:
            linked = self.store.find_ids(self.profiles, OWNER_FIELD, caller_id, limit=1)
            if linked:
                self._log.info("target_resolved", source="owner_link", target=linked[0])
                return linked[0]
            if self.store.get(self.profiles, caller_id) is not None:
                self._log.info("target_resolved", source="caller_id", target=caller_id)
                return caller_id
        except StoreError as exc:
            raise Internal("Failed to resolve the target profile.") from exc
        raise NotFound()

    def authorize(self, target_id: str, caller_id: str) -> str | None:
        """Vérifie la propriété de `target_id` et retourne la balise stockée, s'il y en a une.

        Un profil sans champ `authUid` (ou déjà supprimé) n'est pas refusé.

        Raises:
            PermissionDenied: `authUid` présent et différent de `caller_id`.
            Internal: échec de lecture du profil.
        """
        try:
            data = self.store.get(self.profiles, target_id)
        except StoreError as exc:
            raise Internal("Failed to validate profile ownership.") from exc
        if data is None:
            return None
        owner = data.get(OWNER_FIELD)
        if owner and owner != caller_id:
            self._log.warning("ownership_mismatch", target=target_id, caller=caller_id)
            raise PermissionDenied()
        return data.get(BEACON_FIELD) or None
