"""Taxonomie des erreurs de la suppression de profil.

Chaque erreur porte un `code` stable, repris tel quel par l'API (enveloppe d'erreur) et affiché
par l'outil opérateur.
"""

from __future__ import annotations


class DeletionError(Exception):
    """Erreur de base de la suppression de profil."""

    code = "internal"
    default_message = "Profile deletion failed."

    def __init__(self, message: str | None = None) -> None:
        """Initialise l'erreur avec un message lisible."""
        self.message = message or self.default_message
        super().__init__(self.message)
        # renseignés par l'orchestrateur lorsqu'il relance l'erreur
        self.state = None
        self.steps: list = []


class Unauthenticated(DeletionError):
    """Aucune identité d'appelant (chemin RPC uniquement)."""

    code = "unauthenticated"
    default_message = "The function must be called while authenticated."


class NotFound(DeletionError):
    """Aucun profil cible résolu."""

    code = "not-found"
    default_message = "No profile found for this authenticated user."


class PermissionDenied(DeletionError):
    """Le profil cible appartient à une autre identité."""

    code = "permission-denied"
    default_message = "You are not allowed to delete this profile."


class TransientCleanupError(DeletionError):
    """Échec d'une suppression de nettoyage. Absorbé, jamais propagé hors d'une étape."""

    code = "transient"
    default_message = "Cleanup step failed."


class Internal(DeletionError):
    """Échec de la vérification de propriété ou de la suppression finale."""

    code = "internal"
