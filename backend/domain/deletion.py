"""Types de la suppression de profil: requête, politique d'étape, état, résultat."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StepPolicy(str, Enum):
    """Politique d'échec d'une étape."""

    FAIL_FAST = "fail-fast"
    BEST_EFFORT = "best-effort"


class DeletionState(str, Enum):
    """États successifs d'une suppression."""

    RESOLVING = "resolving"
    AUTHORIZING = "authorizing"
    PURGING = "purging"
    FINALIZING = "finalizing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class DeletionRequest:
    """Requête éphémère de suppression (jamais persistée).

    `trusted=True` correspond au chemin opérateur: pas de résolution ni de contrôle de propriété.
    """

    profile_id: str | None = None
    caller_id: str | None = None
    beacon_id: str | None = None
    trusted: bool = False


@dataclass
class StepOutcome:
    """Résultat d'une étape exécutée."""

    name: str
    policy: StepPolicy
    ok: bool = True
    count: int = 0
    error: str | None = None
    counts_documents: bool = True


@dataclass
class DeletionResult:
    """Résultat d'une suppression réussie."""

    profile_id: str
    beacon_id: str | None = None
    state: DeletionState = DeletionState.COMPLETED
    steps: list[StepOutcome] = field(default_factory=list)

    @property
    def failed_steps(self) -> list[StepOutcome]:
        """Étapes best-effort qui ont échoué sans interrompre la suppression."""
        return [s for s in self.steps if not s.ok]
