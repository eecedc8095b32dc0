"""
Orchestration de la suppression en cascade d'un profil.

Séquence: autorisation → arêtes entrantes → purge followers/following/likes → présences par
appareil → présences par balise (si connue) → notifications → document racine.

Le magasin n'offre pas de transaction sur des ensembles non bornés: la suppression est une suite
ordonnée d'étapes idempotentes, sans compensation. Une relance après échec partiel converge vers le
même état final.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from backend.core.settings import Settings
from backend.domain.authorization import BEACON_FIELD, AuthorizationResolver
from backend.domain.correlations import NotificationCleaner, PresenceCleaner
from backend.domain.deletion import (
    DeletionRequest,
    DeletionResult,
    DeletionState,
    StepOutcome,
    StepPolicy,
)
from backend.domain.errors import (
    DeletionError,
    Internal,
    NotFound,
    TransientCleanupError,
    Unauthenticated,
)
from backend.domain.purger import DEFAULT_BATCH_SIZE, BatchPurger
from backend.domain.references import ReferenceScanner
from backend.infra.store.base import DocumentStore, StoreError, child_path

OWNED_SUBCOLLECTIONS = ("followers", "following", "likes")


@dataclass(frozen=True)
class DeletionStep:
    """Étape du plan de suppression."""

    name: str
    policy: StepPolicy
    run: Callable[[], int]
    # False quand `run` compte des appels de suppression et non des documents supprimés
    counts_documents: bool = True


class DeletionOrchestrator:
    """Enchaîne les composants de suppression et applique la politique d'échec par étape."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        profiles_collection: str = "profiles",
        presences_collection: str = "streetpass_presences",
        notifications_collection: str = "notifications",
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self.store = store
        self.profiles = profiles_collection
        self.resolver = AuthorizationResolver(store, profiles_collection)
        self.scanner = ReferenceScanner(store, profiles_collection)
        self.purger = BatchPurger(store, batch_size)
        self.presences = PresenceCleaner(store, presences_collection)
        self.notifications = NotificationCleaner(store, notifications_collection)
        self._log = structlog.get_logger(__name__).bind(component="deletion_orchestrator")

    @classmethod
    def from_settings(cls, store: DocumentStore, settings: Settings) -> DeletionOrchestrator:
        """Construit l'orchestrateur avec les noms de collections configurés."""
        return cls(
            store,
            profiles_collection=settings.PROFILES_COLLECTION,
            presences_collection=settings.PRESENCES_COLLECTION,
            notifications_collection=settings.NOTIFICATIONS_COLLECTION,
            batch_size=settings.PURGE_BATCH_SIZE,
        )

    def plan(self, target_id: str, beacon_id: str | None) -> list[DeletionStep]:
        """Construit la liste ordonnée des étapes pour `target_id`."""
        steps = [
            DeletionStep(
                "inbound_edges",
                StepPolicy.BEST_EFFORT,
                lambda: self.scanner.remove_inbound_edges(target_id),
                counts_documents=False,
            )
        ]
        for sub in OWNED_SUBCOLLECTIONS:
            path = child_path(self.profiles, target_id, sub)
            steps.append(
                DeletionStep(
                    f"purge_{sub}",
                    StepPolicy.BEST_EFFORT,
                    lambda p=path: self.purger.purge(p),
                )
            )
        steps.append(
            DeletionStep(
                "presences_by_device",
                StepPolicy.BEST_EFFORT,
                lambda: self.presences.clean_by_device(target_id),
            )
        )
        if beacon_id:
            steps.append(
                DeletionStep(
                    "presences_by_beacon",
                    StepPolicy.BEST_EFFORT,
                    lambda: self.presences.clean_by_beacon(beacon_id),
                )
            )
        steps.append(
            DeletionStep(
                "notifications",
                StepPolicy.BEST_EFFORT,
                lambda: self.notifications.clean(target_id),
            )
        )
        steps.append(
            DeletionStep(
                "root_document",
                StepPolicy.FAIL_FAST,
                lambda: self._delete_root(target_id),
            )
        )
        return steps

    def delete(self, request: DeletionRequest) -> DeletionResult:
        """Exécute la suppression complète décrite par `request`.

        Raises:
            Unauthenticated, NotFound, PermissionDenied: résolution/autorisation refusée.
            Internal: échec de l'autorisation ou de la suppression du document racine.
        """
        state = DeletionState.RESOLVING
        outcomes: list[StepOutcome] = []
        log = self._log.bind(caller=request.caller_id, trusted=request.trusted)
        try:
            if request.trusted:
                if not request.profile_id:
                    raise NotFound("A profile id is required.")
                target_id = request.profile_id
                beacon_id = request.beacon_id or self._stored_beacon(target_id)
            else:
                if not request.caller_id:
                    raise Unauthenticated()
                target_id = self.resolver.resolve(request.caller_id, request.profile_id)
                state = self._transition(log, DeletionState.AUTHORIZING, target_id)
                stored_beacon = self.resolver.authorize(target_id, request.caller_id)
                beacon_id = request.beacon_id or stored_beacon

            state = self._transition(log, DeletionState.PURGING, target_id)
            *cleanup, final = self.plan(target_id, beacon_id)
            for step in cleanup:
                outcomes.append(self._run_step(log, step))

            state = self._transition(log, DeletionState.FINALIZING, target_id)
            outcomes.append(self._run_step(log, final))
        except DeletionError as exc:
            exc.state = state
            exc.steps = outcomes
            log.error("deletion_failed", state=state.value, code=exc.code, error=exc.message)
            raise

        log.info(
            "deletion_completed",
            target=target_id,
            beacon=beacon_id,
            failed_steps=[o.name for o in outcomes if not o.ok],
        )
        return DeletionResult(
            profile_id=target_id,
            beacon_id=beacon_id,
            state=DeletionState.COMPLETED,
            steps=outcomes,
        )

    def _run_step(self, log, step: DeletionStep) -> StepOutcome:
        try:
            count = step.run()
        except Exception as exc:
            if step.policy is StepPolicy.FAIL_FAST:
                if isinstance(exc, DeletionError) and not isinstance(exc, TransientCleanupError):
                    raise
                raise Internal(f"Step {step.name} failed.") from exc
            # toute panne d'une étape best-effort est absorbée, quelle que soit sa nature
            log.warning(
                "cleanup_step_failed",
                step=step.name,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return StepOutcome(
                step.name,
                step.policy,
                ok=False,
                error=str(exc),
                counts_documents=step.counts_documents,
            )
        return StepOutcome(
            step.name, step.policy, count=count, counts_documents=step.counts_documents
        )

    def _delete_root(self, target_id: str) -> int:
        try:
            self.store.delete(self.profiles, target_id)
        except StoreError as exc:
            raise Internal("Failed to delete profile.") from exc
        return 1

    def _stored_beacon(self, target_id: str) -> str | None:
        try:
            data = self.store.get(self.profiles, target_id)
        except StoreError as exc:
            self._log.warning("stored_beacon_lookup_failed", target=target_id, error=str(exc))
            return None
        return (data or {}).get(BEACON_FIELD) or None

    @staticmethod
    def _transition(log, state: DeletionState, target_id: str) -> DeletionState:
        log.debug("deletion_state", state=state.value, target=target_id)
        return state
