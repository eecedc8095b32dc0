"""Service de suppression de profil partagé par l'API et l'outil opérateur.

Enveloppe `DeletionOrchestrator.delete` avec les préoccupations transverses: métriques Prometheus,
latence et journal d'audit. Chaque tentative produit une ligne d'audit, y compris quand une
exception inattendue interrompt la suppression (elle ressort alors en `Internal`).
"""

from __future__ import annotations

import time

import structlog

from backend.app.metrics import (
    CLEANUP_FAILURES_TOTAL,
    PROFILE_DELETION_LATENCY,
    PROFILE_DELETIONS_TOTAL,
    PURGED_DOCUMENTS_TOTAL,
)
from backend.core.container import Container
from backend.domain.deletion import DeletionRequest, DeletionResult, StepOutcome
from backend.domain.errors import DeletionError, Internal
from backend.infra.ops.audit import append_deletion_audit

log = structlog.get_logger(__name__)


def _record_steps(steps: list[StepOutcome]) -> int:
    deleted = 0
    for step in steps:
        if not step.ok:
            CLEANUP_FAILURES_TOTAL.labels(step=step.name).inc()
        elif step.counts_documents:
            PURGED_DOCUMENTS_TOTAL.labels(step=step.name).inc(step.count)
            deleted += step.count
    return deleted


def run_deletion(
    container: Container,
    request: DeletionRequest,
    *,
    entrypoint: str,
    actor: str,
) -> DeletionResult:
    """Exécute une suppression et en trace le résultat.

    Raises:
        DeletionError: erreur de l'orchestrateur, relancée telle quelle après audit; toute autre
            exception est journalisée, auditée puis convertie en `Internal`.
    """
    start = time.perf_counter()
    try:
        result = container.orchestrator().delete(request)
    except DeletionError as exc:
        _fail(container, request, entrypoint, actor, exc.code, _record_steps(exc.steps))
        raise
    except Exception as exc:
        log.exception("deletion_crashed", profile=request.profile_id, entrypoint=entrypoint)
        _fail(container, request, entrypoint, actor, Internal.code, 0)
        raise Internal("Unexpected failure while deleting profile.") from exc
    finally:
        PROFILE_DELETION_LATENCY.labels(entrypoint=entrypoint).observe(
            time.perf_counter() - start
        )

    deleted = _record_steps(result.steps)
    PROFILE_DELETIONS_TOTAL.labels(entrypoint=entrypoint, result="success").inc()
    _audit(container, result.profile_id, actor, entrypoint, "success", None, deleted)
    return result


def _fail(
    container: Container,
    request: DeletionRequest,
    entrypoint: str,
    actor: str,
    code: str,
    deleted: int,
) -> None:
    PROFILE_DELETIONS_TOTAL.labels(entrypoint=entrypoint, result=code).inc()
    _audit(container, request.profile_id, actor, entrypoint, "error", code, deleted)


def _audit(
    container: Container,
    profile_id: str | None,
    actor: str,
    entrypoint: str,
    status: str,
    error: str | None,
    deleted: int,
) -> None:
    if not container.settings.AUDIT_ENABLED:
        return
    append_deletion_audit(
        container.settings.AUDIT_DIR,
        profile_id=profile_id,
        actor=actor,
        entrypoint=entrypoint,
        status=status,
        error=error,
        deleted=deleted,
    )
