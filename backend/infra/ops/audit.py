"""Journal d'audit NDJSON des suppressions de profils (RGPD: droit à l'oubli).

Chaque tentative de suppression ajoute une ligne JSON dans `{AUDIT_DIR}/profile_deletion.log`.
L'écriture du journal ne fait jamais échouer la suppression.
"""

from __future__ import annotations

import getpass
import json
import os
import time
from typing import Any

import structlog

AUDIT_FILENAME = "profile_deletion.log"
MAX_AUDIT_BYTES = 10 * 1024 * 1024

log = structlog.get_logger(__name__)


def resolve_actor(default: str = "service") -> str:
    """Identité de l'acteur: PURGE_ACTOR, sinon utilisateur système."""
    actor = os.getenv("PURGE_ACTOR")
    if actor:
        return actor
    try:
        return getpass.getuser() or default
    except (KeyError, OSError):
        return default


def append_deletion_audit(
    audit_dir: str,
    *,
    profile_id: str | None,
    actor: str,
    entrypoint: str,
    status: str,
    error: str | None = None,
    deleted: int = 0,
    extra: dict[str, Any] | None = None,
) -> str | None:
    """Ajoute un enregistrement d'audit et retourne le chemin du journal (None si échec)."""
    rec = {
        "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "profile_id": profile_id,
        "actor": actor,
        "action": "delete_profile",
        "entrypoint": entrypoint,
        "status": status,
        "error": error,
        "deleted": deleted,
        **(extra or {}),
    }
    path = os.path.join(audit_dir, AUDIT_FILENAME)
    try:
        os.makedirs(audit_dir, exist_ok=True)
        # rotation simple au-delà de 10MB
        if os.path.exists(path) and os.path.getsize(path) > MAX_AUDIT_BYTES:
            os.replace(path, path + ".1")
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(rec) + "\n")
    except OSError as exc:
        log.warning("audit_write_failed", path=path, error=str(exc))
        return None
    return path
