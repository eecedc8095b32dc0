"""Outil opérateur: suppression d'un profil et de toutes ses références.

ATTENTION: opération destructive. Faire un export Firestore avant de lancer.

Usage:
  python -m backend.scripts.delete_profile --profileId=<PROFILE_ID> [--beaconId=<BEACON_ID>]
      [--project=<PROJECT_ID>] [--batch-size=N] [--yes]

Identifiants: GOOGLE_APPLICATION_CREDENTIALS, sinon `serviceAccountKey.json` placé à côté de ce
script (ou SERVICE_ACCOUNT_KEY_PATH).

Codes de sortie: 0 succès ou abandon, 1 échec de suppression, 2 argument manquant ou invalide.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from backend.core.container import Container
from backend.core.logging import setup_logging
from backend.core.settings import MAX_BATCH_SIZE, get_settings
from backend.domain.deletion import DeletionRequest
from backend.domain.errors import DeletionError
from backend.infra.ops.audit import resolve_actor
from backend.services.profile_deletion import run_deletion

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Construit le parseur d'arguments de l'outil."""
    parser = argparse.ArgumentParser(
        description="Delete a profile and every reference to it (destructive)."
    )
    parser.add_argument("--profileId", "-p", dest="profile_id", help="Profile document id")
    parser.add_argument("--beaconId", "-b", dest="beacon_id", help="Beacon id to clean up")
    parser.add_argument(
        "--project", "--projectId", dest="project_id", help="Firestore project id"
    )
    parser.add_argument("--batch-size", type=int, default=None, help="Purge batch size")
    parser.add_argument(
        "--yes", "-y", action="store_true", help="Skip the confirmation prompt"
    )
    return parser


def prompt_yes_no(question: str) -> bool:
    """Pose une question; seul `y`/`yes` (insensible à la casse) confirme."""
    try:
        answer = input(question)
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _make_container(args: argparse.Namespace) -> Container:
    settings = get_settings()
    overrides = {}
    if args.project_id:
        overrides["FIRESTORE_PROJECT_ID"] = args.project_id
    if args.batch_size is not None:
        overrides["PURGE_BATCH_SIZE"] = args.batch_size
    if overrides:
        settings = settings.model_copy(update=overrides)
    return Container(settings, script_dir=Path(__file__).resolve().parent)


def main(argv: list[str] | None = None, container: Container | None = None) -> int:
    """Point d'entrée principal; retourne le code de sortie."""
    args = build_parser().parse_args(argv)
    if not args.profile_id:
        print("Missing --profileId argument", file=sys.stderr)
        return EXIT_USAGE
    if args.batch_size is not None and not 0 < args.batch_size <= MAX_BATCH_SIZE:
        print(f"--batch-size must be between 1 and {MAX_BATCH_SIZE}", file=sys.stderr)
        return EXIT_USAGE

    print("This operation is destructive. Make sure you have a backup.")
    print(f"profileId: {args.profile_id} beaconId: {args.beacon_id or '<none>'}")
    if not args.yes and not prompt_yes_no("Proceed with deletion? (y/N): "):
        print("Aborted by user.")
        return EXIT_OK

    owns_container = container is None
    if container is None:
        container = _make_container(args)
    setup_logging(debug=container.settings.APP_DEBUG)
    request = DeletionRequest(
        profile_id=args.profile_id, beacon_id=args.beacon_id, trusted=True
    )
    try:
        result = run_deletion(container, request, entrypoint="cli", actor=resolve_actor("operator"))
    except DeletionError as exc:
        print(f"Failed to complete deletion: [{exc.code}] {exc.message}", file=sys.stderr)
        return EXIT_FAILED
    finally:
        if owns_container:
            container.close()

    for step in result.failed_steps:
        print(f"warning: step {step.name} failed: {step.error}", file=sys.stderr)
    print("Deletion completed.")
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - script entry
    sys.exit(main())
